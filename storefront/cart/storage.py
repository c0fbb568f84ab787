"""Durable storage for the cart snapshot.

Both backends store the full line list under a single key as JSON. Load
returns the decoded payload (or None); validating its shape is the store's
job.
"""
import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any, List, Optional, Protocol

from storefront.config import Settings
from storefront.db import RedisKeys, get_redis
from storefront.errors import ERROR_UNKNOWN_STORAGE_BACKEND
from storefront.logging import get_logger

logger = get_logger(__name__)


class CartStorage(Protocol):
    async def load(self) -> Optional[Any]:
        ...

    async def save(self, records: List[dict]) -> None:
        ...


class RedisCartStorage:
    """Cart snapshot in Upstash Redis (no TTL: the cart survives restarts)."""

    def __init__(self, owner_id: str, redis=None, settings: Optional[Settings] = None):
        self.key = RedisKeys.cart_key(owner_id)
        self._redis = redis
        self._settings = settings

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis(self._settings)
        return self._redis

    async def load(self) -> Optional[Any]:
        data = await self.redis.get(self.key)
        if not data:
            return None
        return json.loads(data)

    async def save(self, records: List[dict]) -> None:
        await self.redis.set(self.key, json.dumps(records, ensure_ascii=False))


class JsonFileCartStorage:
    """Cart snapshot in a local JSON file, replaced atomically on save."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> Optional[Any]:
        if not self.path.exists():
            return None
        text = self.path.read_text(encoding="utf-8").strip()
        if text == "":
            return None
        return json.loads(text)

    def _write(self, records: List[dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".cart-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    async def load(self) -> Optional[Any]:
        return await asyncio.to_thread(self._read)

    async def save(self, records: List[dict]) -> None:
        await asyncio.to_thread(self._write, records)


def build_cart_storage(settings: Settings) -> CartStorage:
    """Pick the storage backend configured by CART_STORAGE_BACKEND."""
    backend = settings.cart_storage_backend
    if backend == "redis":
        return RedisCartStorage(settings.cart_owner_id, settings=settings)
    if backend == "file":
        return JsonFileCartStorage(settings.cart_storage_path)
    raise ValueError(f"{ERROR_UNKNOWN_STORAGE_BACKEND}: {backend}")
