"""
Storefront Settings

Environment-driven configuration for the storefront client core:
- API origin used for catalog fetches and network image references
- Durable cart storage (Upstash Redis or a local JSON snapshot)
- Bundled asset directory for the local asset index
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_API_BASE = "http://localhost:5000"
DEFAULT_CART_PATH = str(Path.home() / ".storefront" / "cart.json")


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_float(*keys: str, default: float) -> float:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return float(v)


@dataclass(frozen=True)
class Settings:
    api_base: str
    redis_url: str
    redis_token: str
    cart_storage_backend: str
    cart_storage_path: str
    cart_owner_id: str
    assets_dir: str | None
    catalog_timeout: float

    def api_url(self, path: str | None = None) -> str:
        """
        Build a backend API URL.

        Paths already under /api are appended verbatim; everything else is
        placed under /api so callers never double-prefix.
        """
        if not path:
            return f"{self.api_base}/api"
        if path.startswith("/api"):
            return f"{self.api_base}{path}"
        if path.startswith("/"):
            return f"{self.api_base}/api{path}"
        return f"{self.api_base}/api/{path}"


def load_settings() -> Settings:
    """Read settings from the environment."""
    redis_url = _get_env("UPSTASH_REDIS_REST_URL", default="") or ""
    redis_token = _get_env("UPSTASH_REDIS_REST_TOKEN", default="") or ""
    default_backend = "redis" if redis_url and redis_token else "file"

    return Settings(
        api_base=(_get_env("STOREFRONT_API_BASE", "API_BASE", default=DEFAULT_API_BASE) or DEFAULT_API_BASE).rstrip("/"),
        redis_url=redis_url,
        redis_token=redis_token,
        cart_storage_backend=(_get_env("CART_STORAGE_BACKEND", default=default_backend) or default_backend).lower(),
        cart_storage_path=_get_env("CART_STORAGE_PATH", default=DEFAULT_CART_PATH) or DEFAULT_CART_PATH,
        cart_owner_id=_get_env("CART_OWNER_ID", default="local") or "local",
        assets_dir=_get_env("ASSETS_DIR", default=None),
        catalog_timeout=_get_float("CATALOG_TIMEOUT", default=5.0),
    )
