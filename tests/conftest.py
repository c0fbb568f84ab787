"""Pytest configuration and fixtures"""
import os
from typing import Any, List, Optional
from unittest.mock import AsyncMock, Mock

import pytest

# Set test environment variables
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("STOREFRONT_API_BASE", "http://api.test")

from storefront.assets import AssetIndex, AssetResolver
from storefront.config import Settings


class MemoryCartStorage:
    """In-memory CartStorage that records every save."""

    def __init__(self, payload: Optional[Any] = None):
        self.payload = payload
        self.saves: List[List[dict]] = []

    async def load(self):
        return self.payload

    async def save(self, records):
        self.saves.append(records)
        self.payload = records


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a fake API and a temp cart file"""
    return Settings(
        api_base="http://api.test",
        redis_url="",
        redis_token="",
        cart_storage_backend="file",
        cart_storage_path=str(tmp_path / "cart.json"),
        cart_owner_id="test",
        assets_dir=None,
        catalog_timeout=1.0,
    )


@pytest.fixture
def memory_storage():
    return MemoryCartStorage()


@pytest.fixture
def mock_redis():
    """Mock async Upstash client backed by a dict"""
    data = {}
    redis = Mock()
    redis.data = data

    async def _get(key):
        return data.get(key)

    async def _set(key, value, **kwargs):
        data[key] = value
        return True

    redis.get = AsyncMock(side_effect=_get)
    redis.set = AsyncMock(side_effect=_set)
    return redis


@pytest.fixture
def asset_index():
    """Small asset index shaped like the bundled one"""
    return AssetIndex.from_filenames(
        [
            "Brake Pads.jpg",
            "Brake Disc.jpg",
            "Engine.jpg",
            "Steering Wheel.jpg",
            "Turbocharger.jpg",
            "Timing Belt.jpg",
            "Master Card.avif",
            "Register_Login_background.jpg",
        ],
        aliases={"mastercard": "Master Card.avif"},
    )


@pytest.fixture
def resolver(asset_index):
    return AssetResolver(asset_index, "http://api.test")


@pytest.fixture
def sample_product():
    """Sample product record as the backend returns it"""
    return {
        "_id": "prod-123",
        "name": "Brake Pads Ceramic",
        "price": 49.99,
        "sku": "BP1042",
        "category": "Brakes",
        "imageUrl": "/images/brake-pads.jpg",
    }


