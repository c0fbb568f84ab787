"""Cart package: line model, storage backends, and the cart store."""
from .models import CartLine
from .service import CartStore
from .storage import CartStorage, JsonFileCartStorage, RedisCartStorage, build_cart_storage

__all__ = [
    "CartLine",
    "CartStore",
    "CartStorage",
    "JsonFileCartStorage",
    "RedisCartStorage",
    "build_cart_storage",
]
