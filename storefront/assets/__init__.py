"""Image asset resolution: local asset index and the resolver chain."""
from .index import AssetIndex, make_key
from .resolver import (
    PLACEHOLDER_IMAGE,
    AssetResolver,
    LocalAsset,
    NetworkImage,
    ProductRef,
    ResolvedImage,
)

__all__ = [
    "AssetIndex",
    "AssetResolver",
    "LocalAsset",
    "NetworkImage",
    "PLACEHOLDER_IMAGE",
    "ProductRef",
    "ResolvedImage",
    "make_key",
]
