"""
Asset Resolver - turn a loose image hint into something renderable.

Product records come from manual entry, imports and legacy data, so there is
no single reliable image key. The resolver walks a fixed chain of strategies
from most specific (explicit URL) to least (names derived from the title)
and always returns a value: the placeholder image is the last resort.

Chain (first match wins):
    1. no hint, no product        -> placeholder
    2. numeric asset handle       -> that local asset
    3. http(s) URL                -> the URL
    4. ".../images/<name>" path   -> local asset, else origin + path
    5. "/..." server path         -> local asset, else origin + path
    6. product fields             -> image URL filename, image filename,
                                     category, SKU base, display name
    7. bare filename              -> local asset, else origin/images/<hint>
    8. product image URL or placeholder
"""
import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from storefront.logging import get_logger, sanitize_string_for_logging
from .index import AssetIndex, strip_extension

logger = get_logger(__name__)

PLACEHOLDER_IMAGE = "placeholder.png"

_ABSOLUTE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)
_IMAGES_PATH_RE = re.compile(r"/images/(.+)$", re.IGNORECASE)
_LEADING_DIRS_RE = re.compile(r"^.*/")
_TRAILING_DIGITS_RE = re.compile(r"\d+$")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


# ==================== RESULT TYPES ====================

@dataclass(frozen=True)
class LocalAsset:
    """A bundled image, identified by its asset index handle."""
    handle: int

    def as_dict(self) -> dict:
        return {"local": self.handle}


@dataclass(frozen=True)
class NetworkImage:
    """A remotely hosted image."""
    uri: str

    def as_dict(self) -> dict:
        return {"network": self.uri}


ResolvedImage = Union[LocalAsset, NetworkImage]


# ==================== INPUT RECORD ====================

class ProductRef(BaseModel):
    """
    The image-relevant fields of a product record, every one optional.

    Accepts both the backend's camelCase names and snake_case. Values of the
    wrong shape are dropped rather than rejected.
    """
    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("id", "_id", "productId"))
    name: Optional[str] = Field(default=None, validation_alias=AliasChoices("name", "title"))
    image_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("image_url", "imageUrl"))
    image_filename: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("image_filename", "imageFilename")
    )
    category: Optional[str] = None
    sku: Optional[str] = None
    images: Optional[List[Any]] = Field(default=None, validation_alias=AliasChoices("images", "gallery"))

    class Config:
        extra = "ignore"

    @field_validator("image_url", "image_filename", mode="before")
    @classmethod
    def keep_strings_only(cls, v):
        # URLs and filenames are only usable as text
        return v if isinstance(v, str) else None

    @field_validator("id", "name", "category", "sku", mode="before")
    @classmethod
    def scalar_to_string(cls, v):
        if v is None or isinstance(v, (dict, list, tuple, set, bool)):
            return None
        return str(v)

    @field_validator("images", mode="before")
    @classmethod
    def list_or_none(cls, v):
        return list(v) if isinstance(v, (list, tuple)) else None

    @classmethod
    def from_record(cls, record: Any) -> Optional["ProductRef"]:
        """Build from a mapping or ProductRef; None stays None."""
        if record is None:
            return None
        if isinstance(record, ProductRef):
            return record
        if not isinstance(record, Mapping):
            logger.warning(f"Ignoring product record of type {type(record).__name__}")
            return cls()
        try:
            return cls.model_validate(dict(record))
        except ValidationError as e:
            logger.warning(f"Unusable product record fields: {e.error_count()} error(s)")
            return cls()


# ==================== RESOLVER ====================

class AssetResolver:
    """Resolves image hints against a local asset index and an API origin."""

    def __init__(self, index: AssetIndex, api_base: str):
        self.index = index
        self.api_base = api_base.rstrip("/")

    def _network(self, path: str) -> NetworkImage:
        return NetworkImage(f"{self.api_base}{path}")

    def _local(self, key: Optional[str]) -> Optional[LocalAsset]:
        handle = self.index.lookup(key)
        return LocalAsset(handle) if handle is not None else None

    def placeholder(self, name: Optional[str] = None) -> NetworkImage:
        return self._network(f"/images/{name or PLACEHOLDER_IMAGE}")

    def resolve(self, hint: Any = None, product: Any = None) -> ResolvedImage:
        """Resolve hint (string, asset handle, or None) for an optional product record."""
        ref = ProductRef.from_record(product)

        if (hint is None or hint == "") and ref is None:
            return self.placeholder()

        if isinstance(hint, int) and not isinstance(hint, bool):
            return LocalAsset(hint)

        s = str(hint) if hint is not None and hint != "" else None

        if s and _ABSOLUTE_URL_RE.match(s):
            return NetworkImage(s)

        if s:
            m = _IMAGES_PATH_RE.search(s)
            if m:
                found = self._local(strip_extension(m.group(1)).lower())
                if found:
                    return found
                return self._network(s if s.startswith("/") else f"/{s}")

        if s and s.startswith("/"):
            name = strip_extension(_LEADING_DIRS_RE.sub("", s, count=1)).lower()
            found = self._local(name)
            if found:
                return found
            return self._network(s)

        if ref is not None:
            found = self._from_product_fields(ref)
            if found:
                return found

        if s and "/" not in s:
            found = self._local(strip_extension(s).lower())
            if found:
                return found
            return self._network(f"/images/{s}")

        if ref is not None and ref.image_url:
            iv = ref.image_url
            if _ABSOLUTE_URL_RE.match(iv):
                return NetworkImage(iv)
            if iv.startswith("/"):
                return self._network(iv)
            return self._network(f"/images/{iv}")

        logger.debug(f"No image for hint {sanitize_string_for_logging(s)}; using placeholder")
        return self.placeholder(s)

    def _from_product_fields(self, ref: ProductRef) -> Optional[LocalAsset]:
        if ref.image_url:
            m = _IMAGES_PATH_RE.search(ref.image_url)
            if m:
                found = self._local(strip_extension(m.group(1)).lower())
                if found:
                    return found

        if ref.image_filename:
            found = self._local(strip_extension(ref.image_filename))
            if found:
                return found

        if ref.category:
            found = self._local(ref.category)
            if found:
                return found

        if ref.sku:
            found = self._local(_TRAILING_DIGITS_RE.sub("", ref.sku.lower()))
            if found:
                return found

        if ref.name:
            simple = _NON_ALNUM_RE.sub(" ", strip_extension(ref.name).lower()).strip()
            found = self._local(simple)
            if found:
                return found
            found = self._local(_WHITESPACE_RE.sub("", simple))
            if found:
                return found

        return None

    def resolve_product(self, product: Mapping[str, Any]) -> ResolvedImage:
        """Resolve using the hint cart surfaces pick from a product record."""
        images = product.get("images")
        first_image = images[0] if isinstance(images, list) and images else None
        hint = (
            product.get("imageUrl")
            or first_image
            or product.get("image")
            or product.get("imageKey")
            or product.get("name")
        )
        return self.resolve(hint, product)
