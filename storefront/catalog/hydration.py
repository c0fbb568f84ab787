"""
Cart hydration for checkout hand-off.

Cart lines handed between screens may carry only a bare product id. Before
rendering, each line is normalized, completed from the backend when its name
or image is missing, and given a resolved image.
"""
import asyncio
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from storefront.assets.resolver import AssetResolver, ResolvedImage
from storefront.money import to_decimal
from .client import CatalogClient

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass
class HydratedLine:
    id: Optional[str]
    name: str
    price: Decimal
    quantity: int
    image_url: Optional[str] = None
    images: Optional[List[Any]] = None
    image: Optional[ResolvedImage] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_product(self) -> Dict[str, Any]:
        """Product record in the backend's field names (what the resolver reads)."""
        record = dict(self.extra)
        record.update({"id": self.id, "name": self.name, "price": self.price, "imageUrl": self.image_url})
        if self.images is not None:
            record["images"] = self.images
        return record


def _first(item: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = item.get(key)
        if value:
            return value
    return None


def _quantity(item: Mapping[str, Any]) -> int:
    raw = _first(item, "quantity", "qty")
    try:
        quantity = int(raw) if raw is not None else 1
    except (TypeError, ValueError):
        quantity = 1
    return quantity if quantity > 0 else 1


def normalize_item(item: Mapping[str, Any]) -> HydratedLine:
    """Map a loosely shaped hand-off record onto a HydratedLine (no I/O)."""
    product_id = _first(item, "productId", "_id", "id")
    name = _first(item, "name", "title") or ""
    if product_id is None and name:
        product_id = _WHITESPACE_RE.sub("-", str(name)).lower()

    return HydratedLine(
        id=str(product_id) if product_id is not None else None,
        name=str(name),
        price=to_decimal(_first(item, "price", "unitPrice")),
        quantity=_quantity(item),
        image_url=item.get("imageUrl") or None,
        extra={k: v for k, v in item.items() if k in ("sku", "category", "imageFilename")},
    )


async def hydrate_item(item: Mapping[str, Any], client: CatalogClient, resolver: AssetResolver) -> HydratedLine:
    line = normalize_item(item)
    fetch_id = _first(item, "productId", "_id", "id")

    if (not line.name or not line.image_url) and fetch_id:
        product = await client.get_product(str(fetch_id))
        if product:
            line.name = line.name or str(_first(product, "name", "title") or "")
            if not line.price:
                line.price = to_decimal(_first(product, "salePrice", "price"))
            if not line.image_url:
                images = product.get("images")
                first_image = images[0] if isinstance(images, list) and images else None
                line.image_url = product.get("imageUrl") or first_image
            gallery = product.get("images") or product.get("gallery")
            line.images = gallery if isinstance(gallery, list) else None
            for key in ("sku", "category", "imageFilename"):
                if key in product and key not in line.extra:
                    line.extra[key] = product[key]

    first_image = line.images[0] if line.images else None
    line.image = resolver.resolve(line.image_url or first_image, line.to_product())
    return line


async def hydrate_lines(
    raw_items: Any, client: CatalogClient, resolver: AssetResolver
) -> Optional[List[HydratedLine]]:
    """
    Hydrate a hand-off cart. Returns None when raw_items is not a list, so the
    caller falls back to the cart store's own lines.
    """
    if not isinstance(raw_items, list):
        return None
    items = [it for it in raw_items if isinstance(it, Mapping)]
    return list(await asyncio.gather(*(hydrate_item(it, client, resolver) for it in items)))
