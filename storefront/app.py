"""
Composition root.

Creates the process-wide services once at startup and hands them to the
surfaces that need them.
"""
from dataclasses import dataclass
from typing import Optional

from storefront.assets import AssetIndex, AssetResolver
from storefront.assets.manifest import COMPACT_ALIASES
from storefront.cart import CartStore, build_cart_storage
from storefront.cart.storage import CartStorage
from storefront.catalog import CatalogClient
from storefront.config import Settings, load_settings
from storefront.events import EventChannel
from storefront.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Storefront:
    settings: Settings
    events: EventChannel
    cart: CartStore
    assets: AssetIndex
    resolver: AssetResolver
    catalog: CatalogClient

    async def aclose(self) -> None:
        """Flush pending cart writes and close network clients."""
        await self.cart.flush()
        await self.catalog.aclose()


def build_asset_index(settings: Settings) -> AssetIndex:
    if settings.assets_dir:
        return AssetIndex.from_directory(settings.assets_dir, COMPACT_ALIASES)
    return AssetIndex.bundled()


async def create_storefront(
    settings: Optional[Settings] = None,
    *,
    storage: Optional[CartStorage] = None,
    asset_index: Optional[AssetIndex] = None,
    events: Optional[EventChannel] = None,
    catalog: Optional[CatalogClient] = None,
) -> Storefront:
    """Build all services and load the persisted cart."""
    settings = settings or load_settings()
    events = events or EventChannel()

    cart = CartStore(storage or build_cart_storage(settings), events=events)
    await cart.load()

    index = asset_index or build_asset_index(settings)
    resolver = AssetResolver(index, settings.api_base)

    logger.info(
        f"Storefront ready: api={settings.api_base} storage={settings.cart_storage_backend} "
        f"assets={len(index)} cart_items={cart.total_count()}"
    )
    return Storefront(
        settings=settings,
        events=events,
        cart=cart,
        assets=index,
        resolver=resolver,
        catalog=catalog or CatalogClient(settings),
    )
