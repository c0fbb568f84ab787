"""Tests for cart presentation adapters and the composition root"""
import json
from dataclasses import replace

import pytest

from storefront.app import Storefront, build_asset_index, create_storefront
from storefront.assets import AssetIndex
from storefront.cart import CartStore
from storefront.events import TOPIC_CART_OPEN, EventChannel
from storefront.presenters import CartPanel, present_cart
from tests.conftest import MemoryCartStorage


class TestPresentCart:
    """Tests for present_cart."""

    def test_lines_with_images_and_totals(self, resolver, memory_storage):
        store = CartStore(memory_storage)
        store.add({"id": "p1", "name": "Brake Pads", "price": 20, "imageUrl": "/images/Brake-Pads.jpg"}, 2)
        store.add({"id": "p2", "name": "Mystery Part", "price": "5.25", "imageUrl": "https://cdn.example/m.png"})

        view = present_cart(store, resolver)

        assert view["count"] == 3
        assert view["subtotal"] == 45.25
        assert view["subtotal_display"] == "$45.25"
        assert view["items"][0]["image"] == {"network": "https://cdn.example/m.png"}
        assert view["items"][1]["image"] == {"local": 0}
        assert view["items"][1]["line_total"] == 40.0

    def test_empty_cart(self, resolver, memory_storage):
        view = present_cart(CartStore(memory_storage), resolver)

        assert view["items"] == []
        assert view["count"] == 0
        assert view["subtotal_display"] == "$0.00"


class TestCartPanel:
    """Tests for the quick-cart panel wiring."""

    def test_opens_on_event_from_another_surface(self, resolver, memory_storage):
        events = EventChannel()
        store = CartStore(memory_storage, events=events)
        panel = CartPanel(events, store, resolver)

        assert panel.render() is None

        # Product list: add to cart, then ask the panel to open
        store.add({"id": "p1", "name": "Engine"})
        events.publish(TOPIC_CART_OPEN)

        assert panel.visible is True
        assert panel.badge_count == 1
        assert panel.render()["items"][0]["image"] == {"local": 2}

        panel.close()
        assert panel.render() is None

    def test_detach_stops_listening(self, resolver, memory_storage):
        events = EventChannel()
        store = CartStore(memory_storage, events=events)
        panel = CartPanel(events, store, resolver)

        panel.detach()
        store.add({"id": "p1"}, 4)
        events.publish(TOPIC_CART_OPEN)

        assert panel.visible is False
        assert panel.badge_count == 0


class TestCreateStorefront:
    """Tests for the composition root."""

    @pytest.mark.asyncio
    async def test_loads_persisted_cart(self, settings, asset_index):
        storage = MemoryCartStorage([{"id": "p1", "quantity": 2, "name": "Engine"}])

        app = await create_storefront(settings, storage=storage, asset_index=asset_index)

        assert isinstance(app, Storefront)
        assert app.cart.total_count() == 2
        assert app.resolver.resolve("disc.jpg").uri == "http://api.test/images/disc.jpg"
        await app.aclose()

    @pytest.mark.asyncio
    async def test_shared_channel_and_flush_on_close(self, settings, asset_index):
        storage = MemoryCartStorage()
        app = await create_storefront(settings, storage=storage, asset_index=asset_index)
        panel = CartPanel(app.events, app.cart, app.resolver)

        app.cart.add({"id": "p1"}, 3)
        app.events.publish(TOPIC_CART_OPEN)
        await app.aclose()

        assert panel.visible is True
        assert storage.payload == [{"id": "p1", "quantity": 3}]

    @pytest.mark.asyncio
    async def test_file_backend_from_settings(self, settings, asset_index):
        app = await create_storefront(settings, asset_index=asset_index)
        app.cart.add({"id": "p9", "name": "Visa"})
        await app.aclose()

        with open(settings.cart_storage_path, encoding="utf-8") as f:
            assert json.load(f) == [{"name": "Visa", "id": "p9", "quantity": 1}]

    def test_build_asset_index(self, settings, tmp_path):
        assert len(build_asset_index(settings).files) > 0

        (tmp_path / "Engine.jpg").write_bytes(b"")
        index = build_asset_index(replace(settings, assets_dir=str(tmp_path)))
        assert isinstance(index, AssetIndex)
        assert index.files == ["Engine.jpg"]
