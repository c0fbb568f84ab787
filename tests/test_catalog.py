"""Tests for catalog lookups and cart hydration"""
from decimal import Decimal

import httpx
import pytest

from storefront.assets import LocalAsset, NetworkImage
from storefront.catalog import CatalogClient, hydrate_lines, normalize_item

PRODUCTS = {
    "p1": {"product": {"name": "Brake Pads", "salePrice": 39.5, "price": 45, "images": ["/images/Brake-Pads.jpg"]}},
    "p2": {"title": "Turbo", "price": "120.00", "imageUrl": "https://cdn.example/turbo.png", "sku": "TURBOCHARGER7"},
}


def make_client(settings, handler):
    return CatalogClient(settings, transport=httpx.MockTransport(handler))


def catalog_handler(requests):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        product_id = request.url.path.rsplit("/", 1)[-1]
        if product_id in PRODUCTS:
            return httpx.Response(200, json=PRODUCTS[product_id])
        return httpx.Response(404, json={"error": "Product not found"})
    return handler


class TestCatalogClient:
    """Tests for CatalogClient.get_product."""

    @pytest.mark.asyncio
    async def test_unwraps_product_envelope(self, settings):
        requests = []
        client = make_client(settings, catalog_handler(requests))

        product = await client.get_product("p1")
        await client.aclose()

        assert product["name"] == "Brake Pads"
        assert str(requests[0].url) == "http://api.test/api/public/products/p1"

    @pytest.mark.asyncio
    async def test_bare_record(self, settings):
        client = make_client(settings, catalog_handler([]))

        product = await client.get_product("p2")
        await client.aclose()

        assert product["title"] == "Turbo"

    @pytest.mark.asyncio
    async def test_not_found_is_none(self, settings):
        client = make_client(settings, catalog_handler([]))

        assert await client.get_product("missing") is None
        await client.aclose()

    @pytest.mark.asyncio
    async def test_network_error_is_none(self, settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(settings, handler)

        assert await client.get_product("p1") is None
        await client.aclose()

    @pytest.mark.asyncio
    async def test_bad_json_is_none(self, settings):
        client = make_client(settings, lambda request: httpx.Response(200, text="<html>oops</html>"))

        assert await client.get_product("p1") is None
        await client.aclose()

    @pytest.mark.asyncio
    async def test_id_is_url_quoted(self, settings):
        requests = []
        client = make_client(settings, catalog_handler(requests))

        await client.get_product("a/b c")
        await client.aclose()

        assert requests[0].url.raw_path == b"/api/public/products/a%2Fb%20c"


class TestNormalizeItem:
    """Tests for hand-off record normalization."""

    def test_field_aliases(self):
        line = normalize_item({"_id": "x", "title": "Disc", "unitPrice": "12.5", "qty": 3})

        assert line.id == "x"
        assert line.name == "Disc"
        assert line.price == Decimal("12.5")
        assert line.quantity == 3

    def test_slug_id_from_name(self):
        line = normalize_item({"name": "Brake  Disc Kit"})

        assert line.id == "brake-disc-kit"

    def test_defaults(self):
        line = normalize_item({"productId": 5, "quantity": "lots"})

        assert line.id == "5"
        assert line.name == ""
        assert line.price == Decimal("0")
        assert line.quantity == 1


class TestHydrateLines:
    """Tests for hydrate_lines."""

    @pytest.mark.asyncio
    async def test_bare_id_is_completed_from_backend(self, settings, resolver):
        client = make_client(settings, catalog_handler([]))

        lines = await hydrate_lines([{"productId": "p1", "quantity": 2}], client, resolver)
        await client.aclose()

        line = lines[0]
        assert line.name == "Brake Pads"
        assert line.price == Decimal("39.5")
        assert line.quantity == 2
        assert line.image_url == "/images/Brake-Pads.jpg"
        assert line.images == ["/images/Brake-Pads.jpg"]
        assert line.image == LocalAsset(0)

    @pytest.mark.asyncio
    async def test_complete_items_are_not_fetched(self, settings, resolver):
        requests = []
        client = make_client(settings, catalog_handler(requests))

        lines = await hydrate_lines(
            [{"id": "p2", "name": "Turbo", "price": 10, "imageUrl": "https://cdn.example/t.png"}],
            client,
            resolver,
        )
        await client.aclose()

        assert requests == []
        assert lines[0].price == Decimal("10")
        assert lines[0].image == NetworkImage("https://cdn.example/t.png")

    @pytest.mark.asyncio
    async def test_existing_fields_kept_over_backend(self, settings, resolver):
        client = make_client(settings, catalog_handler([]))

        lines = await hydrate_lines([{"productId": "p2", "price": 99}], client, resolver)
        await client.aclose()

        assert lines[0].name == "Turbo"
        assert lines[0].price == Decimal("99")
        assert lines[0].image == NetworkImage("https://cdn.example/turbo.png")

    @pytest.mark.asyncio
    async def test_fetch_failure_keeps_partial_line(self, settings, resolver):
        client = make_client(settings, catalog_handler([]))

        lines = await hydrate_lines([{"productId": "gone", "name": "Engine"}], client, resolver)
        await client.aclose()

        assert lines[0].name == "Engine"
        assert lines[0].image == LocalAsset(2)

    @pytest.mark.asyncio
    async def test_order_preserved_and_junk_dropped(self, settings, resolver):
        client = make_client(settings, catalog_handler([]))

        lines = await hydrate_lines(
            [{"productId": "p2"}, "junk", {"productId": "p1"}],
            client,
            resolver,
        )
        await client.aclose()

        assert [line.id for line in lines] == ["p2", "p1"]

    @pytest.mark.asyncio
    async def test_non_list_returns_none(self, settings, resolver):
        client = make_client(settings, catalog_handler([]))

        assert await hydrate_lines({"productId": "p1"}, client, resolver) is None
        await client.aclose()
