"""
Read views for cart surfaces.

The cart store and the asset resolver never call each other; surfaces
compose them here.
"""
from typing import Any, Callable, Dict, List, Optional

from storefront.assets.resolver import AssetResolver
from storefront.cart.service import CartStore
from storefront.events import TOPIC_CART_CHANGED, TOPIC_CART_OPEN, EventChannel
from storefront.money import format_money, to_float


def present_cart(store: CartStore, resolver: AssetResolver) -> Dict[str, Any]:
    """What a cart panel renders: lines with images, count and subtotal."""
    items: List[Dict[str, Any]] = []
    for line in store.lines:
        product = dict(line.snapshot, id=line.id)
        items.append({
            "id": line.id,
            "name": line.snapshot.get("name") or line.snapshot.get("title") or "",
            "quantity": line.quantity,
            "unit_price": to_float(line.price),
            "line_total": to_float(line.line_total),
            "image": resolver.resolve_product(product).as_dict(),
        })

    subtotal = store.subtotal()
    return {
        "items": items,
        "count": store.total_count(),
        "subtotal": to_float(subtotal),
        "subtotal_display": format_money(subtotal),
    }


class CartPanel:
    """
    Quick-cart panel state.

    Opens when any surface publishes TOPIC_CART_OPEN and keeps a badge count
    from TOPIC_CART_CHANGED.
    """

    def __init__(self, events: EventChannel, store: CartStore, resolver: AssetResolver):
        self.store = store
        self.resolver = resolver
        self.visible = False
        self.badge_count = store.total_count()
        self._unsubscribers: List[Callable[[], None]] = [
            events.subscribe(TOPIC_CART_OPEN, self._on_open),
            events.subscribe(TOPIC_CART_CHANGED, self._on_changed),
        ]

    def _on_open(self, payload: Optional[Any] = None) -> None:
        self.visible = True

    def _on_changed(self, count: Any) -> None:
        self.badge_count = count if isinstance(count, int) else self.store.total_count()

    def close(self) -> None:
        self.visible = False

    def render(self) -> Optional[Dict[str, Any]]:
        if not self.visible:
            return None
        return present_cart(self.store, self.resolver)

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
