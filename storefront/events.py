"""
Event Channel - named-topic publish/subscribe between UI surfaces.

Lets surfaces that share no parent talk to each other, e.g. a product list's
"add to cart" button opening the quick-cart panel mounted at the app root.

One channel is created per process by the composition root and passed to
the components that need it.
"""
from typing import Any, Callable, Dict, List

from storefront.logging import get_logger

logger = get_logger(__name__)

Handler = Callable[[Any], None]

TOPIC_CART_OPEN = "cart.open"
TOPIC_CART_CHANGED = "cart.changed"


class _Subscription:
    __slots__ = ("handler",)

    def __init__(self, handler: Handler):
        self.handler = handler


class EventChannel:
    """
    Process-wide topic registry.

    Handlers run synchronously, in subscription order, on the caller's
    thread. Handlers must not raise: an exception propagates out of
    publish() and later handlers for that publish are skipped.
    """

    def __init__(self):
        self._topics: Dict[str, List[_Subscription]] = {}

    def subscribe(self, topic: str, handler: Handler) -> Callable[[], None]:
        """Register handler for topic; returns a function that removes it."""
        subscription = _Subscription(handler)
        self._topics.setdefault(topic, []).append(subscription)

        def unsubscribe() -> None:
            subscribers = self._topics.get(topic, [])
            for i, existing in enumerate(subscribers):
                if existing is subscription:
                    del subscribers[i]
                    return

        return unsubscribe

    def publish(self, topic: str, payload: Any = None) -> None:
        # Snapshot so handlers may (un)subscribe while being invoked
        subscribers = list(self._topics.get(topic, []))
        logger.debug(f"publish {topic} -> {len(subscribers)} handler(s)")
        for subscription in subscribers:
            subscription.handler(payload)

    def subscriber_count(self, topic: str) -> int:
        return len(self._topics.get(topic, []))

    def has_topic(self, topic: str) -> bool:
        return topic in self._topics
