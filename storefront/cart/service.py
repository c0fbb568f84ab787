"""Cart store: authoritative in-memory cart with a durable snapshot."""
import asyncio
from decimal import Decimal
from typing import Any, List, Mapping, Optional

from storefront.errors import WARN_CART_LINE_SKIPPED, WARN_CART_SNAPSHOT_CORRUPT
from storefront.events import TOPIC_CART_CHANGED, EventChannel
from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.money import to_float
from . import models
from .models import CartLine
from .storage import CartStorage

logger = get_logger(__name__)


class CartStore:
    """
    Owns the cart lines and keeps storage in sync.

    Mutations are synchronous: the new state is computed by the pure
    functions in .models, swapped in, and then a snapshot write is scheduled.
    Writes run on a single background task that always saves the newest
    pending snapshot, so the last write reflects the latest state.
    Storage failures are logged and never reach the caller.
    """

    def __init__(self, storage: CartStorage, events: Optional[EventChannel] = None):
        self._storage = storage
        self._events = events
        self._lines: List[CartLine] = []
        self._pending: Optional[List[dict]] = None
        self._writer: Optional[asyncio.Task] = None
        self._mutated = False

    # ==================== READ ====================

    @property
    def lines(self) -> List[CartLine]:
        """Copy of the current lines; mutating it does not affect the store."""
        return [line.copy() for line in self._lines]

    def get(self, line_id: Any) -> Optional[CartLine]:
        idx = models.index_of(self._lines, line_id)
        return self._lines[idx].copy() if idx >= 0 else None

    def total_count(self) -> int:
        return models.total_count(self._lines)

    def subtotal(self) -> Decimal:
        return models.subtotal(self._lines)

    def summary(self) -> dict:
        """Cart summary for cart surfaces."""
        if not self._lines:
            return {
                "is_empty": True,
                "total_items": 0,
                "items": [],
                "subtotal": 0.0,
            }

        return {
            "is_empty": False,
            "total_items": self.total_count(),
            "items": [
                {
                    "id": line.id,
                    "name": line.snapshot.get("name") or line.snapshot.get("title") or "",
                    "quantity": line.quantity,
                    "unit_price": to_float(line.price),
                    "total": to_float(line.line_total),
                }
                for line in self._lines
            ],
            "subtotal": to_float(self.subtotal()),
        }

    # ==================== MUTATE ====================

    def add(self, product: Mapping[str, Any], quantity: int = 1) -> None:
        """Add product (merging by id). Raises ValueError if it has no id."""
        self._commit(models.add_line(self._lines, product, quantity))

    def update_quantity(self, line_id: Any, delta: int) -> None:
        """Change a line's quantity by delta; at zero or below it is removed."""
        lines = models.change_quantity(self._lines, line_id, delta)
        if lines is self._lines:
            logger.debug(f"update_quantity: no line {sanitize_id_for_logging(line_id)}")
            return
        self._commit(lines)

    def remove(self, line_id: Any) -> None:
        self._commit(models.remove_line(self._lines, line_id))

    def clear(self) -> None:
        self._commit([])

    def _commit(self, lines: List[CartLine]) -> None:
        self._lines = lines
        self._mutated = True
        self._schedule_persist()
        if self._events is not None:
            self._events.publish(TOPIC_CART_CHANGED, self.total_count())

    # ==================== PERSISTENCE ====================

    async def load(self) -> None:
        """Load the persisted snapshot; any failure leaves an empty cart."""
        try:
            payload = await self._storage.load()
        except Exception as e:
            logger.error(f"Failed to load cart snapshot: {e}", exc_info=True)
            return

        if payload is None:
            return
        if not isinstance(payload, list):
            logger.warning(f"{WARN_CART_SNAPSHOT_CORRUPT}: got {type(payload).__name__}")
            return

        def on_skip(index: int, error: Exception) -> None:
            logger.warning(f"{WARN_CART_LINE_SKIPPED} #{index}: {error}")

        lines = models.lines_from_records(payload, on_skip=on_skip)

        if self._mutated:
            # The user changed the cart while the snapshot was loading
            logger.info("Cart mutated before snapshot loaded; keeping in-memory state")
            return

        self._lines = lines
        logger.info(f"Loaded cart with {len(lines)} line(s)")

    def _schedule_persist(self) -> None:
        self._pending = models.lines_to_records(self._lines)
        if self._writer is not None and not self._writer.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop yet: the snapshot waits for flush()
            return
        self._writer = loop.create_task(self._drain())

    async def _drain(self) -> None:
        while self._pending is not None:
            records, self._pending = self._pending, None
            try:
                await self._storage.save(records)
            except Exception as e:
                logger.error(f"Failed to save cart snapshot: {e}", exc_info=True)

    async def flush(self) -> None:
        """Wait until no snapshot write is pending or in flight."""
        while True:
            writer = self._writer
            if writer is not None and not writer.done():
                await writer
            elif self._pending is not None:
                self._writer = asyncio.get_running_loop().create_task(self._drain())
            else:
                return
