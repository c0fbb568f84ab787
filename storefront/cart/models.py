"""Cart line model and pure cart state transitions.

Every function here takes the current lines and returns a new list; none of
them perform I/O, so merge and decrement rules can be tested without storage.
"""
import copy
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from pydantic_core import to_jsonable_python

from storefront.errors import (
    ERROR_INVALID_DELTA,
    ERROR_INVALID_QUANTITY,
    ERROR_MISSING_PRODUCT_ID,
)
from storefront.money import multiply, round_money, to_decimal

# Keys that carry identity/quantity and never belong to the captured snapshot
_ID_KEYS = ("id", "_id")
_QUANTITY_KEYS = ("quantity", "qty")
_RESERVED_KEYS = frozenset(_ID_KEYS + _QUANTITY_KEYS)


def normalize_id(value: Any) -> Optional[str]:
    """Canonical line id: stripped string form, None for blank or missing."""
    if value is None or isinstance(value, bool):
        return None
    return str(value).strip() or None


def product_id_of(product: Mapping[str, Any]) -> Optional[str]:
    """Return the product's persistent identifier, or None when it has none."""
    for key in _ID_KEYS:
        line_id = normalize_id(product.get(key))
        if line_id:
            return line_id
    return None


def capture_snapshot(product: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Copy the non-identity fields of product as JSON-safe values.

    Decimals become strings and unknown objects their str(), so every
    snapshot can be written by the storage backends.
    """
    fields = {k: v for k, v in product.items() if k not in _RESERVED_KEYS}
    return to_jsonable_python(fields, fallback=str)


@dataclass
class CartLine:
    """One product entry in the cart."""
    id: str
    quantity: int
    snapshot: Dict[str, Any] = field(default_factory=dict)

    @property
    def price(self) -> Decimal:
        """Captured unit price (0 when missing or unparseable)."""
        return to_decimal(self.snapshot.get("price"))

    @property
    def line_total(self) -> Decimal:
        return round_money(multiply(self.price, self.quantity))

    def copy(self) -> "CartLine":
        return replace(self, snapshot=copy.deepcopy(self.snapshot))

    def to_dict(self) -> dict:
        """Flat record: snapshot fields plus id and quantity."""
        data = to_jsonable_python(self.snapshot, fallback=str)
        data["id"] = self.id
        data["quantity"] = self.quantity
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartLine":
        """
        Create from a stored record.

        Accepts legacy `_id`/`qty` keys. Raises ValueError for records that
        would break the line invariants (no id, quantity that is not a whole
        number of at least 1).
        """
        line_id = product_id_of(data)
        if line_id is None:
            raise ValueError(ERROR_MISSING_PRODUCT_ID)

        raw_qty = next((data[k] for k in _QUANTITY_KEYS if data.get(k) is not None), 1)
        if isinstance(raw_qty, bool):
            raise ValueError(ERROR_INVALID_QUANTITY)
        quantity = int(raw_qty)
        if isinstance(raw_qty, (float, Decimal)) and quantity != raw_qty:
            raise ValueError(ERROR_INVALID_QUANTITY)
        if quantity < 1:
            raise ValueError(ERROR_INVALID_QUANTITY)

        return cls(id=line_id, quantity=quantity, snapshot=capture_snapshot(data))


def index_of(lines: List[CartLine], line_id: Any) -> int:
    """Position of the line for line_id (matched in canonical form), or -1."""
    key = normalize_id(line_id)
    if key is None:
        return -1
    for i, line in enumerate(lines):
        if line.id == key:
            return i
    return -1


def add_line(lines: List[CartLine], product: Mapping[str, Any], quantity: int = 1) -> List[CartLine]:
    """
    Merge product into the cart.

    Known ids get their quantity increased (existing snapshot fields win);
    new ids are inserted at the front with a snapshot of the product.
    """
    line_id = product_id_of(product)
    if line_id is None:
        raise ValueError(ERROR_MISSING_PRODUCT_ID)
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
        raise ValueError(ERROR_INVALID_QUANTITY)

    idx = index_of(lines, line_id)
    if idx >= 0:
        updated = list(lines)
        updated[idx] = replace(lines[idx], quantity=lines[idx].quantity + quantity)
        return updated

    return [CartLine(id=line_id, quantity=quantity, snapshot=capture_snapshot(product))] + list(lines)


def change_quantity(lines: List[CartLine], line_id: Any, delta: int) -> List[CartLine]:
    """Apply delta to a line; lines reaching zero or below are removed."""
    if not isinstance(delta, int) or isinstance(delta, bool):
        raise ValueError(ERROR_INVALID_DELTA)

    idx = index_of(lines, line_id)
    if idx == -1:
        return lines

    new_quantity = lines[idx].quantity + delta
    if new_quantity <= 0:
        return lines[:idx] + lines[idx + 1:]

    updated = list(lines)
    updated[idx] = replace(lines[idx], quantity=new_quantity)
    return updated


def remove_line(lines: List[CartLine], line_id: Any) -> List[CartLine]:
    key = normalize_id(line_id)
    return [line for line in lines if line.id != key]


def total_count(lines: List[CartLine]) -> int:
    """Sum of quantities across all lines (not the number of lines)."""
    return sum(line.quantity for line in lines)


def subtotal(lines: List[CartLine]) -> Decimal:
    """Sum of price x quantity, rounded to cents."""
    return round_money(sum((multiply(line.price, line.quantity) for line in lines), Decimal("0")))


def lines_to_records(lines: List[CartLine]) -> List[dict]:
    return [line.to_dict() for line in lines]


def lines_from_records(records: Any, on_skip=None) -> List[CartLine]:
    """
    Rebuild lines from a stored payload.

    Non-list payloads yield an empty cart. Malformed records are skipped
    (reported through on_skip(index, error) when given); a repeated id is
    folded into the first line carrying it.
    """
    if not isinstance(records, list):
        return []

    lines: List[CartLine] = []
    for i, record in enumerate(records):
        try:
            if not isinstance(record, Mapping):
                raise ValueError(f"record is {type(record).__name__}, not an object")
            line = CartLine.from_dict(record)
        except (ValueError, TypeError, OverflowError) as e:
            if on_skip is not None:
                on_skip(i, e)
            continue

        idx = index_of(lines, line.id)
        if idx >= 0:
            lines[idx] = replace(lines[idx], quantity=lines[idx].quantity + line.quantity)
        else:
            lines.append(line)
    return lines
