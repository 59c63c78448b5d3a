"""Shopping cart embedded in a consumer's user document.

A cart is an ordered list of ``{item, quantity}`` entries with at most one
entry per item and every quantity within [1, 999]. Additions clamp at the
upper bound instead of failing.
"""

import re

from pydantic import BaseModel, Field

from shared.exceptions import ValidationError

MIN_QUANTITY = 1
MAX_QUANTITY = 999

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class CartEntry(BaseModel):
    item: str
    quantity: int = Field(ge=MIN_QUANTITY, le=MAX_QUANTITY)


class Cart(BaseModel):
    owner_id: str
    entries: list[CartEntry] = Field(default_factory=list)

    @classmethod
    def from_document(cls, document):
        return cls(owner_id=document["_id"], entries=document.get("cart") or [])

    @property
    def count(self) -> int:
        return sum(entry.quantity for entry in self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def entry_for(self, item_id) -> CartEntry | None:
        return next((entry for entry in self.entries if entry.item == item_id), None)


def added_quantity(existing, quantity) -> int:
    return min(MAX_QUANTITY, existing + quantity)


def validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError({"quantity": ["Quantity must be a whole number"]})
    if quantity < MIN_QUANTITY:
        raise ValidationError({"quantity": ["Quantity must be at least 1"]})
    return quantity


def coerce_quantity(raw) -> int:
    """Read a guest-cart quantity leniently: anything negative or non-numeric counts as 0."""
    if isinstance(raw, bool) or raw is None:
        return 0
    if isinstance(raw, int):
        return max(0, raw)
    if isinstance(raw, float):
        return max(0, int(raw)) if raw == raw and abs(raw) != float("inf") else 0
    if isinstance(raw, str):
        match = _LEADING_INT.match(raw)
        return max(0, int(match.group(1))) if match else 0
    return 0


def aggregate_guest_entries(entries) -> dict[str, int]:
    """Fold a guest cart into one positive quantity per item, keeping first-seen order."""
    if not isinstance(entries, list) or not entries:
        raise ValidationError({"items": ["items array required"]})

    totals: dict[str, int] = {}
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValidationError({"items": ["Each cart entry must be an object with itemId and quantity"]})
        item_id = entry.get("itemId")
        if not item_id:
            continue
        item_id = str(item_id)
        totals[item_id] = totals.get(item_id, 0) + coerce_quantity(entry.get("quantity"))

    return {item_id: quantity for item_id, quantity in totals.items() if quantity > 0}
