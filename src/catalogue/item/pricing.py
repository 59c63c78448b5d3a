"""Item pricing as a tagged variant: exactly one of per-piece, per-100g or per-unit.

Older documents and clients describe a price as a map of optional tiers
(``{"perPiece": 50, "per100gm": 12}``). ``resolve_price`` is the one place that
collapses such a map into a single variant, with precedence
perPiece > perUnit > per100gm.
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from shared.exceptions import ValidationError


class PriceUnit(Enum):
    PER_PIECE = "perPiece"
    PER_100G = "per100gm"
    PER_UNIT = "perUnit"


class PerPiece(BaseModel):
    unit: Literal["perPiece"] = "perPiece"
    amount: float = Field(ge=0)


class Per100g(BaseModel):
    unit: Literal["per100gm"] = "per100gm"
    amount: float = Field(ge=0)


class PerUnit(BaseModel):
    unit: Literal["perUnit"] = "perUnit"
    amount: float = Field(ge=0)


Price = Annotated[PerPiece | Per100g | PerUnit, Field(discriminator="unit")]

_price_adapter = TypeAdapter(Price)

_VARIANTS = {
    PriceUnit.PER_PIECE: PerPiece,
    PriceUnit.PER_UNIT: PerUnit,
    PriceUnit.PER_100G: Per100g,
}
_TIER_PRECEDENCE = (PriceUnit.PER_PIECE, PriceUnit.PER_UNIT, PriceUnit.PER_100G)


def resolve_price(raw):
    """Return the price variant described by ``raw``, or None if it names no price.

    Accepts a variant instance, a tagged mapping (``{"unit": ..., "amount": ...}``)
    or a legacy tier map.
    """
    if raw is None or isinstance(raw, PerPiece | Per100g | PerUnit):
        return raw
    if not isinstance(raw, dict):
        raise ValidationError({"price": ["Price must be an object"]})

    try:
        if "unit" in raw:
            return _price_adapter.validate_python(raw)
        for unit in _TIER_PRECEDENCE:
            amount = raw.get(unit.value)
            if amount is not None:
                return _VARIANTS[unit](amount=amount)
    except PydanticValidationError:
        raise ValidationError({"price": ["Price must be a non-negative number"]}) from None
    return None


def display_amount(raw) -> float | None:
    """Price shown to shoppers, whatever the unit."""
    price = resolve_price(raw)
    return price.amount if price is not None else None


def order_unit_price(raw) -> float | None:
    """Price charged per ordered quantity; only per-piece prices are billable."""
    price = resolve_price(raw)
    if isinstance(price, PerPiece):
        return price.amount
    return None
