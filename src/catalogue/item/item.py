"""Item document: something a shop sells, with exactly one price unit."""

from datetime import datetime

from pydantic import Field, field_validator

from catalogue.item.pricing import PerPiece, Price, resolve_price
from shared.database import Document, utcnow
from shared.exceptions import ValidationError


def _checked_price(raw):
    """Current business rule: catalog writes must carry a per-piece price."""
    price = resolve_price(raw)
    if not isinstance(price, PerPiece):
        raise ValidationError({"price": ["A per-piece price (price.perPiece) is required"]})
    return price


class Item(Document):
    shop: str
    name: str
    category: str
    description: str | None = None
    image_url: str | None = None
    price: Price
    is_available: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("price", mode="before")
    @classmethod
    def collapse_legacy_price(cls, value):
        return resolve_price(value)

    @classmethod
    def list_in(cls, shop_id, name, category, price, description=None, image_url=None, is_available=True):
        errors = {
            field: [f"{field} is required"]
            for field, value in (("name", name), ("category", category))
            if not value or not str(value).strip()
        }
        if errors:
            raise ValidationError(errors)
        return cls(
            shop=shop_id,
            name=name.strip(),
            category=category.strip(),
            description=description,
            image_url=image_url,
            price=_checked_price(price),
            is_available=is_available,
        )

    def revise(self, name, category, price, description=None, image_url=None, is_available=None):
        errors = {
            field: [f"{field} is required"]
            for field, value in (("name", name), ("category", category))
            if not value or not str(value).strip()
        }
        if errors:
            raise ValidationError(errors)
        self.name = name.strip()
        self.category = category.strip()
        self.price = _checked_price(price)
        self.description = description
        self.image_url = image_url
        if is_available is not None:
            self.is_available = is_available
        self.updated_at = utcnow()
