"""Pydantic request schemas for the Catalogue API."""

from typing import Any

from shared.api import ApiSchema


class ShopRequest(ApiSchema):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Anand Bakery",
                    "category": "Bakery",
                    "locationName": "Kottayam",
                    "imageUrl": None,
                }
            ]
        }
    }

    name: str | None = None
    category: str | None = None
    location_name: str | None = None
    image_url: str | None = None


class ItemRequest(ApiSchema):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Plum Cake",
                    "category": "Cakes",
                    "description": "500g, baked daily",
                    "price": {"unit": "perPiece", "amount": 240},
                    "isAvailable": True,
                }
            ]
        }
    }

    name: str | None = None
    category: str | None = None
    description: str | None = None
    image_url: str | None = None
    # Tagged ({"unit", "amount"}) or legacy tier map; resolved by the item itself.
    price: dict[str, Any] | None = None
    is_available: bool | None = None
