"""Pydantic request/response schemas for the Ordering API.

These are external contracts, kept separate from the internal commands.
"""

from typing import Any

from pydantic import Field

from shared.api import ApiSchema, OkResponse


# ---------------------------------------------------------------------------
# Cart Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(ApiSchema):
    item_id: str
    quantity: int = Field(ge=1, default=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "itemId": "5f1c0a8e2b3d4c5e6f708192",
                    "quantity": 2,
                }
            ]
        }
    }


class MergeGuestCartRequest(ApiSchema):
    # Validated by the merge itself so malformed guest carts get domain errors.
    items: Any = None


class RemoveFromCartRequest(ApiSchema):
    item_id: str


class CartCountResponse(OkResponse):
    cart_count: int


class MergeResponse(OkResponse):
    count: int


class CartLine(ApiSchema):
    item_id: str
    name: str | None = None
    shop_id: str | None = None
    shop_name: str | None = None
    price: float | None = None
    unit: str | None = None
    quantity: int


class CartResponse(ApiSchema):
    cart: list[CartLine]
    count: int


# ---------------------------------------------------------------------------
# Order Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(ApiSchema):
    delivery_address: str | None = None
    payment_method: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "deliveryAddress": "12 Market Road, Near Clock Tower",
                    "paymentMethod": "cod",
                }
            ]
        }
    }


class UpdateStatusRequest(ApiSchema):
    status: str


class AssignDeliveryRequest(ApiSchema):
    delivery_boy_id: str | None = None


class DeliveryPersonSchema(ApiSchema):
    id: str = Field(alias="_id")
    username: str
    real_name: str
    location_name: str | None = None
