"""FastAPI routes for the Ordering domain: the consumer's cart and orders for every role."""

from fastapi import APIRouter, Depends, Header
from pymongo.database import Database

from identity.actor import Actor
from identity.auth import get_current_actor
from ordering.api.schemas import (
    AddToCartRequest,
    AssignDeliveryRequest,
    CartCountResponse,
    CartResponse,
    DeliveryPersonSchema,
    MergeGuestCartRequest,
    MergeResponse,
    PlaceOrderRequest,
    RemoveFromCartRequest,
    UpdateStatusRequest,
)
from ordering.cart.items import AddToCart, RemoveFromCart, add_to_cart, clear_cart, remove_from_cart
from ordering.cart.management import MergeGuestCart, merge_guest_cart
from ordering.cart.view import view_cart
from ordering.order import queries
from ordering.order.delivery import assign_delivery
from ordering.order.placement import PlaceOrder, place_order
from ordering.order.status import delivery_update_status, seller_update_status
from shared.database import get_db

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
def get_cart(actor: Actor = Depends(get_current_actor), db: Database = Depends(get_db)):
    return view_cart(db, actor)


@cart_router.post("/add", response_model=CartCountResponse)
def add_cart_item(
    body: AddToCartRequest,
    actor: Actor = Depends(get_current_actor),
    db: Database = Depends(get_db),
) -> CartCountResponse:
    count = add_to_cart(db, actor, AddToCart(item_id=body.item_id, quantity=body.quantity))
    return CartCountResponse(cart_count=count)


@cart_router.post("/merge", response_model=MergeResponse)
def merge_cart(
    body: MergeGuestCartRequest,
    actor: Actor = Depends(get_current_actor),
    db: Database = Depends(get_db),
) -> MergeResponse:
    count = merge_guest_cart(db, actor, MergeGuestCart(items=body.items))
    return MergeResponse(count=count)


@cart_router.post("/remove", response_model=CartCountResponse)
def remove_cart_item(
    body: RemoveFromCartRequest,
    actor: Actor = Depends(get_current_actor),
    db: Database = Depends(get_db),
) -> CartCountResponse:
    count = remove_from_cart(db, actor, RemoveFromCart(item_id=body.item_id))
    return CartCountResponse(cart_count=count)


@cart_router.post("/clear", response_model=CartCountResponse)
def clear_cart_items(actor: Actor = Depends(get_current_actor), db: Database = Depends(get_db)) -> CartCountResponse:
    clear_cart(db, actor)
    return CartCountResponse(cart_count=0)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/api", tags=["orders"])


@order_router.post("/orders", status_code=201)
def create_order(
    body: PlaceOrderRequest,
    idempotency_key: str | None = Header(default=None),
    actor: Actor = Depends(get_current_actor),
    db: Database = Depends(get_db),
) -> dict:
    command = PlaceOrder(
        delivery_address=body.delivery_address,
        payment_method=body.payment_method,
        idempotency_key=idempotency_key,
    )
    return place_order(db, actor, command).public()


@order_router.get("/my-orders")
def my_orders(actor: Actor = Depends(get_current_actor), db: Database = Depends(get_db)) -> list[dict]:
    return queries.consumer_orders(db, actor)


@order_router.get("/seller/orders")
def seller_orders(actor: Actor = Depends(get_current_actor), db: Database = Depends(get_db)) -> list[dict]:
    return queries.seller_orders(db, actor)


@order_router.get("/seller/orders/{order_id}")
def seller_order(order_id: str, actor: Actor = Depends(get_current_actor), db: Database = Depends(get_db)) -> dict:
    return queries.seller_order(db, actor, order_id)


@order_router.put("/seller/orders/{order_id}/status")
def update_seller_order_status(
    order_id: str,
    body: UpdateStatusRequest,
    actor: Actor = Depends(get_current_actor),
    db: Database = Depends(get_db),
) -> dict:
    return seller_update_status(db, actor, order_id, body.status).public()


@order_router.put("/seller/orders/{order_id}/assign")
def assign_order(
    order_id: str,
    body: AssignDeliveryRequest,
    actor: Actor = Depends(get_current_actor),
    db: Database = Depends(get_db),
) -> dict:
    return assign_delivery(db, actor, order_id, body.delivery_boy_id).public()


@order_router.get("/delivery-personnel", response_model=list[DeliveryPersonSchema])
def list_delivery_personnel(
    location: str | None = None,
    actor: Actor = Depends(get_current_actor),
    db: Database = Depends(get_db),
):
    return [person.public() for person in queries.delivery_personnel(db, actor, location)]


@order_router.get("/delivery/my-orders")
def my_deliveries(actor: Actor = Depends(get_current_actor), db: Database = Depends(get_db)) -> list[dict]:
    return queries.delivery_orders(db, actor)


@order_router.put("/delivery/orders/{order_id}/status")
def update_delivery_order_status(
    order_id: str,
    body: UpdateStatusRequest,
    actor: Actor = Depends(get_current_actor),
    db: Database = Depends(get_db),
) -> dict:
    return delivery_update_status(db, actor, order_id, body.status).public()
