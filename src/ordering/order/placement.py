"""Order placement: turning a consumer's cart into an order.

Inserting the order and clearing the cart are two separate single-document
writes. Placement is made safe to repeat instead: every order carries an
idempotency key unique per consumer, so a retried request returns the order
it already created. The cart clear after insert is best effort; orders whose
clear did not complete keep ``cartCleared == False`` until
``reconcile_cart_clears`` finishes them.
"""

import structlog
from pydantic import BaseModel
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from catalogue.item.pricing import order_unit_price
from catalogue.item.repository import ItemRepository
from identity.actor import Actor, Role
from ordering.cart.cart import Cart
from ordering.cart.repository import CartRepository
from ordering.order.codes import generate_order_code
from ordering.order.order import LineItem, Order
from ordering.order.repository import OrderRepository
from shared.database import new_id
from shared.exceptions import DuplicateOrderCodeError, EmptyCartError, MixedShopCartError, ValidationError

logger = structlog.get_logger(__name__)


class PlaceOrder(BaseModel):
    delivery_address: str | None = None
    payment_method: str | None = None
    idempotency_key: str | None = None


def _required_text(value) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _price_cart(db: Database, cart: Cart) -> tuple[str, list[LineItem]]:
    """Snapshot every cart entry at its current per-piece price; returns (shop_id, lines)."""
    items = ItemRepository(db).get_many(entry.item for entry in cart.entries)

    missing = [entry.item for entry in cart.entries if entry.item not in items]
    if missing:
        raise ValidationError({"cart": [f"Item {item_id} in your cart is no longer available" for item_id in missing]})

    shops = {item.shop for item in items.values()}
    if len(shops) > 1:
        raise MixedShopCartError()

    lines = []
    for entry in cart.entries:
        item = items[entry.item]
        price = order_unit_price(item.price)
        if price is None:
            raise ValidationError({"price": [f"'{item.name}' has no per-piece price and cannot be ordered"]})
        lines.append(LineItem(item=item.id, name=item.name, price=price, quantity=entry.quantity))

    return shops.pop(), lines


def clear_ordered_items(db: Database, order: Order) -> Order:
    """Remove the ordered items from the consumer's cart and record that it happened.

    A store failure is logged and leaves ``cart_cleared`` False for reconciliation.
    """
    try:
        CartRepository(db).remove_ordered(order.consumer, [(line.item, line.quantity) for line in order.items])
        OrderRepository(db).mark_cart_cleared(order.id)
    except PyMongoError as exc:
        logger.warning("Cart clear after order failed", order_id=order.id, consumer_id=order.consumer, error=str(exc))
        return order

    order.cart_cleared = True
    return order


def _replay(db: Database, order: Order) -> Order:
    logger.info("Order placement replayed", order_id=order.id, idempotency_key=order.idempotency_key)
    return order if order.cart_cleared else clear_ordered_items(db, order)


def place_order(db: Database, actor: Actor, command: PlaceOrder) -> Order:
    actor.require_role(Role.CONSUMER)
    delivery_address = _required_text(command.delivery_address)
    payment_method = _required_text(command.payment_method)
    if not (delivery_address and payment_method):
        raise ValidationError("Delivery address and payment method are required.")

    repo = OrderRepository(db)
    idempotency_key = _required_text(command.idempotency_key)
    if idempotency_key:
        existing = repo.find_by_idempotency_key(actor.actor_id, idempotency_key)
        if existing is not None:
            return _replay(db, existing)

    cart = CartRepository(db).load(actor.actor_id)
    if cart.is_empty:
        raise EmptyCartError()

    shop_id, lines = _price_cart(db, cart)
    order = Order.place(
        order_code=generate_order_code(),
        consumer_id=actor.actor_id,
        shop_id=shop_id,
        lines=lines,
        delivery_address=delivery_address,
        payment_method=payment_method,
        idempotency_key=idempotency_key or new_id(),
    )

    try:
        repo.add(order)
    except DuplicateKeyError:
        # Either a concurrent request with the same key won, or the order code clashed.
        existing = repo.find_by_idempotency_key(actor.actor_id, order.idempotency_key)
        if existing is not None:
            return _replay(db, existing)
        logger.error("Order code collision", order_code=order.order_code)
        raise DuplicateOrderCodeError() from None

    logger.info(
        "Order placed",
        order_id=order.id,
        order_code=order.order_code,
        consumer_id=actor.actor_id,
        shop_id=shop_id,
        total_bill=order.total_bill,
    )
    return clear_ordered_items(db, order)
