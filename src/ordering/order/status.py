"""Status updates as requested by name through the seller and delivery endpoints."""

from pymongo.database import Database

from identity.actor import Actor
from ordering.order.cancellation import cancel_order
from ordering.order.confirmation import confirm_order
from ordering.order.delivery import mark_delivered
from ordering.order.order import Order, OrderStatus
from shared.exceptions import StateTransitionError, ValidationError

_SELLER_ACTIONS = {
    OrderStatus.CONFIRMED: confirm_order,
    OrderStatus.CANCELLED: cancel_order,
}


def _parse_status(status) -> OrderStatus:
    try:
        return OrderStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError({"status": [f"Unknown status '{status}'. Expected one of: {allowed}"]}) from None


def seller_update_status(db: Database, actor: Actor, order_id, status) -> Order:
    target = _parse_status(status)
    action = _SELLER_ACTIONS.get(target)
    if action is None:
        raise StateTransitionError(
            {"status": [f"Sellers can only set 'confirmed' or 'cancelled' here, not '{target.value}'"]}
        )
    return action(db, actor, order_id)


def delivery_update_status(db: Database, actor: Actor, order_id, status) -> Order:
    target = _parse_status(status)
    if target != OrderStatus.DELIVERED:
        raise StateTransitionError({"status": ["Delivery personnel can only mark orders as 'delivered'"]})
    return mark_delivered(db, actor, order_id)
