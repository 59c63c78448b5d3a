"""Delivery assignment and completion.

A seller hands a confirmed order to a delivery person (the order becomes
``shipped`` and ``deliveryBoy`` is set in the same write); only that person can
then mark it delivered.
"""

import structlog
from pymongo.database import Database

from catalogue.shop.repository import ShopRepository
from identity.actor import Actor, Role
from identity.user.repository import UserRepository
from ordering.order.order import Order
from ordering.order.repository import OrderRepository
from shared.exceptions import ConflictError, NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


def _delivery_person(db: Database, delivery_person_id):
    if not delivery_person_id:
        raise ValidationError({"deliveryBoyId": ["Delivery person is required"]})
    try:
        user = UserRepository(db).get(delivery_person_id)
    except NotFoundError:
        raise NotFoundError({"deliveryBoyId": ["Delivery person not found"]}) from None
    if Role(user.role) != Role.DELIVERY_PERSON:
        raise ValidationError({"deliveryBoyId": ["Selected user is not a delivery person"]})
    return user


def assign_delivery(db: Database, actor: Actor, order_id, delivery_person_id) -> Order:
    actor.require_role(Role.SELLER)
    repo = OrderRepository(db)
    order = repo.get(order_id)
    shop = ShopRepository(db).get(order.shop)

    transition = order.assign(actor, shop.owner, delivery_person_id)
    person = _delivery_person(db, delivery_person_id)
    if repo.has_active_delivery(person.id, excluding_order_id=order.id):
        raise ConflictError({"deliveryBoyId": ["Delivery person is already delivering another order"]})

    order = repo.apply(transition)
    logger.info("Order assigned for delivery", order_id=order.id, seller_id=actor.actor_id, delivery_person_id=person.id)
    return order


def mark_delivered(db: Database, actor: Actor, order_id) -> Order:
    actor.require_role(Role.DELIVERY_PERSON)
    repo = OrderRepository(db)
    order = repo.get(order_id)

    order = repo.apply(order.mark_delivered(actor))
    logger.info("Order delivered", order_id=order.id, delivery_person_id=actor.actor_id)
    return order
