"""Order cancellation by the owning seller.

Allowed from placed, confirmed and shipped. Cancelling a shipped order also
releases its delivery person.
"""

import structlog
from pymongo.database import Database

from catalogue.shop.repository import ShopRepository
from identity.actor import Actor, Role
from ordering.order.order import Order
from ordering.order.repository import OrderRepository

logger = structlog.get_logger(__name__)


def cancel_order(db: Database, actor: Actor, order_id) -> Order:
    actor.require_role(Role.SELLER)
    repo = OrderRepository(db)
    order = repo.get(order_id)
    shop = ShopRepository(db).get(order.shop)

    previous_status = order.status
    order = repo.apply(order.cancel(actor, shop.owner))
    logger.info("Order cancelled", order_id=order.id, seller_id=actor.actor_id, previous_status=previous_status)
    return order
