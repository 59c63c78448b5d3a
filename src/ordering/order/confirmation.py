"""Order confirmation by the owning seller."""

import structlog
from pymongo.database import Database

from catalogue.shop.repository import ShopRepository
from identity.actor import Actor, Role
from ordering.order.order import Order
from ordering.order.repository import OrderRepository

logger = structlog.get_logger(__name__)


def confirm_order(db: Database, actor: Actor, order_id) -> Order:
    actor.require_role(Role.SELLER)
    repo = OrderRepository(db)
    order = repo.get(order_id)
    shop = ShopRepository(db).get(order.shop)

    order = repo.apply(order.confirm(actor, shop.owner))
    logger.info("Order confirmed", order_id=order.id, seller_id=actor.actor_id)
    return order
