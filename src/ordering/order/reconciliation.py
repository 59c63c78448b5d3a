"""Finishing cart clears that did not complete after order placement."""

import structlog
from pymongo.database import Database

from ordering.order.placement import clear_ordered_items
from ordering.order.repository import OrderRepository

logger = structlog.get_logger(__name__)


def reconcile_cart_clears(db: Database, limit=None) -> int:
    """Returns how many orders had their cart clear completed."""
    pending = OrderRepository(db).pending_cart_clears(limit)
    completed = sum(1 for order in pending if clear_ordered_items(db, order).cart_cleared)

    logger.info("Cart clears reconciled", pending=len(pending), completed=completed)
    return completed
