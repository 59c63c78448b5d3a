"""Cart management: merging a guest (pre-login) cart into the consumer's cart."""

from typing import Any

import structlog
from pydantic import BaseModel
from pymongo.database import Database

from catalogue.item.repository import ItemRepository
from identity.actor import Actor, Role
from ordering.cart.cart import aggregate_guest_entries
from ordering.cart.repository import CartRepository

logger = structlog.get_logger(__name__)


class MergeGuestCart(BaseModel):
    """Entries as the client kept them: a list of ``{"itemId", "quantity"}`` objects."""

    items: Any = None


def merge_guest_cart(db: Database, actor: Actor, command: MergeGuestCart) -> int:
    """Fold the guest entries into the stored cart and return its total quantity.

    Duplicate entries are summed first; non-positive totals and items that no
    longer exist are skipped. Each surviving item is added as if by AddToCart,
    so the 999 clamp applies.
    """
    actor.require_role(Role.CONSUMER)
    totals = aggregate_guest_entries(command.items)

    repo = CartRepository(db)
    known = ItemRepository(db).existing_ids(totals)
    for item_id in totals.keys() - known:
        logger.warning("Skipping unknown item in guest cart", consumer_id=actor.actor_id, item_id=item_id)

    cart = None
    for item_id, quantity in totals.items():
        if item_id in known:
            cart = repo.add_quantity(actor.actor_id, item_id, quantity)

    count = cart.count if cart is not None else repo.load(actor.actor_id).count
    logger.info("Guest cart merged", consumer_id=actor.actor_id, merged_items=len(known), cart_count=count)
    return count
