"""Cart item operations: commands and handlers for adding, removing and clearing."""

from typing import Any

import structlog
from pydantic import BaseModel
from pymongo.database import Database

from catalogue.item.repository import ItemRepository
from identity.actor import Actor, Role
from ordering.cart.cart import validate_quantity
from ordering.cart.repository import CartRepository

logger = structlog.get_logger(__name__)


class AddToCart(BaseModel):
    """Add a quantity of an item; an existing entry is incremented and clamped at 999."""

    item_id: str
    quantity: Any = 1


class RemoveFromCart(BaseModel):
    item_id: str


def add_to_cart(db: Database, actor: Actor, command: AddToCart) -> int:
    """Returns the total quantity now in the cart."""
    actor.require_role(Role.CONSUMER)
    quantity = validate_quantity(command.quantity)
    item = ItemRepository(db).get(command.item_id)

    cart = CartRepository(db).add_quantity(actor.actor_id, item.id, quantity)
    logger.info("Added to cart", consumer_id=actor.actor_id, item_id=item.id, quantity=quantity, cart_count=cart.count)
    return cart.count


def remove_from_cart(db: Database, actor: Actor, command: RemoveFromCart) -> int:
    actor.require_role(Role.CONSUMER)
    cart = CartRepository(db).remove(actor.actor_id, command.item_id)
    return cart.count


def clear_cart(db: Database, actor: Actor) -> None:
    actor.require_role(Role.CONSUMER)
    CartRepository(db).clear(actor.actor_id)
    logger.info("Cart cleared", consumer_id=actor.actor_id)
