"""Ownership checks for seller-scoped catalog writes.

Every check re-reads the shop from the store at call time; an earlier
successful check for the same id says nothing about the next request.
"""

from pymongo.database import Database

from catalogue.item.item import Item
from catalogue.item.repository import ItemRepository
from catalogue.shop.repository import ShopRepository
from catalogue.shop.shop import Shop
from identity.actor import Actor, Role


def owned_shop(db: Database, actor: Actor, shop_id) -> Shop:
    actor.require_role(Role.SELLER)
    shop = ShopRepository(db).get(shop_id)
    shop.assert_owned_by(actor)
    return shop


def owned_item(db: Database, actor: Actor, item_id) -> tuple[Item, Shop]:
    """Resolve an item and verify its shop belongs to the actor."""
    actor.require_role(Role.SELLER)
    item = ItemRepository(db).get(item_id)
    shop = ShopRepository(db).get(item.shop)
    shop.assert_owned_by(actor)
    return item, shop
