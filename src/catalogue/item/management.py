"""Item management for sellers: commands and handlers.

Ownership is verified transitively: item -> shop -> owner.
"""

from typing import Any

import structlog
from pydantic import BaseModel
from pymongo.database import Database

from catalogue.item.item import Item
from catalogue.item.repository import ItemRepository
from catalogue.ownership import owned_item, owned_shop
from identity.actor import Actor

logger = structlog.get_logger(__name__)


class ListItem(BaseModel):
    shop_id: str
    name: str | None = None
    category: str | None = None
    description: str | None = None
    image_url: str | None = None
    price: dict[str, Any] | None = None
    is_available: bool = True


class ReviseItem(BaseModel):
    item_id: str
    name: str | None = None
    category: str | None = None
    description: str | None = None
    image_url: str | None = None
    price: dict[str, Any] | None = None
    is_available: bool | None = None


def list_item(db: Database, actor: Actor, command: ListItem) -> Item:
    shop = owned_shop(db, actor, command.shop_id)
    item = Item.list_in(
        shop_id=shop.id,
        name=command.name,
        category=command.category,
        price=command.price,
        description=command.description,
        image_url=command.image_url,
        is_available=command.is_available,
    )
    ItemRepository(db).add(item)
    logger.info("Item listed", item_id=item.id, shop_id=shop.id)
    return item


def revise_item(db: Database, actor: Actor, command: ReviseItem) -> Item:
    item, _ = owned_item(db, actor, command.item_id)
    item.revise(
        name=command.name,
        category=command.category,
        price=command.price,
        description=command.description,
        image_url=command.image_url,
        is_available=command.is_available,
    )
    ItemRepository(db).save(item)
    return item


def delist_item(db: Database, actor: Actor, item_id) -> None:
    item, shop = owned_item(db, actor, item_id)
    ItemRepository(db).delete(item.id)
    logger.info("Item delisted", item_id=item.id, shop_id=shop.id)


def shop_items_for_owner(db: Database, actor: Actor, shop_id) -> list[Item]:
    shop = owned_shop(db, actor, shop_id)
    return ItemRepository(db).in_shop(shop.id)
