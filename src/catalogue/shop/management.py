"""Shop management for sellers: commands and handlers."""

import structlog
from pydantic import BaseModel
from pymongo.database import Database

from catalogue.ownership import owned_shop
from catalogue.shop.repository import ShopRepository
from catalogue.shop.shop import Shop
from identity.actor import Actor, Role

logger = structlog.get_logger(__name__)


class OpenShop(BaseModel):
    name: str | None = None
    category: str | None = None
    location_name: str | None = None
    image_url: str | None = None


class UpdateShop(OpenShop):
    shop_id: str


def open_shop(db: Database, actor: Actor, command: OpenShop) -> Shop:
    actor.require_role(Role.SELLER)
    shop = Shop.open(
        owner_id=actor.actor_id,
        name=command.name,
        category=command.category,
        location_name=command.location_name,
        image_url=command.image_url,
    )
    ShopRepository(db).add(shop)
    logger.info("Shop opened", shop_id=shop.id, owner=actor.actor_id)
    return shop


def update_shop(db: Database, actor: Actor, command: UpdateShop) -> Shop:
    shop = owned_shop(db, actor, command.shop_id)
    shop.update_details(
        name=command.name,
        category=command.category,
        location_name=command.location_name,
        image_url=command.image_url,
    )
    ShopRepository(db).save(shop)
    return shop


def seller_shops(db: Database, actor: Actor) -> list[Shop]:
    actor.require_role(Role.SELLER)
    return ShopRepository(db).owned_by(actor.actor_id)
