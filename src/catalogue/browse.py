"""Public catalog browsing: locations, shops in a town and what they sell."""

from pymongo.database import Database

from catalogue.item.item import Item
from catalogue.item.repository import ItemRepository
from catalogue.shop.repository import ShopRepository
from catalogue.shop.shop import Shop
from shared.exceptions import ValidationError


def locations(db: Database) -> list[str]:
    return ShopRepository(db).locations()


def shops_in(db: Database, location_name) -> list[Shop]:
    if not location_name or not location_name.strip():
        raise ValidationError({"location": ["location query param is required"]})
    return ShopRepository(db).in_location(location_name.strip())


def shop_detail(db: Database, shop_id) -> Shop:
    return ShopRepository(db).get(shop_id)


def available_items(db: Database, shop_id) -> list[Item]:
    return ItemRepository(db).in_shop(shop_id, available_only=True)
