"""Persistence for shops."""

import re

from pymongo.database import Database

from catalogue.shop.shop import Shop
from shared.database import SHOPS
from shared.exceptions import NotFoundError


class ShopRepository:
    def __init__(self, db: Database):
        self.collection = db[SHOPS]

    def get(self, shop_id) -> Shop:
        document = self.collection.find_one({"_id": shop_id})
        if document is None:
            raise NotFoundError({"shop": ["Shop not found"]})
        return Shop.from_document(document)

    def get_many(self, shop_ids) -> dict[str, Shop]:
        return {doc["_id"]: Shop.from_document(doc) for doc in self.collection.find({"_id": {"$in": list(shop_ids)}})}

    def add(self, shop: Shop) -> None:
        self.collection.insert_one(shop.to_document())

    def save(self, shop: Shop) -> None:
        self.collection.replace_one({"_id": shop.id}, shop.to_document())

    def owned_by(self, owner_id) -> list[Shop]:
        return [Shop.from_document(doc) for doc in self.collection.find({"owner": owner_id}).sort("createdAt", -1)]

    def in_location(self, location_name) -> list[Shop]:
        pattern = re.compile(f"^{re.escape(location_name)}$", re.IGNORECASE)
        return [Shop.from_document(doc) for doc in self.collection.find({"locationName": pattern})]

    def locations(self) -> list[str]:
        return sorted(self.collection.distinct("locationName"))
