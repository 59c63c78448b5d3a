"""Persistence for items."""

from pymongo.database import Database

from catalogue.item.item import Item
from shared.database import ITEMS
from shared.exceptions import NotFoundError


class ItemRepository:
    def __init__(self, db: Database):
        self.collection = db[ITEMS]

    def get(self, item_id) -> Item:
        document = self.collection.find_one({"_id": item_id})
        if document is None:
            raise NotFoundError({"item": ["Item not found."]})
        return Item.from_document(document)

    def get_many(self, item_ids) -> dict[str, Item]:
        return {doc["_id"]: Item.from_document(doc) for doc in self.collection.find({"_id": {"$in": list(item_ids)}})}

    def existing_ids(self, item_ids) -> set[str]:
        return {doc["_id"] for doc in self.collection.find({"_id": {"$in": list(item_ids)}}, {"_id": 1})}

    def add(self, item: Item) -> None:
        self.collection.insert_one(item.to_document())

    def save(self, item: Item) -> None:
        self.collection.replace_one({"_id": item.id}, item.to_document())

    def delete(self, item_id) -> None:
        self.collection.delete_one({"_id": item_id})

    def in_shop(self, shop_id, available_only=False) -> list[Item]:
        query = {"shop": shop_id}
        if available_only:
            query["isAvailable"] = True
        return [Item.from_document(doc) for doc in self.collection.find(query).sort("createdAt", -1)]
