"""Atomic cart writes against the owning user's document.

Each mutation is one conditional single-document update. Changing an existing
entry is guarded by the quantity that was read (compare-and-swap); inserting a
new entry is guarded by the item not being present yet. A failed guard means
another request got there first, so the write is recomputed from a fresh read.
"""

import structlog
from pymongo import ReturnDocument
from pymongo.database import Database

from ordering.cart.cart import MAX_QUANTITY, Cart, added_quantity
from shared.config import get_settings
from shared.database import USERS
from shared.exceptions import ConflictError, NotFoundError

logger = structlog.get_logger(__name__)

_CART_ONLY = {"cart": 1}


class CartRepository:
    def __init__(self, db: Database, retries: int | None = None):
        self.collection = db[USERS]
        self.retries = retries or get_settings().CART_UPDATE_RETRIES

    def _cart_or_missing(self, document) -> Cart:
        if document is None:
            raise NotFoundError({"user": ["User not found"]})
        return Cart.from_document(document)

    def load(self, consumer_id) -> Cart:
        return self._cart_or_missing(self.collection.find_one({"_id": consumer_id}, _CART_ONLY))

    def _apply(self, guard, update) -> dict | None:
        return self.collection.find_one_and_update(
            guard,
            update,
            projection=_CART_ONLY,
            return_document=ReturnDocument.AFTER,
        )

    def add_quantity(self, consumer_id, item_id, quantity) -> Cart:
        for attempt in range(1, self.retries + 1):
            entry = self.load(consumer_id).entry_for(item_id)
            if entry is None:
                document = self._apply(
                    {"_id": consumer_id, "cart.item": {"$ne": item_id}},
                    {"$push": {"cart": {"item": item_id, "quantity": min(MAX_QUANTITY, quantity)}}},
                )
            else:
                document = self._apply(
                    {"_id": consumer_id, "cart": {"$elemMatch": {"item": item_id, "quantity": entry.quantity}}},
                    {"$set": {"cart.$.quantity": added_quantity(entry.quantity, quantity)}},
                )
            if document is not None:
                return Cart.from_document(document)

            logger.debug("Cart changed concurrently, retrying", consumer_id=consumer_id, item_id=item_id, attempt=attempt)

        logger.warning("Gave up updating cart", consumer_id=consumer_id, item_id=item_id, attempts=self.retries)
        raise ConflictError({"cart": ["Cart is being updated concurrently, please retry"]})

    def remove(self, consumer_id, item_id) -> Cart:
        return self._cart_or_missing(self._apply({"_id": consumer_id}, {"$pull": {"cart": {"item": item_id}}}))

    def clear(self, consumer_id) -> Cart:
        return self._cart_or_missing(self._apply({"_id": consumer_id}, {"$set": {"cart": []}}))

    def remove_ordered(self, consumer_id, ordered) -> Cart:
        """Take ordered ``(item_id, quantity)`` pairs back out of the cart.

        An entry holding more than was ordered keeps the surplus; one holding
        the ordered quantity or less is pulled. Units the consumer added after
        ordering are never lost.
        """
        for item_id, quantity in ordered:
            reduced = self.collection.update_one(
                {"_id": consumer_id, "cart": {"$elemMatch": {"item": item_id, "quantity": {"$gt": quantity}}}},
                {"$inc": {"cart.$.quantity": -quantity}},
            )
            if not reduced.matched_count:
                self.collection.update_one(
                    {"_id": consumer_id},
                    {"$pull": {"cart": {"item": item_id, "quantity": {"$lte": quantity}}}},
                )
        return self.load(consumer_id)
