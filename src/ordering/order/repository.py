"""Persistence for orders.

Orders are inserted once and afterwards only changed through ``apply``, a
conditional update matching the status and version the caller read.
"""

from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from ordering.order.order import Order, OrderStatus, StatusChange, Transition
from shared.database import ORDERS, utcnow
from shared.exceptions import NotFoundError, StateTransitionError

# Order codes carry a per-process increasing stamp, breaking createdAt ties.
_NEWEST_FIRST = [("createdAt", DESCENDING), ("orderCode", DESCENDING)]


class OrderRepository:
    def __init__(self, db: Database):
        self.collection = db[ORDERS]

    def get(self, order_id) -> Order:
        document = self.collection.find_one({"_id": order_id})
        if document is None:
            raise NotFoundError({"order": ["Order not found"]})
        return Order.from_document(document)

    def find_by_idempotency_key(self, consumer_id, idempotency_key) -> Order | None:
        document = self.collection.find_one({"consumer": consumer_id, "idempotencyKey": idempotency_key})
        return Order.from_document(document) if document else None

    def add(self, order: Order) -> None:
        """Raises ``DuplicateKeyError`` on an order-code or idempotency-key clash."""
        self.collection.insert_one(order.to_document())

    def mark_cart_cleared(self, order_id) -> None:
        self.collection.update_one({"_id": order_id}, {"$set": {"cartCleared": True}})

    def apply(self, transition: Transition) -> Order:
        now = utcnow()
        change = StatusChange(status=transition.to_status, actor=transition.actor_id, at=now)
        update = {
            "$set": {"status": transition.to_status.value, "updatedAt": now},
            "$inc": {"version": 1},
            "$push": {"statusHistory": change.model_dump(by_alias=True)},
        }
        if transition.delivery_boy is not None:
            update["$set"]["deliveryBoy"] = transition.delivery_boy
        if transition.clear_delivery_boy:
            update["$unset"] = {"deliveryBoy": ""}

        document = self.collection.find_one_and_update(
            {
                "_id": transition.order_id,
                "status": transition.from_status.value,
                "version": transition.version,
            },
            update,
            return_document=ReturnDocument.AFTER,
        )
        if document is not None:
            return Order.from_document(document)

        current = self.get(transition.order_id)
        raise StateTransitionError(
            {"status": [f"Order was changed concurrently and is now '{current.status}'; reload and retry."]}
        )

    # Queries

    def placed_by(self, consumer_id) -> list[Order]:
        return self._find({"consumer": consumer_id})

    def for_shops(self, shop_ids) -> list[Order]:
        return self._find({"shop": {"$in": list(shop_ids)}})

    def assigned_to(self, delivery_person_id) -> list[Order]:
        return self._find({"deliveryBoy": delivery_person_id})

    def has_active_delivery(self, delivery_person_id, excluding_order_id=None) -> bool:
        query = {"deliveryBoy": delivery_person_id, "status": OrderStatus.SHIPPED.value}
        if excluding_order_id:
            query["_id"] = {"$ne": excluding_order_id}
        return self.collection.count_documents(query, limit=1) > 0

    def pending_cart_clears(self, limit=None) -> list[Order]:
        cursor = self.collection.find({"cartCleared": False}).sort("createdAt", 1)
        if limit:
            cursor = cursor.limit(limit)
        return [Order.from_document(doc) for doc in cursor]

    def _find(self, query) -> list[Order]:
        return [Order.from_document(doc) for doc in self.collection.find(query).sort(_NEWEST_FIRST)]
