"""Persistence for users. Uniqueness of username/email is enforced by indexes."""

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from identity.actor import Role
from identity.user.user import User
from shared.database import USERS, utcnow
from shared.exceptions import ConflictError, NotFoundError


class UserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS]

    def get(self, user_id) -> User:
        document = self.collection.find_one({"_id": user_id}, {"cart": 0})
        if document is None:
            raise NotFoundError({"user": ["User not found"]})
        return User.from_document(document)

    def get_many(self, user_ids) -> dict[str, User]:
        ids = [user_id for user_id in set(user_ids) if user_id]
        if not ids:
            return {}
        return {doc["_id"]: User.from_document(doc) for doc in self.collection.find({"_id": {"$in": ids}}, {"cart": 0})}

    def find_by_login(self, email_or_username) -> User | None:
        document = self.collection.find_one(
            {"$or": [{"email": email_or_username.strip().lower()}, {"username": email_or_username.strip()}]},
            {"cart": 0},
        )
        return User.from_document(document) if document else None

    def exists(self, username, email) -> bool:
        return self.collection.count_documents({"$or": [{"username": username}, {"email": email}]}, limit=1) > 0

    def add(self, user: User) -> None:
        document = user.to_document()
        if Role(user.role) == Role.CONSUMER:
            document["cart"] = []
        try:
            self.collection.insert_one(document)
        except DuplicateKeyError:
            raise ConflictError({"user": ["Username or email already exists"]}) from None

    def _update(self, user_id, update) -> User:
        update.setdefault("$set", {})["updatedAt"] = utcnow()
        document = self.collection.find_one_and_update(
            {"_id": user_id},
            update,
            projection={"cart": 0},
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            raise NotFoundError({"user": ["User not found"]})
        return User.from_document(document)

    def set_real_name(self, user_id, real_name) -> User:
        return self._update(user_id, {"$set": {"realName": real_name}})

    def push_address(self, user_id, address) -> User:
        return self._update(user_id, {"$push": {"addresses": address}})

    def pull_address(self, user_id, address) -> User:
        return self._update(user_id, {"$pull": {"addresses": address}})

    def delivery_personnel(self, location_name=None) -> list[User]:
        query = {"role": Role.DELIVERY_PERSON.value}
        if location_name:
            query["locationName"] = location_name
        return [User.from_document(doc) for doc in self.collection.find(query, {"cart": 0}).sort("realName", 1)]
