"""Document store access.

The store is MongoDB through pymongo. Every service function receives the
``Database`` explicitly; the HTTP layer obtains it through the ``get_db``
dependency, which tests override with an in-memory database.
"""

from datetime import UTC, datetime
from functools import lru_cache
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from shared.config import get_settings

USERS = "users"
SHOPS = "shops"
ITEMS = "items"
ORDERS = "orders"


def new_id() -> str:
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(UTC)


class Document(BaseModel):
    """Base for everything persisted as a single document.

    Python attributes are snake_case; stored and serialized field names are
    camelCase, with the identity under ``_id``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    id: str = Field(default_factory=new_id, alias="_id")

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)

    def public(self) -> dict:
        """JSON-ready representation returned to clients."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_document(cls, document):
        return cls.model_validate(document)


@lru_cache
def get_client() -> MongoClient:
    settings = get_settings()
    return MongoClient(settings.MONGO_URI, serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS)


def get_db() -> Database:
    """FastAPI dependency returning the application database."""
    return get_client()[get_settings().MONGO_DB_NAME]


def ensure_indexes(db: Database) -> None:
    """Create the indexes the domain relies on for uniqueness and lookups."""
    db[USERS].create_index("username", unique=True)
    db[USERS].create_index("email", unique=True)
    db[USERS].create_index([("role", ASCENDING), ("locationName", ASCENDING)])

    db[SHOPS].create_index("owner")
    db[SHOPS].create_index("locationName")

    db[ITEMS].create_index("shop")

    db[ORDERS].create_index("orderCode", unique=True)
    db[ORDERS].create_index([("consumer", ASCENDING), ("idempotencyKey", ASCENDING)], unique=True)
    db[ORDERS].create_index([("shop", ASCENDING), ("createdAt", DESCENDING)])
    db[ORDERS].create_index("deliveryBoy")
    db[ORDERS].create_index("cartCleared")
