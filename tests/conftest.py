import os
from pathlib import Path

import mongomock
import pytest

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from catalogue.item.item import Item  # noqa: E402
from catalogue.item.repository import ItemRepository  # noqa: E402
from catalogue.shop.repository import ShopRepository  # noqa: E402
from catalogue.shop.shop import Shop  # noqa: E402
from identity.auth import create_access_token, hash_password  # noqa: E402
from identity.user.repository import UserRepository  # noqa: E402
from identity.user.user import User  # noqa: E402
from shared.database import ensure_indexes  # noqa: E402

PASSWORD = "secret-pass"
_PASSWORD_HASH = hash_password(PASSWORD)


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        # Get the test file path relative to the tests directory
        test_path = Path(item.fspath)

        # Mark tests based on their directory
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture()
def db():
    """A fresh in-memory database with the production indexes."""
    client = mongomock.MongoClient()
    database = client["allintown_test"]
    ensure_indexes(database)
    yield database
    client.close()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_user(db):
    counter = {"n": 0}

    def _make(role="consumer", username=None, location_name="Kottayam", real_name=None):
        counter["n"] += 1
        username = username or f"{role}-{counter['n']}"
        user = User.register(
            username=username,
            real_name=real_name or username.title(),
            email=f"{username}@example.com",
            password_hash=_PASSWORD_HASH,
            role=role,
            location_name=location_name,
        )
        UserRepository(db).add(user)
        return user

    return _make


@pytest.fixture()
def consumer(make_user):
    return make_user("consumer", username="asha")


@pytest.fixture()
def seller(make_user):
    return make_user("seller", username="ravi")


@pytest.fixture()
def other_seller(make_user):
    return make_user("seller", username="sunil")


@pytest.fixture()
def delivery_person(make_user):
    return make_user("delivery_person", username="biju")


@pytest.fixture()
def make_shop(db):
    def _make(owner, name="Anand Bakery", location_name="Kottayam", category="Bakery"):
        shop = Shop.open(owner_id=owner.id, name=name, category=category, location_name=location_name)
        ShopRepository(db).add(shop)
        return shop

    return _make


@pytest.fixture()
def shop(make_shop, seller):
    return make_shop(seller)


@pytest.fixture()
def make_item(db):
    def _make(shop, name="Plum Cake", price=50.0, category="Cakes", is_available=True):
        item = Item.list_in(
            shop_id=shop.id,
            name=name,
            category=category,
            price={"unit": "perPiece", "amount": price},
            is_available=is_available,
        )
        ItemRepository(db).add(item)
        return item

    return _make


@pytest.fixture()
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.as_actor())}"}

    return _headers
