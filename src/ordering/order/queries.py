"""Read-side order queries for each role.

Order listings are returned as client-ready dicts in which the consumer, shop
and delivery person references are expanded into small nested objects
(``{"_id": ..., "realName": ...}``). Each role sees the fields it works
with; a reference whose document no longer exists expands to ``None``.
"""

from pymongo.database import Database

from catalogue.shop.repository import ShopRepository
from identity.actor import Actor, Role
from identity.user.repository import UserRepository
from identity.user.user import User
from ordering.order.repository import OrderRepository
from shared.exceptions import AuthorizationError


def _pick(document, fields):
    if document is None:
        return None
    public = document.public()
    return {"_id": public["_id"], **{field: public.get(field) for field in fields}}


def _expand(db: Database, orders, consumer=(), shop=(), delivery_boy=()) -> list[dict]:
    """Replace party ids with the requested fields, one batched read per collection."""
    users = UserRepository(db).get_many(
        [order.consumer for order in orders] + [order.delivery_boy for order in orders]
    )
    shops = ShopRepository(db).get_many({order.shop for order in orders}) if shop else {}

    expanded = []
    for order in orders:
        view = order.public()
        if consumer:
            view["consumer"] = _pick(users.get(order.consumer), consumer)
        if shop:
            view["shop"] = _pick(shops.get(order.shop), shop)
        if order.delivery_boy is not None:
            view["deliveryBoy"] = _pick(users.get(order.delivery_boy), delivery_boy)
        expanded.append(view)
    return expanded


def consumer_orders(db: Database, actor: Actor) -> list[dict]:
    actor.require_role(Role.CONSUMER)
    orders = OrderRepository(db).placed_by(actor.actor_id)
    return _expand(db, orders, shop=("name",), delivery_boy=("realName",))


def seller_orders(db: Database, actor: Actor) -> list[dict]:
    """Orders across every shop the seller owns, newest first."""
    actor.require_role(Role.SELLER)
    shop_ids = [shop.id for shop in ShopRepository(db).owned_by(actor.actor_id)]
    if not shop_ids:
        return []
    orders = OrderRepository(db).for_shops(shop_ids)
    return _expand(db, orders, consumer=("realName",), shop=("name",), delivery_boy=("realName",))


def seller_order(db: Database, actor: Actor, order_id) -> dict:
    actor.require_role(Role.SELLER)
    order = OrderRepository(db).get(order_id)
    shop = ShopRepository(db).get(order.shop)
    if not order.is_for_seller(actor, shop.owner):
        raise AuthorizationError("Forbidden: You do not own the shop for this order.")
    [view] = _expand(
        db,
        [order],
        consumer=("realName", "email"),
        shop=("name", "locationName", "owner"),
        delivery_boy=("realName",),
    )
    return view


def delivery_orders(db: Database, actor: Actor) -> list[dict]:
    actor.require_role(Role.DELIVERY_PERSON)
    orders = OrderRepository(db).assigned_to(actor.actor_id)
    return _expand(
        db,
        orders,
        consumer=("realName", "addresses"),
        shop=("name", "locationName"),
        delivery_boy=("realName",),
    )


def delivery_personnel(db: Database, actor: Actor, location_name=None) -> list[User]:
    actor.require_role(Role.SELLER)
    location_name = location_name.strip() if location_name else None
    return UserRepository(db).delivery_personnel(location_name)
