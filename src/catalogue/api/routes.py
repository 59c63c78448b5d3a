"""FastAPI endpoints for the Catalogue domain: public browsing and seller management."""

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from catalogue import browse
from catalogue.api.schemas import ItemRequest, ShopRequest
from catalogue.item.management import (
    ListItem,
    ReviseItem,
    delist_item,
    list_item,
    revise_item,
    shop_items_for_owner,
)
from catalogue.shop.management import OpenShop, UpdateShop, open_shop, seller_shops, update_shop
from identity.actor import Actor
from identity.auth import get_current_actor
from shared.api import OkResponse
from shared.database import get_db

# ---------------------------------------------------------------------------
# Public browsing
# ---------------------------------------------------------------------------
browse_router = APIRouter(tags=["browse"])


@browse_router.get("/api/locations")
def list_locations(db: Database = Depends(get_db)) -> list[str]:
    return browse.locations(db)


@browse_router.get("/home")
def shops_in_location(location: str | None = Query(default=None), db: Database = Depends(get_db)) -> list[dict]:
    return [shop.public() for shop in browse.shops_in(db, location)]


@browse_router.get("/shops/{shop_id}")
def get_shop(shop_id: str, db: Database = Depends(get_db)) -> dict:
    return browse.shop_detail(db, shop_id).public()


@browse_router.get("/shops/{shop_id}/items")
def get_shop_items(shop_id: str, db: Database = Depends(get_db)) -> list[dict]:
    return [item.public() for item in browse.available_items(db, shop_id)]


# ---------------------------------------------------------------------------
# Seller management
# ---------------------------------------------------------------------------
seller_router = APIRouter(prefix="/api", tags=["seller"])


@seller_router.post("/shops", status_code=201)
def create_shop(body: ShopRequest, actor: Actor = Depends(get_current_actor), db: Database = Depends(get_db)) -> dict:
    command = OpenShop(
        name=body.name,
        category=body.category,
        location_name=body.location_name,
        image_url=body.image_url,
    )
    return open_shop(db, actor, command).public()


@seller_router.get("/seller/shops")
def my_shops(actor: Actor = Depends(get_current_actor), db: Database = Depends(get_db)) -> list[dict]:
    return [shop.public() for shop in seller_shops(db, actor)]


@seller_router.put("/shops/{shop_id}")
def edit_shop(
    shop_id: str,
    body: ShopRequest,
    actor: Actor = Depends(get_current_actor),
    db: Database = Depends(get_db),
) -> dict:
    command = UpdateShop(
        shop_id=shop_id,
        name=body.name,
        category=body.category,
        location_name=body.location_name,
        image_url=body.image_url,
    )
    return update_shop(db, actor, command).public()


@seller_router.get("/shops/{shop_id}/items")
def owner_shop_items(shop_id: str, actor: Actor = Depends(get_current_actor), db: Database = Depends(get_db)) -> list[dict]:
    return [item.public() for item in shop_items_for_owner(db, actor, shop_id)]


@seller_router.post("/shops/{shop_id}/items", status_code=201)
def create_item(
    shop_id: str,
    body: ItemRequest,
    actor: Actor = Depends(get_current_actor),
    db: Database = Depends(get_db),
) -> dict:
    command = ListItem(
        shop_id=shop_id,
        name=body.name,
        category=body.category,
        description=body.description,
        image_url=body.image_url,
        price=body.price,
        is_available=True if body.is_available is None else body.is_available,
    )
    return list_item(db, actor, command).public()


@seller_router.put("/items/{item_id}")
def edit_item(
    item_id: str,
    body: ItemRequest,
    actor: Actor = Depends(get_current_actor),
    db: Database = Depends(get_db),
) -> dict:
    command = ReviseItem(
        item_id=item_id,
        name=body.name,
        category=body.category,
        description=body.description,
        image_url=body.image_url,
        price=body.price,
        is_available=body.is_available,
    )
    return revise_item(db, actor, command).public()


@seller_router.delete("/items/{item_id}", response_model=OkResponse)
def delete_item(item_id: str, actor: Actor = Depends(get_current_actor), db: Database = Depends(get_db)) -> OkResponse:
    delist_item(db, actor, item_id)
    return OkResponse()
