"""Cart view: the stored cart resolved against the catalog for display."""

from pymongo.database import Database

from catalogue.item.pricing import display_amount
from catalogue.item.repository import ItemRepository
from catalogue.shop.repository import ShopRepository
from identity.actor import Actor, Role
from ordering.cart.repository import CartRepository


def view_cart(db: Database, actor: Actor) -> dict:
    """Entries whose item has since been deleted keep their quantity but show null details."""
    actor.require_role(Role.CONSUMER)
    cart = CartRepository(db).load(actor.actor_id)

    items = ItemRepository(db).get_many(entry.item for entry in cart.entries)
    shops = ShopRepository(db).get_many({item.shop for item in items.values()})

    lines = []
    for entry in cart.entries:
        item = items.get(entry.item)
        shop = shops.get(item.shop) if item else None
        lines.append(
            {
                "itemId": entry.item,
                "name": item.name if item else None,
                "shopId": item.shop if item else None,
                "shopName": shop.name if shop else None,
                "price": display_amount(item.price) if item else None,
                "unit": item.price.unit if item and item.price else None,
                "quantity": entry.quantity,
            }
        )

    return {"cart": lines, "count": cart.count}
