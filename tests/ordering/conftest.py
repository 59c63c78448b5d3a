import pytest
from ordering.cart.items import AddToCart, add_to_cart
from ordering.order.placement import PlaceOrder, place_order


@pytest.fixture()
def fill_cart(db):
    def _fill(consumer, *entries):
        for item, quantity in entries:
            add_to_cart(db, consumer.as_actor(), AddToCart(item_id=item.id, quantity=quantity))

    return _fill


@pytest.fixture()
def cake(make_item, shop):
    return make_item(shop, name="Plum Cake", price=50.0)


@pytest.fixture()
def bun(make_item, shop):
    return make_item(shop, name="Cream Bun", price=30.0)


@pytest.fixture()
def place(db):
    def _place(consumer, address="12 Market Road", payment_method="cod", idempotency_key=None):
        command = PlaceOrder(delivery_address=address, payment_method=payment_method, idempotency_key=idempotency_key)
        return place_order(db, consumer.as_actor(), command)

    return _place


@pytest.fixture()
def placed_order(consumer, cake, bun, fill_cart, place):
    """A 130.0 order: two cakes at 50 and one bun at 30."""
    fill_cart(consumer, (cake, 2), (bun, 1))
    return place(consumer)
