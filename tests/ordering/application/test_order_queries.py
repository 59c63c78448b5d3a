"""Application tests for the per-role order listings."""

import pytest
from identity.user.profile import AddAddress, add_address
from identity.user.repository import UserRepository
from ordering.order import queries
from ordering.order.confirmation import confirm_order
from ordering.order.delivery import assign_delivery
from shared.exceptions import AuthorizationError


class TestConsumerOrders:
    def test_newest_first(self, db, consumer, cake, fill_cart, place):
        fill_cart(consumer, (cake, 1))
        first = place(consumer)
        fill_cart(consumer, (cake, 2))
        second = place(consumer)

        assert [order["_id"] for order in queries.consumer_orders(db, consumer.as_actor())] == [second.id, first.id]

    def test_only_own_orders(self, db, make_user, placed_order):
        neighbour = make_user("consumer", username="neha")
        assert queries.consumer_orders(db, neighbour.as_actor()) == []


class TestSellerOrders:
    def test_orders_across_owned_shops(self, db, seller, make_shop, make_item, consumer, placed_order, fill_cart, place):
        second_shop = make_shop(seller, name="Anand Sweets")
        fill_cart(consumer, (make_item(second_shop, name="Halwa", price=80.0), 1))
        other = place(consumer)

        ids = {order["_id"] for order in queries.seller_orders(db, seller.as_actor())}
        assert ids == {placed_order.id, other.id}

    def test_seller_without_shops_sees_nothing(self, db, other_seller, placed_order):
        assert queries.seller_orders(db, other_seller.as_actor()) == []

    def test_single_order_for_owner_only(self, db, seller, other_seller, placed_order):
        assert queries.seller_order(db, seller.as_actor(), placed_order.id)["_id"] == placed_order.id
        with pytest.raises(AuthorizationError):
            queries.seller_order(db, other_seller.as_actor(), placed_order.id)


class TestDeliveryQueries:
    def test_assigned_orders(self, db, seller, delivery_person, placed_order):
        assert queries.delivery_orders(db, delivery_person.as_actor()) == []
        confirm_order(db, seller.as_actor(), placed_order.id)
        assign_delivery(db, seller.as_actor(), placed_order.id, delivery_person.id)

        assert [order["_id"] for order in queries.delivery_orders(db, delivery_person.as_actor())] == [placed_order.id]

    def test_personnel_listing_filters_by_location(self, db, seller, make_user):
        make_user("delivery_person", username="biju", location_name="Kottayam")
        make_user("delivery_person", username="anil", location_name="Pala")
        make_user("consumer", username="asha")

        everyone = queries.delivery_personnel(db, seller.as_actor())
        assert [person.username for person in everyone] == ["anil", "biju"]
        local = queries.delivery_personnel(db, seller.as_actor(), "Pala")
        assert [person.username for person in local] == ["anil"]

    def test_personnel_listing_is_for_sellers(self, db, consumer):
        with pytest.raises(AuthorizationError):
            queries.delivery_personnel(db, consumer.as_actor())


# ---------------------------------------------------------------
# Party details
# ---------------------------------------------------------------
def _ship(db, seller, delivery_person, order):
    confirm_order(db, seller.as_actor(), order.id)
    assign_delivery(db, seller.as_actor(), order.id, delivery_person.id)


class TestPartyDetails:
    def test_consumer_sees_shop_name_and_rider(self, db, consumer, seller, delivery_person, shop, placed_order):
        [order] = queries.consumer_orders(db, consumer.as_actor())
        assert order["shop"] == {"_id": shop.id, "name": "Anand Bakery"}
        assert order["consumer"] == consumer.id
        assert order["deliveryBoy"] is None

        _ship(db, seller, delivery_person, placed_order)
        [order] = queries.consumer_orders(db, consumer.as_actor())
        assert order["deliveryBoy"] == {"_id": delivery_person.id, "realName": "Biju"}

    def test_seller_listing_names_consumer(self, db, consumer, seller, shop, placed_order):
        [order] = queries.seller_orders(db, seller.as_actor())
        assert order["consumer"] == {"_id": consumer.id, "realName": "Asha"}
        assert order["shop"] == {"_id": shop.id, "name": "Anand Bakery"}

    def test_single_order_carries_contact_and_location(self, db, consumer, seller, shop, placed_order):
        order = queries.seller_order(db, seller.as_actor(), placed_order.id)
        assert order["consumer"] == {"_id": consumer.id, "realName": "Asha", "email": "asha@example.com"}
        assert order["shop"] == {
            "_id": shop.id,
            "name": "Anand Bakery",
            "locationName": "Kottayam",
            "owner": seller.id,
        }

    def test_delivery_listing_carries_addresses(self, db, consumer, seller, delivery_person, shop, placed_order):
        add_address(db, consumer.as_actor(), AddAddress(address="12 Market Road"))
        _ship(db, seller, delivery_person, placed_order)

        [order] = queries.delivery_orders(db, delivery_person.as_actor())
        assert order["consumer"] == {"_id": consumer.id, "realName": "Asha", "addresses": ["12 Market Road"]}
        assert order["shop"] == {"_id": shop.id, "name": "Anand Bakery", "locationName": "Kottayam"}
        assert order["deliveryBoy"] == {"_id": delivery_person.id, "realName": "Biju"}

    def test_removed_consumer_expands_to_none(self, db, seller, consumer, placed_order):
        UserRepository(db).collection.delete_one({"_id": consumer.id})
        [order] = queries.seller_orders(db, seller.as_actor())
        assert order["consumer"] is None
