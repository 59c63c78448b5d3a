"""Application tests for order transitions: confirm, assign, deliver and cancel."""

import pytest
from ordering.order.cancellation import cancel_order
from ordering.order.confirmation import confirm_order
from ordering.order.delivery import assign_delivery, mark_delivered
from ordering.order.order import OrderStatus
from ordering.order.repository import OrderRepository
from ordering.order.status import delivery_update_status, seller_update_status
from shared.database import ORDERS, SHOPS
from shared.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StateTransitionError,
    ValidationError,
)


def _stored(db, order):
    return db[ORDERS].find_one({"_id": order.id})


@pytest.fixture()
def shipped_order(db, seller, delivery_person, placed_order):
    confirm_order(db, seller.as_actor(), placed_order.id)
    return assign_delivery(db, seller.as_actor(), placed_order.id, delivery_person.id)


# ---------------------------------------------------------------
# Full lifecycle
# ---------------------------------------------------------------
class TestOrderLifecycle:
    def test_placed_to_delivered(self, db, seller, delivery_person, placed_order):
        confirmed = confirm_order(db, seller.as_actor(), placed_order.id)
        assert confirmed.status == OrderStatus.CONFIRMED.value
        assert confirmed.delivery_boy is None

        shipped = assign_delivery(db, seller.as_actor(), placed_order.id, delivery_person.id)
        assert shipped.status == OrderStatus.SHIPPED.value
        assert shipped.delivery_boy == delivery_person.id

        delivered = mark_delivered(db, delivery_person.as_actor(), placed_order.id)
        assert delivered.status == OrderStatus.DELIVERED.value
        assert delivered.delivery_boy == delivery_person.id
        assert delivered.version == 4

    def test_history_records_each_transition(self, db, seller, delivery_person, shipped_order):
        mark_delivered(db, delivery_person.as_actor(), shipped_order.id)
        history = _stored(db, shipped_order)["statusHistory"]

        assert [change["status"] for change in history] == ["placed", "confirmed", "shipped", "delivered"]
        assert [change["actor"] for change in history[1:]] == [seller.id, seller.id, delivery_person.id]

    def test_mark_delivered_on_placed_fails_without_change(self, db, delivery_person, placed_order):
        with pytest.raises(StateTransitionError):
            mark_delivered(db, delivery_person.as_actor(), placed_order.id)
        assert _stored(db, placed_order)["status"] == "placed"
        assert _stored(db, placed_order)["version"] == 1

    def test_unknown_order(self, db, seller):
        with pytest.raises(NotFoundError):
            confirm_order(db, seller.as_actor(), "no-such-order")


# ---------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------
class TestTransitionAuthorization:
    def test_other_seller_cannot_confirm(self, db, other_seller, placed_order):
        with pytest.raises(AuthorizationError):
            confirm_order(db, other_seller.as_actor(), placed_order.id)
        assert _stored(db, placed_order)["status"] == "placed"

    def test_consumer_cannot_confirm(self, db, consumer, placed_order):
        with pytest.raises(AuthorizationError):
            confirm_order(db, consumer.as_actor(), placed_order.id)

    def test_only_assigned_person_delivers(self, db, make_user, shipped_order):
        stranger = make_user("delivery_person", username="manu")
        with pytest.raises(AuthorizationError):
            mark_delivered(db, stranger.as_actor(), shipped_order.id)
        assert _stored(db, shipped_order)["status"] == "shipped"

    def test_ownership_is_rechecked_on_every_call(self, db, seller, other_seller, placed_order):
        confirm_order(db, seller.as_actor(), placed_order.id)
        db[SHOPS].update_one({"_id": placed_order.shop}, {"$set": {"owner": other_seller.id}})

        with pytest.raises(AuthorizationError):
            cancel_order(db, seller.as_actor(), placed_order.id)
        assert cancel_order(db, other_seller.as_actor(), placed_order.id).status == "cancelled"


# ---------------------------------------------------------------
# Assignment
# ---------------------------------------------------------------
class TestAssignDelivery:
    def test_requires_confirmed(self, db, seller, delivery_person, placed_order):
        with pytest.raises(StateTransitionError):
            assign_delivery(db, seller.as_actor(), placed_order.id, delivery_person.id)
        stored = _stored(db, placed_order)
        assert stored["status"] == "placed"
        assert "deliveryBoy" not in stored or stored["deliveryBoy"] is None

    def test_sets_status_and_delivery_person_together(self, db, seller, delivery_person, shipped_order):
        stored = _stored(db, shipped_order)
        assert (stored["status"], stored["deliveryBoy"]) == ("shipped", delivery_person.id)

    def test_target_must_be_delivery_person(self, db, seller, consumer, placed_order):
        confirm_order(db, seller.as_actor(), placed_order.id)
        with pytest.raises(ValidationError):
            assign_delivery(db, seller.as_actor(), placed_order.id, consumer.id)
        assert _stored(db, placed_order)["status"] == "confirmed"

    def test_target_must_exist(self, db, seller, placed_order):
        confirm_order(db, seller.as_actor(), placed_order.id)
        with pytest.raises(NotFoundError):
            assign_delivery(db, seller.as_actor(), placed_order.id, "ghost")

    def test_delivery_person_handles_one_active_order(
        self, db, consumer, seller, delivery_person, shipped_order, cake, fill_cart, place
    ):
        fill_cart(consumer, (cake, 1))
        second = place(consumer)
        confirm_order(db, seller.as_actor(), second.id)

        with pytest.raises(ConflictError):
            assign_delivery(db, seller.as_actor(), second.id, delivery_person.id)

        mark_delivered(db, delivery_person.as_actor(), shipped_order.id)
        assert assign_delivery(db, seller.as_actor(), second.id, delivery_person.id).status == "shipped"


# ---------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------
class TestCancelOrder:
    def test_cancel_placed(self, db, seller, placed_order):
        assert cancel_order(db, seller.as_actor(), placed_order.id).status == "cancelled"

    def test_cancel_shipped_clears_delivery_person(self, db, seller, shipped_order):
        cancelled = cancel_order(db, seller.as_actor(), shipped_order.id)
        assert cancelled.status == "cancelled"
        assert cancelled.delivery_boy is None
        assert "deliveryBoy" not in _stored(db, shipped_order)

    def test_cannot_cancel_delivered(self, db, seller, delivery_person, shipped_order):
        mark_delivered(db, delivery_person.as_actor(), shipped_order.id)
        with pytest.raises(StateTransitionError):
            cancel_order(db, seller.as_actor(), shipped_order.id)
        assert _stored(db, shipped_order)["status"] == "delivered"


# ---------------------------------------------------------------
# Compare-and-swap
# ---------------------------------------------------------------
class TestTransitionRaces:
    def test_stale_transition_is_rejected(self, db, seller, placed_order):
        repo = OrderRepository(db)
        stale = repo.get(placed_order.id)

        repo.apply(stale.confirm(seller.as_actor(), seller.id))
        with pytest.raises(StateTransitionError):
            repo.apply(stale.confirm(seller.as_actor(), seller.id))

        stored = _stored(db, placed_order)
        assert stored["version"] == 2
        assert [change["status"] for change in stored["statusHistory"]] == ["placed", "confirmed"]

    def test_racing_confirm_and_cancel_apply_exactly_one(self, db, seller, placed_order):
        repo = OrderRepository(db)
        order = repo.get(placed_order.id)
        confirm = order.confirm(seller.as_actor(), seller.id)
        cancel = order.cancel(seller.as_actor(), seller.id)

        repo.apply(cancel)
        with pytest.raises(StateTransitionError):
            repo.apply(confirm)
        assert _stored(db, placed_order)["status"] == "cancelled"


# ---------------------------------------------------------------
# Status endpoints' dispatch
# ---------------------------------------------------------------
class TestStatusDispatch:
    def test_seller_confirmed_and_cancelled(self, db, seller, placed_order):
        assert seller_update_status(db, seller.as_actor(), placed_order.id, "confirmed").status == "confirmed"
        assert seller_update_status(db, seller.as_actor(), placed_order.id, "cancelled").status == "cancelled"

    @pytest.mark.parametrize("status", ["shipped", "delivered", "placed"])
    def test_seller_cannot_request_other_statuses(self, db, seller, placed_order, status):
        with pytest.raises(StateTransitionError):
            seller_update_status(db, seller.as_actor(), placed_order.id, status)

    def test_unknown_status_is_invalid(self, db, seller, placed_order):
        with pytest.raises(ValidationError):
            seller_update_status(db, seller.as_actor(), placed_order.id, "teleported")

    def test_delivery_only_marks_delivered(self, db, delivery_person, shipped_order):
        with pytest.raises(StateTransitionError):
            delivery_update_status(db, delivery_person.as_actor(), shipped_order.id, "cancelled")
        assert delivery_update_status(db, delivery_person.as_actor(), shipped_order.id, "delivered").status == "delivered"
