"""Order document and its status machine.

State Machine:
    placed -> confirmed -> shipped -> delivered
    cancelled (from placed, confirmed, shipped)

``delivered`` and ``cancelled`` are terminal. Line items are a frozen snapshot
of the cart at placement; later catalog edits never touch them.

Status-changing methods only validate and describe the change as a
``Transition``; ``OrderRepository.apply`` writes it with a compare-and-swap on
the status and version that were read, so of two racing transitions exactly
one lands.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from identity.actor import Actor
from shared.database import Document, utcnow
from shared.exceptions import AuthorizationError, StateTransitionError, ValidationError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PLACED = "placed"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PLACED: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_CANCELLABLE_STATES = {
    OrderStatus.PLACED,
    OrderStatus.CONFIRMED,
    OrderStatus.SHIPPED,
}

_REQUIRED_SOURCE_MESSAGES = {
    OrderStatus.CONFIRMED: "Order must be 'placed' to be confirmed.",
    OrderStatus.SHIPPED: "Order must be 'confirmed' to be assigned for delivery.",
    OrderStatus.DELIVERED: "Order must be 'shipped' to be marked as 'delivered'.",
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in _VALID_TRANSITIONS.get(current, set())


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
class _Embedded(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)


class LineItem(_Embedded):
    """An ordered item as it was at placement: name, per-piece price and quantity."""

    item: str
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(ge=1)

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


class PaymentDetails(_Embedded):
    method: str
    status: PaymentStatus = PaymentStatus.PENDING.value


class StatusChange(_Embedded):
    status: OrderStatus
    actor: str
    at: datetime = Field(default_factory=utcnow)


@dataclass(frozen=True)
class Transition:
    """A validated status change, expected to apply on top of ``(from_status, version)``."""

    order_id: str
    from_status: OrderStatus
    to_status: OrderStatus
    version: int
    actor_id: str
    delivery_boy: str | None = None
    clear_delivery_boy: bool = False


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
class Order(Document):
    order_code: str
    consumer: str
    shop: str
    items: list[LineItem]
    total_bill: float
    delivery_address: str
    payment_details: PaymentDetails
    delivery_boy: str | None = None
    status: OrderStatus = OrderStatus.PLACED.value
    version: int = 1
    status_history: list[StatusChange] = Field(default_factory=list)
    idempotency_key: str
    cart_cleared: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def place(cls, order_code, consumer_id, shop_id, lines, delivery_address, payment_method, idempotency_key):
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        lines = [line if isinstance(line, LineItem) else LineItem.model_validate(line) for line in lines]
        return cls(
            order_code=order_code,
            consumer=consumer_id,
            shop=shop_id,
            items=lines,
            total_bill=round(sum(line.subtotal for line in lines), 2),
            delivery_address=delivery_address,
            payment_details=PaymentDetails(method=payment_method),
            idempotency_key=idempotency_key,
            status_history=[StatusChange(status=OrderStatus.PLACED, actor=consumer_id)],
        )

    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    def is_for_seller(self, actor: Actor, shop_owner_id) -> bool:
        return actor.actor_id == shop_owner_id

    def _assert_seller(self, actor: Actor, shop_owner_id):
        if not self.is_for_seller(actor, shop_owner_id):
            raise AuthorizationError("Forbidden: You do not own the shop for this order.")

    def _assert_can_transition(self, target: OrderStatus):
        current = self.current_status
        if not can_transition(current, target):
            message = _REQUIRED_SOURCE_MESSAGES.get(target, f"Cannot change order status from {current.value} to {target.value}")
            raise StateTransitionError({"status": [message]})

    def _transition(self, target: OrderStatus, actor: Actor, **changes) -> Transition:
        return Transition(
            order_id=self.id,
            from_status=self.current_status,
            to_status=target,
            version=self.version,
            actor_id=actor.actor_id,
            **changes,
        )

    def confirm(self, actor: Actor, shop_owner_id) -> Transition:
        self._assert_seller(actor, shop_owner_id)
        self._assert_can_transition(OrderStatus.CONFIRMED)
        return self._transition(OrderStatus.CONFIRMED, actor)

    def assign(self, actor: Actor, shop_owner_id, delivery_person_id) -> Transition:
        self._assert_seller(actor, shop_owner_id)
        self._assert_can_transition(OrderStatus.SHIPPED)
        return self._transition(OrderStatus.SHIPPED, actor, delivery_boy=delivery_person_id)

    def mark_delivered(self, actor: Actor) -> Transition:
        # Before assignment there is nobody to authorize, so the status check decides.
        if self.delivery_boy is not None and self.delivery_boy != actor.actor_id:
            raise AuthorizationError("Forbidden: This order is not assigned to you.")
        self._assert_can_transition(OrderStatus.DELIVERED)
        if self.delivery_boy is None:
            raise AuthorizationError("Forbidden: This order is not assigned to you.")
        return self._transition(OrderStatus.DELIVERED, actor)

    def cancel(self, actor: Actor, shop_owner_id) -> Transition:
        self._assert_seller(actor, shop_owner_id)
        if self.current_status not in _CANCELLABLE_STATES:
            raise StateTransitionError({"status": [f"Order cannot be cancelled once {self.status}."]})
        return self._transition(
            OrderStatus.CANCELLED,
            actor,
            clear_delivery_boy=self.current_status == OrderStatus.SHIPPED,
        )
