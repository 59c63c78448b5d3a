"""Error taxonomy shared by every context.

Each error carries a stable machine-readable ``kind``, the HTTP status it maps
to and a ``messages`` dict of field name to a list of human-readable strings,
e.g. ``ValidationError({"quantity": ["Quantity must be at least 1"]})``.
A plain string is accepted too and filed under ``_error``.
"""


class MarketplaceError(Exception):
    kind = "internal_error"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, messages=None):
        if messages is None:
            messages = {"_error": [self.default_message]}
        elif isinstance(messages, str):
            messages = {"_error": [messages]}
        self.messages = messages
        super().__init__(messages)

    @property
    def message(self) -> str:
        return "; ".join(msg for msgs in self.messages.values() for msg in msgs)

    def __str__(self) -> str:
        return self.message


class ValidationError(MarketplaceError):
    kind = "validation_error"
    status_code = 400
    default_message = "Invalid request"


class EmptyCartError(ValidationError):
    kind = "empty_cart"
    default_message = "Your cart is empty."


class MixedShopCartError(ValidationError):
    kind = "mixed_shop_cart"
    default_message = "All items in an order must come from the same shop."


class StateTransitionError(MarketplaceError):
    kind = "invalid_state_transition"
    status_code = 400
    default_message = "Illegal order status change"


class AuthenticationError(MarketplaceError):
    kind = "unauthenticated"
    status_code = 401
    default_message = "Unauthenticated"


class AuthorizationError(MarketplaceError):
    kind = "forbidden"
    status_code = 403
    default_message = "Forbidden: Access denied"


class NotFoundError(MarketplaceError):
    kind = "not_found"
    status_code = 404
    default_message = "Not found"


class ConflictError(MarketplaceError):
    kind = "conflict"
    status_code = 409
    default_message = "Conflicting update"


class DuplicateOrderCodeError(ConflictError):
    kind = "duplicate_order_code"
    default_message = "Order code already exists"


class InternalError(MarketplaceError):
    pass
