"""The authenticated caller, passed explicitly into every domain operation."""

from dataclasses import dataclass
from enum import Enum

from shared.exceptions import AuthorizationError


class Role(Enum):
    CONSUMER = "consumer"
    SELLER = "seller"
    DELIVERY_PERSON = "delivery_person"


# Roles that operate from a fixed town location
LOCATED_ROLES = {Role.SELLER, Role.DELIVERY_PERSON}


@dataclass(frozen=True)
class Actor:
    actor_id: str
    role: Role

    def require_role(self, *roles: Role) -> None:
        if self.role not in roles:
            raise AuthorizationError("Forbidden: Access denied")
