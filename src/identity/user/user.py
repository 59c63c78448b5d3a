"""User document: credentials, role, saved addresses and home location.

A consumer's cart lives inside the same document (see ``ordering.cart``); the
identity context never reads or writes it.
"""

from datetime import datetime

from pydantic import Field

from identity.actor import LOCATED_ROLES, Actor, Role
from shared.database import Document, utcnow
from shared.exceptions import ValidationError


class User(Document):
    username: str
    real_name: str
    email: str
    password_hash: str
    role: Role = Role.CONSUMER.value
    addresses: list[str] = Field(default_factory=list)
    location_name: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def register(cls, username, real_name, email, password_hash, role=Role.CONSUMER.value, location_name=None):
        errors = {}
        for field, value in (("username", username), ("realName", real_name), ("email", email)):
            if not value or not str(value).strip():
                errors[field] = [f"{field} is required"]
        if errors:
            raise ValidationError(errors)

        try:
            role = Role(role)
        except ValueError:
            raise ValidationError({"role": [f"Unknown role: {role}"]}) from None

        if role in LOCATED_ROLES and not (location_name and location_name.strip()):
            raise ValidationError({"locationName": ["Location is required for sellers and delivery personnel"]})

        return cls(
            username=username.strip(),
            real_name=real_name.strip(),
            email=email.strip().lower(),
            password_hash=password_hash,
            role=role,
            location_name=location_name.strip() if role in LOCATED_ROLES else None,
        )

    def as_actor(self) -> Actor:
        return Actor(actor_id=self.id, role=Role(self.role))

    def public(self) -> dict:
        """The user as shown to clients: everything except the credential."""
        return self.model_dump(by_alias=True, exclude={"password_hash"}, mode="json")


def clean_address(address) -> str:
    if not isinstance(address, str) or not address.strip():
        raise ValidationError({"address": ["A valid address is required"]})
    return address.strip()
