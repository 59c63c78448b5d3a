"""Shop document: a seller's storefront in one town location."""

from datetime import datetime

from pydantic import Field

from identity.actor import Actor
from shared.database import Document, utcnow
from shared.exceptions import AuthorizationError, ValidationError


def _required(**fields):
    errors = {
        name: [f"{name} is required"] for name, value in fields.items() if not value or not str(value).strip()
    }
    if errors:
        raise ValidationError(errors)


class Shop(Document):
    owner: str
    name: str
    category: str
    location_name: str
    image_url: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def open(cls, owner_id, name, category, location_name, image_url=None):
        _required(name=name, category=category, locationName=location_name)
        return cls(
            owner=owner_id,
            name=name.strip(),
            category=category.strip(),
            location_name=location_name.strip(),
            image_url=image_url,
        )

    def update_details(self, name, category, location_name, image_url=None):
        _required(name=name, category=category, locationName=location_name)
        self.name = name.strip()
        self.category = category.strip()
        self.location_name = location_name.strip()
        self.image_url = image_url
        self.updated_at = utcnow()

    def is_owned_by(self, actor: Actor) -> bool:
        return self.owner == actor.actor_id

    def assert_owned_by(self, actor: Actor) -> None:
        if not self.is_owned_by(actor):
            raise AuthorizationError("You do not have permission to modify this shop.")
