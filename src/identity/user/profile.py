"""Profile and saved-address management: commands and handlers."""

from pydantic import BaseModel
from pymongo.database import Database

from identity.actor import Actor
from identity.user.repository import UserRepository
from identity.user.user import User, clean_address
from shared.exceptions import ValidationError


class UpdateProfile(BaseModel):
    real_name: str | None = None


class AddAddress(BaseModel):
    address: str | None = None


class RemoveAddress(BaseModel):
    address: str | None = None


def update_profile(db: Database, actor: Actor, command: UpdateProfile) -> User:
    if not command.real_name or not command.real_name.strip():
        raise ValidationError({"realName": ["Full name is required"]})
    return UserRepository(db).set_real_name(actor.actor_id, command.real_name.strip())


def add_address(db: Database, actor: Actor, command: AddAddress) -> User:
    return UserRepository(db).push_address(actor.actor_id, clean_address(command.address))


def remove_address(db: Database, actor: Actor, command: RemoveAddress) -> User:
    if not command.address:
        raise ValidationError({"address": ["Address to remove is required"]})
    return UserRepository(db).pull_address(actor.actor_id, command.address)
