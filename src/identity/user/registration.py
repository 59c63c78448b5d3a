"""User registration and login: commands and handlers."""

import structlog
from pydantic import BaseModel
from pymongo.database import Database

from identity.actor import Role
from identity.auth import hash_password, verify_password
from identity.user.repository import UserRepository
from identity.user.user import User
from shared.exceptions import AuthenticationError, ConflictError, ValidationError

logger = structlog.get_logger(__name__)


class RegisterUser(BaseModel):
    """Create a new account; sellers and delivery personnel must name a location."""

    username: str | None = None
    real_name: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = Role.CONSUMER.value
    location_name: str | None = None


class LogIn(BaseModel):
    email_or_username: str | None = None
    password: str | None = None


def register_user(db: Database, command: RegisterUser) -> User:
    if not command.password:
        raise ValidationError({"password": ["password is required"]})

    repo = UserRepository(db)
    user = User.register(
        username=command.username,
        real_name=command.real_name,
        email=command.email,
        password_hash=hash_password(command.password),
        role=command.role,
        location_name=command.location_name,
    )
    if repo.exists(user.username, user.email):
        raise ConflictError({"user": ["Username or email already exists"]})
    repo.add(user)

    logger.info("User registered", user_id=user.id, role=user.role)
    return user


def log_in(db: Database, command: LogIn) -> User:
    if not command.email_or_username or not command.password:
        raise ValidationError({"credentials": ["emailOrUsername and password are required"]})

    user = UserRepository(db).find_by_login(command.email_or_username)
    if user is None or not verify_password(command.password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    return user
