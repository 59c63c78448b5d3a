"""Authentication boundary: password hashing, bearer tokens and the current actor.

Requests authenticate with ``Authorization: Bearer <jwt>``. The token names the
user; the role is re-read from the store so a changed or deleted account stops
authenticating immediately.
"""

from datetime import UTC, datetime, timedelta

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pymongo.database import Database

from identity.actor import Actor
from identity.user.repository import UserRepository
from shared.config import get_settings
from shared.database import get_db
from shared.exceptions import AuthenticationError, NotFoundError

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(actor: Actor, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(UTC) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {"sub": actor.actor_id, "role": actor.role.value, "exp": expire}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the user id named by a valid token."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise AuthenticationError("Could not validate credentials") from None
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Could not validate credentials")
    return user_id


def get_current_actor(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Database = Depends(get_db),
) -> Actor:
    if credentials is None:
        raise AuthenticationError("Unauthenticated")
    user_id = decode_access_token(credentials.credentials)
    try:
        user = UserRepository(db).get(user_id)
    except NotFoundError:
        raise AuthenticationError("Unauthenticated") from None
    return user.as_actor()
