"""FastAPI endpoints for the Identity domain: accounts, sessions and profiles."""

import structlog
from fastapi import APIRouter, Depends
from pymongo.database import Database
from pymongo.errors import PyMongoError

from identity.actor import Actor, Role
from identity.api.schemas import AddressRequest, AuthResponse, LoginRequest, RegisterRequest, UpdateProfileRequest
from identity.auth import create_access_token, get_current_actor
from identity.user.profile import AddAddress, RemoveAddress, UpdateProfile, add_address, remove_address, update_profile
from identity.user.registration import LogIn, RegisterUser, log_in, register_user
from identity.user.repository import UserRepository
from identity.user.user import User
from ordering.cart.management import MergeGuestCart, merge_guest_cart
from shared.database import get_db
from shared.exceptions import MarketplaceError

logger = structlog.get_logger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["auth"])
profile_router = APIRouter(prefix="/api", tags=["profile"])


def _merge_guest_cart(db: Database, user: User, guest_cart) -> int | None:
    """Bring a pre-login cart along into a consumer's session; one that cannot be merged is dropped."""
    if Role(user.role) != Role.CONSUMER or not guest_cart:
        return None
    try:
        return merge_guest_cart(db, user.as_actor(), MergeGuestCart(items=guest_cart))
    except (MarketplaceError, PyMongoError) as exc:
        logger.warning("Guest cart not merged", user_id=user.id, error=str(exc))
        return None


def _session(db: Database, user: User, guest_cart) -> AuthResponse:
    return AuthResponse(
        access_token=create_access_token(user.as_actor()),
        user=user.public(),
        cart_count=_merge_guest_cart(db, user, guest_cart),
    )


@auth_router.post("/register", status_code=201, response_model=AuthResponse)
def register(body: RegisterRequest, db: Database = Depends(get_db)) -> AuthResponse:
    command = RegisterUser(
        username=body.username,
        real_name=body.real_name,
        email=body.email,
        password=body.password,
        role=body.role,
        location_name=body.location_name,
    )
    return _session(db, register_user(db, command), body.guest_cart)


@auth_router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, db: Database = Depends(get_db)) -> AuthResponse:
    user = log_in(db, LogIn(email_or_username=body.email_or_username, password=body.password))
    logger.info("User logged in", user_id=user.id, role=user.role)
    return _session(db, user, body.guest_cart)


@auth_router.get("/me")
def me(actor: Actor = Depends(get_current_actor), db: Database = Depends(get_db)) -> dict:
    return UserRepository(db).get(actor.actor_id).public()


@profile_router.put("/profile")
def edit_profile(
    body: UpdateProfileRequest,
    actor: Actor = Depends(get_current_actor),
    db: Database = Depends(get_db),
) -> dict:
    return update_profile(db, actor, UpdateProfile(real_name=body.real_name)).public()


@profile_router.post("/addresses", status_code=201)
def save_address(
    body: AddressRequest,
    actor: Actor = Depends(get_current_actor),
    db: Database = Depends(get_db),
) -> list[str]:
    return add_address(db, actor, AddAddress(address=body.address)).addresses


@profile_router.delete("/addresses")
def delete_address(
    body: AddressRequest,
    actor: Actor = Depends(get_current_actor),
    db: Database = Depends(get_db),
) -> list[str]:
    return remove_address(db, actor, RemoveAddress(address=body.address)).addresses
