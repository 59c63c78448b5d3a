"""Pydantic request/response schemas for the Identity API."""

from typing import Any

from shared.api import ApiSchema

# --- Request Schemas ---


class RegisterRequest(ApiSchema):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "username": "meera",
                    "realName": "Meera Nair",
                    "email": "meera@example.com",
                    "password": "s3cret-pass",
                    "role": "consumer",
                    "guestCart": [{"itemId": "5f1c0a8e2b3d4c5e6f708192", "quantity": 2}],
                }
            ]
        }
    }

    username: str | None = None
    real_name: str | None = None
    email: str | None = None
    password: str | None = None
    role: str = "consumer"
    location_name: str | None = None
    guest_cart: Any = None


class LoginRequest(ApiSchema):
    email_or_username: str | None = None
    password: str | None = None
    guest_cart: Any = None


class UpdateProfileRequest(ApiSchema):
    real_name: str | None = None


class AddressRequest(ApiSchema):
    address: str | None = None


# --- Response Schemas ---


class AuthResponse(ApiSchema):
    access_token: str
    token_type: str = "bearer"
    user: dict
    cart_count: int | None = None
