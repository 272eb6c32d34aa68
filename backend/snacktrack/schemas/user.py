"""
SnackTrack Backend - User Request/Response Schemas
===================================================

What:  Pydantic models for /api/register and /api/login.
How:   FastAPI validates request bodies against the *Request models (bad
       bodies become 400s) and serializes responses from the *Response models.
"""

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class RegisterRequest(BaseModel):
    """Body of POST /api/register. `role` is optional and defaults to 'user'."""
    username: str = Field(description="Unique login name")
    password: str = Field(description="Plaintext password (hashed before storage)")
    role: str = Field(default="user", description="Free-text role, e.g. 'user' or 'admin'")
    name: str = Field(description="Display name")


class LoginRequest(BaseModel):
    """Body of POST /api/login."""
    username: str
    password: str


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class RegisterResponse(BaseModel):
    """
    201 body of POST /api/register.

    Serialized as `{"message": ..., "userId": ...}`; FastAPI dumps response
    models by alias.
    """
    message: str = Field(default="User registered successfully")
    user_id: int = Field(alias="userId", description="Id of the new user")

    model_config = {"populate_by_name": True}


class PublicUserResponse(BaseModel):
    """Stored user row without the password hash."""
    id: int
    username: str
    role: str | None = None
    name: str

    model_config = {"from_attributes": True}


class UserResponse(PublicUserResponse):
    """
    Stored user row exactly as persisted, password hash included.

    This is the login response existing clients keep as their "logged in"
    state. LOGIN_INCLUDE_PASSWORD_HASH=false switches login to
    PublicUserResponse.
    """
    password: str
