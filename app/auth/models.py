# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Supabase JWT.

    This is the minimal user info available from the token itself,
    without calling the auth server.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None
    access_token: Optional[str] = Field(default=None, repr=False)
    expires_at: Optional[int] = None


class TokenPayload(BaseModel):
    """
    Decoded JWT token payload from Supabase.

    Supabase tokens include standard JWT claims plus custom claims.
    """
    sub: str  # User ID
    email: Optional[str] = None
    aud: str  # Audience (should be "authenticated")
    exp: int  # Expiration timestamp
    iat: Optional[int] = None
    role: Optional[str] = None


# =============================================================================
# Requests
# =============================================================================

class Credentials(BaseModel):
    """
    Email/password pair for login and registration.

    Both fields are checked by the route so a missing value is a 400.
    """
    email: Optional[str] = None
    password: Optional[str] = None


# =============================================================================
# Responses
# =============================================================================

class LoginUser(BaseModel):
    id: UUID
    email: Optional[str] = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)
    last_sign_in_at: Optional[datetime] = None


class LoginResponse(BaseModel):
    user: LoginUser
    access_token: str
    expires_at: Optional[int] = None


class RegisteredUser(BaseModel):
    id: UUID
    email: Optional[str] = None
    email_confirmed: bool


class RegisterResponse(BaseModel):
    user: Optional[RegisteredUser] = None
    message: str


class SessionUser(BaseModel):
    id: UUID
    email: Optional[str] = None


class SessionResponse(BaseModel):
    user: SessionUser
    expires_at: Optional[int] = None


class UserResponse(BaseModel):
    """
    Full user profile from the auth server.
    """
    id: UUID
    email: Optional[str] = None
    email_verified: bool = False
    last_sign_in_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)


class MessageResponse(BaseModel):
    message: str
