"""Pydantic models for authentication."""
from pydantic import BaseModel, EmailStr, Field


class AdminLogin(BaseModel):
    """Admin login request."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class AdminBootstrap(BaseModel):
    """Create an account and place it on the temporary allow-list."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    display_name: str | None = Field(None, max_length=100)


class TokenResponse(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class AdminProfile(BaseModel):
    """Current admin with role and capabilities."""

    uid: str
    email: str
    role: str | None
    role_name: str
    is_temporary: bool
    can_create: bool
    can_read: bool
    can_update: bool
    can_delete: bool
    can_use_ai: bool


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str
