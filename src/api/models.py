"""Pydantic models for API request/response."""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """Request model for user registration."""
    model_config = ConfigDict(extra='forbid')

    name: str
    email: str
    password: str


class SigninRequest(BaseModel):
    """Request model for user login."""
    model_config = ConfigDict(extra='forbid')

    email: str
    password: str


class TokenResponse(BaseModel):
    """Response model for signup and signin."""
    message: str
    token: str


class UserResponse(BaseModel):
    """Public view of a user (never includes the password hash)."""
    id: str = Field(..., description="User ID")
    name: str
    email: str
    created_at: datetime


class ProtectedResponse(BaseModel):
    """Response model for the protected resource."""
    message: str
    user: UserResponse


class MessageResponse(BaseModel):
    """Error body returned by every failing endpoint."""
    message: str
