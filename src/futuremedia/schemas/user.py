"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailStr
    password: str = Field(..., min_length=8, description="Plain-text password, hashed server-side")
    username: str = Field(..., min_length=3, max_length=64, pattern=r"^[A-Za-z0-9_.]+$")


class RegisterResponse(BaseModel):
    """Registration result containing the new user id."""

    success: bool = True
    user_id: str


class LoginRequest(BaseModel):
    """Schema for password login."""

    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    """Response returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type (always 'bearer')")
    user_id: str


class ProfileCounts(BaseModel):
    """Social graph and content counters for a profile."""

    followers: int
    following: int
    posts: int


class ProfileResponse(BaseModel):
    """Public profile of a user."""

    id: str
    name: str | None
    username: str
    bio: str | None
    image: str | None
    cover_image: str | None
    reputation_score: float
    created_at: datetime
    counts: ProfileCounts

    model_config = ConfigDict(from_attributes=True)


class MeResponse(ProfileResponse):
    """Profile of the authenticated user, including private fields."""

    email: str


class ProfileUpdateRequest(BaseModel):
    """Schema for updating user profile information."""

    name: str | None = Field(None, min_length=1, max_length=100)
    bio: str | None = Field(None, max_length=500)
    image: str | None = None
    cover_image: str | None = None
