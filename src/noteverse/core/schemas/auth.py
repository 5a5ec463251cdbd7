"""
Authentication schemas.

These schemas define the API contracts for registration, login
and JWT access tokens.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class LoginRequest(BaseModel):
    """User login request schema."""

    email: EmailStr = Field(description="Registered email address")
    password: str = Field(min_length=1, max_length=128, description="User password")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "john@example.com",
                "password": "secret123",
            }
        }
    )


class RegisterRequest(BaseModel):
    """User registration request schema."""

    username: str = Field(min_length=3, max_length=50, description="Display username")
    email: EmailStr = Field(description="Email address, used to log in")
    password: str = Field(min_length=6, max_length=128, description="User password")

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "john_doe",
                "email": "john@example.com",
                "password": "secret123",
            }
        }
    )


class UserResponse(BaseModel):
    """User information response schema."""

    id: uuid.UUID = Field(description="User unique identifier")
    username: str = Field(description="Username")
    email: str = Field(description="Email address")
    created_at: datetime = Field(description="Account creation timestamp")
    notes_count: Optional[int] = Field(default=None, description="Total number of notes")

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v):
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "username": "john_doe",
                "email": "john@example.com",
                "created_at": "2025-09-13T10:30:00Z",
                "notes_count": 12,
            }
        },
    )


class TokenResponse(BaseModel):
    """JWT token response schema."""

    access_token: str = Field(description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(description="Token expiration time in seconds")
    user: UserResponse = Field(description="User information")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "token_type": "bearer",
                "expires_in": 2592000,
                "user": {
                    "id": "123e4567-e89b-12d3-a456-426614174000",
                    "username": "john_doe",
                    "email": "john@example.com",
                    "created_at": "2025-09-13T10:30:00Z",
                },
            }
        }
    )
