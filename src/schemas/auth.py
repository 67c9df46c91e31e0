"""Authentication schemas."""

from pydantic import BaseModel, Field, field_validator


class UserSignup(BaseModel):
    """User registration request."""

    name: str = Field(..., min_length=1, max_length=255)
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("username", mode="before")
    @classmethod
    def normalize_username(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class UserLogin(BaseModel):
    """User login request."""

    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("username", mode="before")
    @classmethod
    def normalize_username(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class LoginResponse(BaseModel):
    """Login response with the bearer token."""

    message: str = "Login successful"
    user_id: str
    name: str
    token: str
