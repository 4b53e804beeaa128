# sweetshop/schemas/user.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

# App-level roles. Unauthenticated callers have no token, so no role.
Role = Literal["customer", "admin"]

MIN_PASSWORD_LENGTH = 6


class UserBase(SQLModel):
    """
    Shared fields for read models.

    Validation rules:
      - email must be a valid EmailStr
      - name cannot be empty or whitespace
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    name: str = Field(max_length=50)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class UserRegister(UserBase):
    """
    Payload for POST /auth/register.

    `role` is not accepted here; every new account is a customer.
    """

    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=72)


class UserLogin(SQLModel):
    """
    Payload for POST /auth/login.

    email is a plain string on purpose: a malformed email is just another
    failed login (401), not a validation error.
    """

    model_config = ConfigDict(extra="forbid")

    email: str
    password: str


class UserRead(SQLModel):
    """Response schema returned to clients (never includes the hash)."""

    id: uuid.UUID
    email: str
    name: str
    role: Role
    created_at: datetime


class Token(SQLModel):
    token: str
    token_type: str = "bearer"


class TokenIdentity(SQLModel):
    """
    Verified claims of an access token, attached to the request by the
    access gate.
    """

    user_id: uuid.UUID
    role: Role
