# sweetshop/schemas/sweet.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from sweetshop.models.sweet import MAX_QUANTITY


class SweetCreate(SQLModel):
    """
    Payload for creating a sweet.

    - category is optional; an empty label means "uncategorized".
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    category: str = Field(default="", max_length=50)
    price: float = Field(ge=0)
    quantity: int = Field(default=0, ge=0, le=MAX_QUANTITY)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v: str) -> str:
        return v.strip()


class SweetRead(SQLModel):
    """
    Sweet representation for clients.
    """

    id: uuid.UUID
    name: str
    category: str
    price: float
    quantity: int
    created_at: datetime


class SweetUpdate(SQLModel):
    """
    Partial update payload for sweets.

    Every field is optional: an absent field is left untouched. An
    explicit null is rejected, none of the columns are nullable.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    category: str | None = Field(default=None, max_length=50)
    price: float | None = Field(default=None, ge=0)
    quantity: int | None = Field(default=None, ge=0, le=MAX_QUANTITY)

    @field_validator("name", "category", "price", "quantity")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v: str) -> str:
        return v.strip()


class SweetFilter(SQLModel):
    """
    Search criteria. All fields optional and combined with AND.

    - name      : case-insensitive substring
    - category  : exact match
    - min_price : inclusive lower bound
    - max_price : inclusive upper bound
    """

    name: str | None = None
    category: str | None = None
    min_price: float | None = None
    max_price: float | None = None


class RestockRequest(SQLModel):
    """
    Body for POST /sweets/{id}/restock. Defaults to a single unit.
    """

    model_config = ConfigDict(extra="forbid")

    amount: int = Field(default=1, le=MAX_QUANTITY)
