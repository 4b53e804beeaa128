# sweetshop/models/sweet.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field

# Largest stock level a single sweet can hold (signed 32-bit INTEGER).
MAX_QUANTITY = 2**31 - 1


class Sweet(SQLModel, table=True):
    """
    Inventory item.

    Columns:
      - id, name, category, price, quantity, created_at

    Category is a free-text label; the list of categories is derived
    from the rows, there is no categories table.
    """

    __tablename__ = "sweets"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        index=True,
        description="Display name of the sweet",
    )

    category: str = Field(
        default="",
        max_length=50,
        index=True,
        description="Free-text category label",
    )

    price: float = Field(
        ge=0,
        description="Unit price",
    )

    quantity: int = Field(
        default=0,
        ge=0,
        le=MAX_QUANTITY,
        description="How many units currently in stock",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
