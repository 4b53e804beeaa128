# sweetshop/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Persistent user account for the Sweet Shop.

    Role:
      - "customer" | "admin"
      - new registrations are always "customer"; admins are provisioned
        with create_admin.py

    password_hash holds a bcrypt hash. It must never be returned by the
    API (read schemas do not declare it) nor logged.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Login email (exact match)",
    )

    name: str = Field(
        max_length=50,
        description="Display name",
    )

    password_hash: str = Field(
        description="Salted one-way hash of the password",
    )

    # Application role
    role: str = Field(
        default="customer",
        index=True,
        description="Application role: customer | admin",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
