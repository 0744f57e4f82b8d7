# storefront/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Account for customers and back office staff.

    Role:
      - "Super Admin" | "Admin" | "Manager" | "Customer"
      - guests are represented by the absence of a session cookie.

    Source:
      - "Admin" (created in the back office) | "Checkout" (self-registered or
        created during checkout)
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(max_length=100)
    surname: str = Field(default="", max_length=100)

    username: str = Field(
        unique=True,
        index=True,
        description="Letters and digits of name + surname, made unique with 1, 2, ...",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Lower-cased e-mail",
    )

    password_hash: str

    role: str = Field(
        default="Customer",
        index=True,
    )

    phone: str = Field(default="")
    city: str = Field(default="")
    address: str = Field(default="")

    source: str = Field(default="Admin")

    is_active: bool = Field(default=True)
    password_reset_required: bool = Field(default=False)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class PasswordResetToken(SQLModel, table=True):
    """
    Single-use 6-digit reset code e-mailed to the user.
    """

    __tablename__ = "password_reset_tokens"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    token: str = Field(max_length=12)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    expires_at: datetime

    used_at: datetime | None = Field(default=None)
