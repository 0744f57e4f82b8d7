# storefront/models/coupon.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Coupon(SQLModel, table=True):
    """
    Discount coupon.

    `code` is stored upper-cased so lookups are case-insensitive.
    type: percent (value is a percentage, max 100) | fixed (value is an amount)
    """

    __tablename__ = "coupons"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    code: str = Field(
        max_length=64,
        unique=True,
        index=True,
    )

    description: str = Field(default="")

    type: str = Field(
        default="percent",
        description="percent | fixed",
    )

    value: float = Field(gt=0)

    min_subtotal: float = Field(
        default=0,
        ge=0,
        description="Coupon only applies from this subtotal upwards",
    )

    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
