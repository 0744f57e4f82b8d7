# storefront/models/product.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    Pricing fields:
      - price: regular price
      - sale_price: optional reduced price (only meaningful when < price)
      - sale_schedule_start_at / sale_schedule_end_at: optional sale window,
        either bound may be open

    The price a customer pays right now is derived by
    `storefront.services.pricing.get_effective_pricing`, never stored.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
        description="Display name of the product",
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )

    category: str = Field(
        default="Uncategorized",
        max_length=100,
        index=True,
    )

    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False, default=list),
    )

    description: str | None = Field(
        default=None,
        description="Optional long description / HTML",
    )

    image: str | None = Field(
        default=None,
        description="Main image URL",
    )

    price: float = Field(
        gt=0,
        description="Regular unit price",
    )

    sale_price: float | None = Field(
        default=None,
        description="Reduced price; ignored unless 0 < sale_price < price",
    )

    sale_schedule_start_at: datetime | None = Field(default=None)
    sale_schedule_end_at: datetime | None = Field(default=None)

    stock: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    # Published | Draft
    publish_status: str = Field(
        default="Published",
        index=True,
    )

    trashed_at: datetime | None = Field(default=None)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
