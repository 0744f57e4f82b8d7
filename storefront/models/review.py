# storefront/models/review.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class ProductReview(SQLModel, table=True):
    """
    Customer review of a product.

    status: Approved | Pending | Hidden (only Approved is shown publicly)
    """

    __tablename__ = "product_reviews"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    author: str = Field(default="Anonymous", max_length=100)

    rating: int = Field(ge=1, le=5)

    comment: str = Field(default="")

    status: str = Field(default="Approved", index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
