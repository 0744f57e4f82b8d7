# storefront/models/order.py
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    One purchased cart line.

    Checkout writes one Order per cart line (not one per checkout), each with
    its share of the coupon discount. `items` keeps the line as the customer
    saw it: [{id, name, price, quantity}].
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    customer: str = Field(
        description="Customer display name at checkout",
    )

    user_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="users.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        ge=1,
        description="Quantity ordered (>=1)",
    )

    # Line subtotal minus this line's discount
    total: float = Field(ge=0)

    discount: float = Field(default=0, ge=0)

    coupon_code: str | None = Field(default=None)

    # Pending | Paid | Shipped | Cancelled
    status: str = Field(
        default="Pending",
        index=True,
    )

    items: list[dict] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False, default=list),
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class Sale(SQLModel, table=True):
    """
    Aggregate revenue record: one per checkout, amount = checkout total.
    """

    __tablename__ = "sales"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    source: str = Field(default="Website Checkout")

    amount: float = Field(ge=0)

    created_at: date = Field(
        default_factory=lambda: datetime.now(timezone.utc).date(),
    )
