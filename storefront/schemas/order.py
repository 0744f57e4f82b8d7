# storefront/schemas/order.py
import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel

OrderStatus = Literal["Pending", "Paid", "Shipped", "Cancelled"]


class OrderLineSnapshot(SQLModel):
    """
    The cart line as submitted at checkout.
    """

    id: str
    name: str
    price: float
    quantity: int


class OrderRead(SQLModel):
    """
    One order row (= one checkout line).
    """

    id: uuid.UUID
    customer: str
    user_id: uuid.UUID | None
    product_id: uuid.UUID
    quantity: int
    total: float
    discount: float
    coupon_code: str | None
    status: OrderStatus
    items: list[OrderLineSnapshot]
    created_at: datetime


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus


class SaleRead(SQLModel):
    id: uuid.UUID
    source: str
    amount: float
    created_at: date
