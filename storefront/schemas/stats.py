# storefront/schemas/stats.py
import uuid
from datetime import date, datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel

from storefront.schemas.order import OrderStatus


class DailySales(SQLModel):
    """
    Sale totals for one day.
    """
    model_config = ConfigDict(extra="forbid")

    date: date
    amount: float
    checkouts: int


class TopProduct(SQLModel):
    """
    Aggregated stats for top-selling products.
    """
    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    name: str
    total_quantity: int
    total_revenue: float


class LatestOrderSummary(SQLModel):
    """
    Lightweight info for last N orders.
    """
    model_config = ConfigDict(extra="forbid")

    id: uuid.UUID
    created_at: datetime
    customer: str
    total: float
    status: OrderStatus


class AdminDashboardStats(SQLModel):
    """
    Full payload for admin dashboard.
    """
    model_config = ConfigDict(extra="forbid")

    total_products: int
    total_customers: int
    total_orders: int
    total_sales: float
    daily_sales: list[DailySales]
    top_products: list[TopProduct]
    latest_orders: list[LatestOrderSummary]
