# storefront/repositories/stats_repo.py
from datetime import date

from sqlalchemy import func
from sqlmodel import Session, select

from storefront.models.order import Order, Sale
from storefront.models.product import Product
from storefront.models.user import User


class StatsRepository:
    """
    Read-only aggregated queries for admin dashboard.
    """

    def count_customers(self, session: Session) -> int:
        stmt = select(func.count()).select_from(User).where(User.role == "Customer")
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_products(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Product).where(Product.trashed_at.is_(None))
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_orders(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Order)
        value = session.exec(stmt).one()
        return int(value or 0)

    def total_sales(self, session: Session) -> float:
        """
        Sum of every recorded sale (one per checkout).
        """
        stmt = select(func.coalesce(func.sum(Sale.amount), 0.0))
        value = session.exec(stmt).one()
        return float(value or 0.0)

    def daily_sales(self, session: Session, since: date) -> list[tuple]:
        """
        (day, amount, checkout count) per sale date from `since` onwards.
        """
        stmt = (
            select(
                Sale.created_at,
                func.coalesce(func.sum(Sale.amount), 0.0).label("amount"),
                func.count(Sale.id).label("checkouts"),
            )
            .where(Sale.created_at >= since)
            .group_by(Sale.created_at)
            .order_by(Sale.created_at)
        )
        return list(session.exec(stmt).all())

    def top_products(self, session: Session, limit: int = 5) -> list[tuple]:
        """
        Top products by quantity ordered across all non-cancelled orders.
        """
        qty_sum = func.coalesce(func.sum(Order.quantity), 0)
        revenue_sum = func.coalesce(func.sum(Order.total), 0.0)

        stmt = (
            select(
                Order.product_id,
                Product.name,
                qty_sum.label("total_quantity"),
                revenue_sum.label("total_revenue"),
            )
            .join(Product, Product.id == Order.product_id)
            .where(Order.status != "Cancelled")
            .group_by(Order.product_id, Product.name)
            .order_by(qty_sum.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def latest_orders(self, session: Session, limit: int = 5) -> list[Order]:
        stmt = select(Order).order_by(Order.created_at.desc()).limit(limit)
        return list(session.exec(stmt).all())
