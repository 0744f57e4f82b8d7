# storefront/services/stats_service.py
from datetime import datetime, timedelta, timezone

from sqlmodel import Session

from storefront.core.exceptions import BadRequestException
from storefront.core.money import money
from storefront.repositories.stats_repo import StatsRepository
from storefront.schemas.stats import (
    AdminDashboardStats,
    DailySales,
    LatestOrderSummary,
    TopProduct,
)


class StatsService:
    """
    Orchestrates aggregated admin dashboard statistics.
    """

    def __init__(self, repo: StatsRepository | None = None):
        self.repo = repo or StatsRepository()

    def get_admin_dashboard_stats(
        self,
        session: Session,
        days: int = 30,
        top_n_products: int = 5,
        latest_n_orders: int = 5,
    ) -> AdminDashboardStats:
        if not 1 <= days <= 366:
            raise BadRequestException("days must be between 1 and 366")

        since = datetime.now(timezone.utc).date() - timedelta(days=days - 1)

        daily_sales = [
            DailySales(date=day, amount=money(amount or 0.0), checkouts=int(checkouts or 0))
            for day, amount, checkouts in self.repo.daily_sales(session, since=since)
        ]

        top_products = [
            TopProduct(
                product_id=product_id,
                name=name,
                total_quantity=int(total_quantity or 0),
                total_revenue=money(total_revenue or 0.0),
            )
            for product_id, name, total_quantity, total_revenue in self.repo.top_products(
                session, limit=top_n_products
            )
        ]

        latest_orders = [
            LatestOrderSummary(
                id=o.id,
                created_at=o.created_at,
                customer=o.customer,
                total=o.total,
                status=o.status,
            )
            for o in self.repo.latest_orders(session, limit=latest_n_orders)
        ]

        return AdminDashboardStats(
            total_products=self.repo.count_products(session),
            total_customers=self.repo.count_customers(session),
            total_orders=self.repo.count_orders(session),
            total_sales=money(self.repo.total_sales(session)),
            daily_sales=daily_sales,
            top_products=top_products,
            latest_orders=latest_orders,
        )
