# storefront/services/order_service.py
import uuid

from sqlmodel import Session

from storefront.core.exceptions import NotFoundException
from storefront.models.order import Order, Sale
from storefront.models.user import User
from storefront.repositories.order_repo import OrderRepository
from storefront.schemas.order import OrderStatusUpdate


class OrderService:
    """
    Read side of orders and sales, plus admin status changes.

    Orders are only ever created by the checkout service.
    """

    def __init__(self, order_repo: OrderRepository | None = None):
        self.order_repo = order_repo or OrderRepository()

    # -------- User-facing operations --------

    def list_user_orders(
        self,
        session: Session,
        user: User | None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        """
        Orders attached to the signed-in account. Accounts without a record
        (the configured back office login) have none.
        """
        if user is None:
            return []
        return self.order_repo.list_for_user(session, user.id, skip, limit)

    # -------- Admin operations --------

    def list_all_orders(self, session: Session, skip: int = 0, limit: int = 50) -> list[Order]:
        return self.order_repo.list_all(session, skip, limit)

    def get_order_admin(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise NotFoundException("Order not found")
        return order

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> Order:
        order = self.get_order_admin(session, order_id)
        if order.status == payload.status:
            return order
        order.status = payload.status
        return self.order_repo.update_order(session, order)

    def list_sales(self, session: Session, skip: int = 0, limit: int = 50) -> list[Sale]:
        return self.order_repo.list_sales(session, skip, limit)
