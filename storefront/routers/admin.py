# storefront/routers/admin.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import AuthState, require_staff, require_user_admin
from storefront.database import get_session
from storefront.schemas.notification import (
    NotificationListResponse,
    NotificationsMarkedRead,
)
from storefront.schemas.order import OrderRead, OrderStatusUpdate, SaleRead
from storefront.schemas.stats import AdminDashboardStats
from storefront.schemas.user import AdminUserCreate, UserRead
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.services.stats_service import StatsService
from storefront.services.user_service import UserService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_staff)],
)

notification_service = NotificationService()
order_service = OrderService()
stats_service = StatsService()
user_service = UserService(notifications=notification_service)


# -------- Notifications --------


@router.get("/notifications", response_model=NotificationListResponse)
def list_notifications(
    limit: int | None = None,
    session: Session = Depends(get_session),
):
    """
    Latest bell notifications (limit clamped to 1..50, default 14) with the
    unread count.
    """
    return {
        "notifications": notification_service.list_latest(session, limit),
        "unread_count": notification_service.unread_count(session),
    }


@router.post("/notifications", response_model=NotificationsMarkedRead)
def mark_notifications_read(session: Session = Depends(get_session)):
    """
    Mark every notification as read.
    """
    return {"ok": True, "updated": notification_service.mark_all_read(session)}


# -------- Orders & sales --------


@router.get("/orders", response_model=list[OrderRead])
def list_orders(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    return order_service.list_all_orders(session, skip, limit)


@router.get("/orders/{order_id}", response_model=OrderRead)
def get_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return order_service.get_order_admin(session, order_id)


@router.patch("/orders/{order_id}/status", response_model=OrderRead)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    return order_service.update_status(session, order_id, payload)


@router.get("/sales", response_model=list[SaleRead])
def list_sales(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    return order_service.list_sales(session, skip, limit)


# -------- Dashboard stats --------


@router.get("/stats", response_model=AdminDashboardStats)
def get_admin_dashboard_stats(
    days: int = 30,
    session: Session = Depends(get_session),
):
    """
    Aggregated statistics for the admin dashboard.

    Query params (optional):
      - days: size of the daily sales window, 1–366 (default 30)
    """
    return stats_service.get_admin_dashboard_stats(session=session, days=days)


# -------- Users (Super Admin / Admin) --------


@router.get("/users", response_model=list[UserRead])
def list_users(
    session: Session = Depends(get_session),
    auth: AuthState = Depends(require_user_admin),
    skip: int = 0,
    limit: int = 50,
):
    return user_service.list_users(session, skip=skip, limit=limit)


@router.post(
    "/users",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    payload: AdminUserCreate,
    session: Session = Depends(get_session),
    auth: AuthState = Depends(require_user_admin),
):
    """
    Create an account. Admins cannot create Super Admins.
    """
    return user_service.create_user(session, auth, payload)


@router.post("/users/{user_id}/deactivate", response_model=UserRead)
def deactivate_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
    auth: AuthState = Depends(require_user_admin),
):
    return user_service.deactivate_user(session, auth, user_id)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
    auth: AuthState = Depends(require_user_admin),
):
    """
    Delete an account. Only Super Admins may delete Super Admins.
    """
    user_service.delete_user(session, auth, user_id)
    return None
