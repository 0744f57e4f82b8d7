# storefront/routers/orders.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import AuthState, require_auth
from storefront.database import get_session
from storefront.schemas.order import OrderRead
from storefront.services.order_service import OrderService
from storefront.services.user_service import UserService

router = APIRouter(prefix="/orders", tags=["Orders"])

service = OrderService()
user_service = UserService()


@router.get("/me", response_model=list[OrderRead])
def list_my_orders(
    session: Session = Depends(get_session),
    auth: AuthState = Depends(require_auth),
    skip: int = 0,
    limit: int = 50,
):
    """
    List the signed-in account's orders, newest first.
    """
    user = user_service.get_active_by_username(session, auth.username)
    return service.list_user_orders(session, user, skip, limit)
