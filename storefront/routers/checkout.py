# storefront/routers/checkout.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import AuthState, get_auth_state
from storefront.core.dependencies import get_render_cache
from storefront.core.render_cache import RenderCacheInvalidator
from storefront.database import get_session
from storefront.schemas.checkout import CheckoutRequest, CheckoutResponse
from storefront.services.checkout_service import CheckoutService

router = APIRouter(prefix="/checkout", tags=["Checkout"])
service = CheckoutService()


@router.post("", response_model=CheckoutResponse)
def checkout(
    payload: CheckoutRequest,
    session: Session = Depends(get_session),
    auth: AuthState = Depends(get_auth_state),
    render_cache: RenderCacheInvalidator = Depends(get_render_cache),
):
    """
    Place an order for the submitted lines (guest or signed-in).

    Signed-in customers get their account details filled in and the orders
    attached to their account. Guests may ask for an account to be created.
    """
    return service.checkout(session, payload, auth, render_cache)
