# storefront/routers/coupons.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import AuthState, require_staff
from storefront.core.exceptions import BadRequestException
from storefront.core.money import money
from storefront.database import get_session
from storefront.schemas.coupon import (
    CouponApplyRequest,
    CouponApplyResponse,
    CouponCreate,
    CouponRead,
    CouponStatusUpdate,
)
from storefront.services.coupon_service import CouponService

router = APIRouter(tags=["Coupons"])
coupon_service = CouponService()


@router.post("/coupons/apply", response_model=CouponApplyResponse)
def apply_coupon(
    payload: CouponApplyRequest,
    session: Session = Depends(get_session),
):
    """
    Preview a coupon against a cart subtotal (checkout page).

    400 when the code is blank, unknown, inactive or below its minimum.
    """
    if not payload.code:
        raise BadRequestException("Coupon code is required.")

    subtotal = money(payload.subtotal)
    result = coupon_service.apply_coupon(session, payload.code, subtotal)
    return CouponApplyResponse(
        coupon=CouponRead.model_validate(result.coupon),
        discount=money(result.discount),
    )


# ---- back office ----


@router.get("/admin/coupons", response_model=list[CouponRead])
def list_coupons(
    session: Session = Depends(get_session),
    auth: AuthState = Depends(require_staff),
):
    return coupon_service.list_coupons(session)


@router.post(
    "/admin/coupons",
    response_model=CouponRead,
    status_code=status.HTTP_201_CREATED,
)
def create_coupon(
    payload: CouponCreate,
    session: Session = Depends(get_session),
    auth: AuthState = Depends(require_staff),
):
    """
    Create a coupon. Codes are unique (case-insensitive).
    """
    return coupon_service.create_coupon(session, payload)


@router.patch("/admin/coupons/{coupon_id}/status", response_model=CouponRead)
def update_coupon_status(
    coupon_id: uuid.UUID,
    payload: CouponStatusUpdate,
    session: Session = Depends(get_session),
    auth: AuthState = Depends(require_staff),
):
    return coupon_service.set_status(session, coupon_id, payload.is_active)
