# storefront/services/coupon_service.py
import logging
import uuid
from dataclasses import dataclass

from sqlmodel import Session

from storefront.core.exceptions import BadRequestException, CouponError, NotFoundException
from storefront.core.money import money
from storefront.models.coupon import Coupon
from storefront.repositories.coupon_repo import CouponRepository
from storefront.schemas.coupon import CouponCreate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CouponApplication:
    """
    Result of applying a code to a subtotal.

    coupon is None when no code was given (discount 0). discount is the raw
    amount; round it with storefront.core.money.money before showing it.
    """

    coupon: Coupon | None
    discount: float


NO_COUPON = CouponApplication(coupon=None, discount=0.0)


class CouponService:
    """
    Coupon lookup, validation and discount computation.
    """

    def __init__(self, coupon_repo: CouponRepository | None = None):
        self.coupon_repo = coupon_repo or CouponRepository()

    def apply_coupon(self, session: Session, code: str | None, subtotal: float) -> CouponApplication:
        """
        Rules:
          - blank code: no coupon, discount 0
          - unknown or inactive code: CouponError
          - subtotal <= 0: CouponError
          - subtotal below the coupon minimum: CouponError
          - percent: subtotal * value / 100; fixed: min(value, subtotal)
        """
        normalized = (code or "").strip().upper()
        if not normalized:
            return NO_COUPON

        coupon = self.coupon_repo.get_by_code(session, normalized)
        if coupon is None or not coupon.is_active:
            raise CouponError("Coupon does not exist or is not active.")

        if subtotal <= 0:
            raise CouponError("Subtotal must be greater than 0.")

        if subtotal < coupon.min_subtotal:
            raise CouponError(
                f"Coupon requires a minimum subtotal of {money(coupon.min_subtotal):.2f}."
            )

        if coupon.type == "percent":
            discount = subtotal * coupon.value / 100
        else:
            discount = min(coupon.value, subtotal)

        return CouponApplication(coupon=coupon, discount=discount)

    # ---- back office ----

    def list_coupons(self, session: Session) -> list[Coupon]:
        return self.coupon_repo.list(session)

    def create_coupon(self, session: Session, data: CouponCreate) -> Coupon:
        if self.coupon_repo.get_by_code(session, data.code):
            raise BadRequestException("Coupon code already exists.")

        coupon = Coupon(**data.model_dump())
        coupon = self.coupon_repo.create(session, coupon)
        logger.info("Created coupon %s (%s %s)", coupon.code, coupon.type, coupon.value)
        return coupon

    def set_status(self, session: Session, coupon_id: uuid.UUID, is_active: bool) -> Coupon:
        coupon = self.coupon_repo.get_by_id(session, coupon_id)
        if not coupon:
            raise NotFoundException("Coupon not found")

        coupon.is_active = is_active
        return self.coupon_repo.update(session, coupon)
