# storefront/repositories/coupon_repo.py
import uuid

from sqlmodel import Session, select

from storefront.models.coupon import Coupon


class CouponRepository:
    """
    Data access layer for Coupon.
    """

    def get_by_id(self, session: Session, coupon_id: uuid.UUID) -> Coupon | None:
        return session.get(Coupon, coupon_id)

    def get_by_code(self, session: Session, code: str) -> Coupon | None:
        """Lookup by already-normalized (upper-case) code, active or not."""
        stmt = select(Coupon).where(Coupon.code == code)
        return session.exec(stmt).first()

    def list(self, session: Session) -> list[Coupon]:
        stmt = select(Coupon).order_by(Coupon.created_at.desc())
        return list(session.exec(stmt).all())

    def create(self, session: Session, coupon: Coupon) -> Coupon:
        session.add(coupon)
        session.commit()
        session.refresh(coupon)
        return coupon

    def update(self, session: Session, coupon: Coupon) -> Coupon:
        session.add(coupon)
        session.commit()
        session.refresh(coupon)
        return coupon
