# storefront/repositories/review_repo.py
import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from storefront.models.review import ProductReview


class ReviewRepository:
    """
    Data access layer for ProductReview.
    """

    def get_by_id(self, session: Session, review_id: uuid.UUID) -> ProductReview | None:
        return session.get(ProductReview, review_id)

    def list(
        self,
        session: Session,
        product_id: uuid.UUID | None = None,
        status: str | None = "Approved",
    ) -> list[ProductReview]:
        stmt = select(ProductReview)
        if product_id is not None:
            stmt = stmt.where(ProductReview.product_id == product_id)
        if status is not None:
            stmt = stmt.where(ProductReview.status == status)
        stmt = stmt.order_by(ProductReview.created_at.desc())
        return list(session.exec(stmt).all())

    def summary(self, session: Session, product_id: uuid.UUID) -> tuple[float, int]:
        """(average rating, count) over approved reviews."""
        stmt = select(
            func.coalesce(func.avg(ProductReview.rating), 0.0),
            func.count(ProductReview.id),
        ).where(
            ProductReview.product_id == product_id,
            ProductReview.status == "Approved",
        )
        average, count = session.exec(stmt).one()
        return float(average or 0.0), int(count or 0)

    def create(self, session: Session, review: ProductReview) -> ProductReview:
        session.add(review)
        session.commit()
        session.refresh(review)
        return review

    def update(self, session: Session, review: ProductReview) -> ProductReview:
        session.add(review)
        session.commit()
        session.refresh(review)
        return review
