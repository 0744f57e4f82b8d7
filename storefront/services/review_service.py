# storefront/services/review_service.py
import logging
import math
import uuid

from sqlmodel import Session

from storefront.core.exceptions import BadRequestException, NotFoundException
from storefront.core.render_cache import RenderCacheInvalidator
from storefront.models.review import ProductReview
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.review import ReviewCreate

logger = logging.getLogger(__name__)


def parse_rating(value) -> int:
    """
    Round half-up and clamp to 1..5. Non-numeric input => 0 (rejected).
    """
    if isinstance(value, bool):
        return 0
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(parsed):
        return 0
    return max(1, min(5, math.floor(parsed + 0.5)))


def review_paths(slug: str) -> list[str]:
    return [
        f"/product/{slug}",
        f"/shop/{slug}",
        "/admin/reviews",
        "/dashboard/reviews",
    ]


class ReviewService:
    """
    Storefront reviews: submitted reviews are published immediately
    (status Approved) and can be hidden from the back office.
    """

    def __init__(
        self,
        repo: ReviewRepository | None = None,
        product_repo: ProductRepository | None = None,
    ):
        self.repo = repo or ReviewRepository()
        self.product_repo = product_repo or ProductRepository()

    def add_review(
        self,
        session: Session,
        payload: ReviewCreate,
        render_cache: RenderCacheInvalidator,
    ) -> ProductReview:
        """
        Raises:
            BadRequestException(400): blank product id/author/comment, bad rating
            NotFoundException(404): unknown product
        """
        rating = parse_rating(payload.rating)
        if not payload.product_id or not payload.author or not payload.comment or rating < 1:
            raise BadRequestException("Review details are incomplete.")

        try:
            product_id = uuid.UUID(payload.product_id)
        except ValueError:
            raise NotFoundException("Product not found") from None

        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundException("Product not found")

        review = ProductReview(
            product_id=product.id,
            author=payload.author,
            rating=rating,
            comment=payload.comment,
            status="Approved",
        )
        review = self.repo.create(session, review)
        logger.info("Review %s added to %s (%s stars)", review.id, product.slug, rating)

        render_cache.revalidate(review_paths(product.slug))
        return review

    def list_for_product(self, session: Session, product_id: uuid.UUID) -> list[ProductReview]:
        return self.repo.list(session, product_id=product_id, status="Approved")

    def list_all(self, session: Session, status: str | None = None) -> list[ProductReview]:
        """Back office list; status=None returns every status."""
        return self.repo.list(session, status=status)

    def set_status(self, session: Session, review_id: uuid.UUID, status: str) -> ProductReview:
        review = self.repo.get_by_id(session, review_id)
        if not review:
            raise NotFoundException("Review not found")
        review.status = status
        return self.repo.update(session, review)
