# storefront/routers/reviews.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_staff
from storefront.core.dependencies import get_render_cache
from storefront.core.render_cache import RenderCacheInvalidator
from storefront.database import get_session
from storefront.schemas.review import (
    ReviewCreate,
    ReviewCreated,
    ReviewRead,
    ReviewStatus,
    ReviewStatusUpdate,
)
from storefront.services.review_service import ReviewService

router = APIRouter(tags=["Reviews"])
service = ReviewService()


@router.post("/reviews", response_model=ReviewCreated)
def add_review(
    payload: ReviewCreate,
    session: Session = Depends(get_session),
    render_cache: RenderCacheInvalidator = Depends(get_render_cache),
):
    """
    Publish a customer review.

    - 400 when product id, author or comment is blank, or the rating is unusable
    - 404 when the product does not exist
    """
    review = service.add_review(session, payload, render_cache)
    return {"success": True, "review": review}


# -------- Admin endpoints --------


@router.get(
    "/admin/reviews",
    response_model=list[ReviewRead],
    dependencies=[Depends(require_staff)],
)
def list_reviews(
    status: ReviewStatus | None = None,
    session: Session = Depends(get_session),
):
    return service.list_all(session, status)


@router.patch(
    "/admin/reviews/{review_id}/status",
    response_model=ReviewRead,
    dependencies=[Depends(require_staff)],
)
def update_review_status(
    review_id: uuid.UUID,
    payload: ReviewStatusUpdate,
    session: Session = Depends(get_session),
):
    return service.set_status(session, review_id, payload.status)
