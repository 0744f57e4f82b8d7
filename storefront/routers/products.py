# storefront/routers/products.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_staff
from storefront.core.dependencies import get_preview_store
from storefront.database import get_session
from storefront.repositories.preview_draft_store import PreviewDraftStore
from storefront.schemas.product import (
    PreviewDraftCreated,
    PreviewDraftRead,
    ProductCreate,
    ProductDetailRead,
    ProductPreviewDraft,
    ProductRead,
    ProductSearchResponse,
    TopProductsResponse,
)
from storefront.schemas.review import ReviewRead
from storefront.services.pricing import utcnow
from storefront.services.product_service import ProductService
from storefront.services.review_service import ReviewService

router = APIRouter(prefix="/products", tags=["Products"])
admin_router = APIRouter(
    prefix="/admin/products",
    tags=["Products"],
    dependencies=[Depends(require_staff)],
)

service = ProductService()
review_service = ReviewService()


# -------- Public endpoints --------


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    """
    Published, non-trashed products with their current pricing.
    """
    return service.list_products(session, utcnow(), skip=skip, limit=limit)


@router.get("/top", response_model=TopProductsResponse)
def top_products(
    session: Session = Depends(get_session),
    limit: int | None = None,
):
    """
    Home page widget. `limit` is clamped to 1..12 (default 3).
    """
    return {"products": service.top_products(session, utcnow(), limit)}


@router.get("/search", response_model=ProductSearchResponse)
def search_products(
    session: Session = Depends(get_session),
    q: str = "",
    limit: int | None = None,
):
    """
    Header search. Matches name, slug, category and tags; `limit` is
    clamped to 1..12 (default 6). An empty query returns no results.
    """
    return {"results": service.search(session, utcnow(), q, limit)}


@router.get("/preview/{token}", response_model=PreviewDraftRead)
def get_preview(
    token: str,
    store: PreviewDraftStore = Depends(get_preview_store),
):
    """
    Render data for an unsaved product edit. 404 once the draft expired.
    """
    return service.get_preview(store, token, utcnow())


@router.get("/{product_id}", response_model=ProductDetailRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Product page: product, current pricing and approved review summary.
    """
    return service.get_detail(session, product_id, utcnow())


@router.get("/{product_id}/reviews", response_model=list[ReviewRead])
def list_product_reviews(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    service.get_product(session, product_id)
    return review_service.list_for_product(session, product_id)


# -------- Admin endpoints --------


@admin_router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new product (staff only).
    """
    product = service.create_product(session, payload)
    return service.to_read(product, utcnow())


@admin_router.post(
    "/preview",
    response_model=PreviewDraftCreated,
    status_code=status.HTTP_201_CREATED,
)
def create_preview(
    payload: ProductPreviewDraft,
    store: PreviewDraftStore = Depends(get_preview_store),
):
    """
    Stash an unsaved edit for the preview page. The token lives 20 minutes.
    """
    return service.create_preview(store, payload)
