# storefront/services/product_service.py
import logging
import re
import uuid
from datetime import datetime

from sqlmodel import Session

from storefront.core.exceptions import NotFoundException
from storefront.models.product import Product
from storefront.repositories.preview_draft_store import PreviewDraftStore
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.product import (
    PreviewDraftCreated,
    PreviewDraftRead,
    ProductCreate,
    ProductDetailRead,
    ProductListItem,
    ProductPreviewDraft,
    ProductRead,
    ReviewSummary,
)
from storefront.services.pricing import (
    as_utc,
    get_effective_pricing,
    normalize_sale_price,
)

logger = logging.getLogger(__name__)

TOP_DEFAULT_LIMIT = 3
SEARCH_DEFAULT_LIMIT = 6
WIDGET_MAX_LIMIT = 12


def clamp_widget_limit(limit: int | None, default: int) -> int:
    if limit is None:
        return default
    return max(1, min(WIDGET_MAX_LIMIT, int(limit)))


class ProductService:
    """
    Business logic for the catalog.

    Responsibilities:
      - slug generation & uniqueness
      - sale price / schedule normalization on create
      - derived pricing + review summary on reads
      - preview drafts for unsaved edits
    """

    def __init__(
        self,
        repo: ProductRepository | None = None,
        review_repo: ReviewRepository | None = None,
    ):
        self.repo = repo or ProductRepository()
        self.review_repo = review_repo or ReviewRepository()

    # ----- Helpers -----

    @staticmethod
    def _slugify(raw: str) -> str:
        """
        Basic slugification:
          - lowercase
          - non-alphanumeric -> '-'
          - collapse multiple '-'
          - strip leading/trailing '-'
        """
        value = raw.strip().lower()
        value = re.sub(r"[^a-z0-9]+", "-", value)
        value = re.sub(r"-+", "-", value)
        value = value.strip("-")
        return value or "product"

    def _ensure_unique_slug(self, session: Session, base_slug: str) -> str:
        """
        Ensure slug is unique by appending -2, -3, ... if needed.
        """
        slug = base_slug
        i = 2
        while self.repo.get_by_slug(session, slug) is not None:
            slug = f"{base_slug}-{i}"
            i += 1
        return slug

    def make_slug(self, session: Session, raw: str) -> str:
        return self._ensure_unique_slug(session, self._slugify(raw))

    @staticmethod
    def to_read(product: Product, now: datetime) -> ProductRead:
        return ProductRead.model_validate(
            product,
            update={"pricing": get_effective_pricing(product, now)},
        )

    @staticmethod
    def to_list_item(product: Product, now: datetime) -> ProductListItem:
        pricing = get_effective_pricing(product, now)
        return ProductListItem(
            id=product.id,
            slug=product.slug,
            name=product.name,
            image=product.image,
            category=product.category,
            price=pricing.current,
            sale_price=pricing.sale_price,
        )

    # ----- Reads -----

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product or product.trashed_at is not None:
            raise NotFoundException("Product not found")
        return product

    def list_products(
        self,
        session: Session,
        now: datetime,
        skip: int = 0,
        limit: int = 50,
    ) -> list[ProductRead]:
        products = self.repo.list_products(session, skip=skip, limit=limit)
        return [self.to_read(product, now) for product in products]

    def top_products(
        self,
        session: Session,
        now: datetime,
        limit: int | None = None,
    ) -> list[ProductListItem]:
        """Newest published products for the home page widget."""
        size = clamp_widget_limit(limit, TOP_DEFAULT_LIMIT)
        products = self.repo.list_products(session, skip=0, limit=size)
        return [self.to_list_item(product, now) for product in products]

    def search(
        self,
        session: Session,
        now: datetime,
        query: str | None,
        limit: int | None = None,
    ) -> list[ProductListItem]:
        """
        Case-insensitive substring match on name, slug, category and tags.
        A blank query returns nothing.
        """
        needle = (query or "").strip().lower()
        if not needle:
            return []

        size = clamp_widget_limit(limit, SEARCH_DEFAULT_LIMIT)
        results: list[ProductListItem] = []
        for product in self.repo.list_all_published(session):
            haystack = [product.name, product.slug, product.category, *(product.tags or [])]
            if any(needle in value.lower() for value in haystack):
                results.append(self.to_list_item(product, now))
                if len(results) >= size:
                    break
        return results

    def get_detail(
        self,
        session: Session,
        product_id: uuid.UUID,
        now: datetime,
    ) -> ProductDetailRead:
        product = self.get_product(session, product_id)
        average, count = self.review_repo.summary(session, product.id)
        return ProductDetailRead.model_validate(
            product,
            update={
                "pricing": get_effective_pricing(product, now),
                "reviews": ReviewSummary(average=round(average, 1), count=count),
            },
        )

    # ----- Writes -----

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        """
        Create a new product with a unique slug.

        Sale rules:
          - sale_price kept only when 0 < sale_price < price
          - no sale price => no schedule
          - an end not after the start is dropped
        """
        slug = self.make_slug(session, payload.slug or payload.name)

        sale_price = normalize_sale_price(payload.price, payload.sale_price)
        start_at = payload.sale_schedule_start_at if sale_price is not None else None
        end_at = payload.sale_schedule_end_at if sale_price is not None else None
        if start_at is not None and end_at is not None and as_utc(end_at) <= as_utc(start_at):
            end_at = None

        product = Product(
            name=payload.name,
            slug=slug,
            category=payload.category,
            tags=payload.tags,
            description=payload.description,
            image=payload.image,
            price=payload.price,
            sale_price=sale_price,
            sale_schedule_start_at=start_at,
            sale_schedule_end_at=end_at,
            stock=payload.stock,
            publish_status=payload.publish_status,
        )
        product = self.repo.create(session, product)
        logger.info("Created product %s (%s)", product.slug, product.publish_status)
        return product

    # ----- Preview drafts -----

    def create_preview(
        self,
        store: PreviewDraftStore,
        payload: ProductPreviewDraft,
    ) -> PreviewDraftCreated:
        stored = store.create(payload)
        return PreviewDraftCreated(token=stored.token, expires_at=stored.expires_at)

    def get_preview(
        self,
        store: PreviewDraftStore,
        token: str,
        now: datetime,
    ) -> PreviewDraftRead:
        draft = store.get(token)
        if draft is None:
            raise NotFoundException("Preview draft not found or expired")
        return PreviewDraftRead(draft=draft, pricing=get_effective_pricing(draft, now))
