# storefront/schemas/product.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

PublishStatus = Literal["Published", "Draft"]
ProductVisibility = Literal["Public", "LoggedUsers", "Password"]


class ProductPricing(SQLModel):
    """
    Price the storefront shows right now.

      - current: what the customer pays (sale price when on sale)
      - regular: the product's list price
      - sale_price: the active sale price, None when not on sale
      - discount_percent: rounded percentage off, 0 when not on sale
    """

    current: float
    regular: float
    sale_price: float | None = None
    on_sale: bool = False
    discount_percent: int = 0


class ProductCreate(SQLModel):
    """
    Payload for creating a product (staff only).

    - slug is optional: if omitted, generated from `name`.
    - sale_price is dropped unless 0 < sale_price < price.
    - schedule is dropped without a sale; an end not after the start is
      dropped.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    slug: str | None = None
    category: str = Field(default="Uncategorized", max_length=100)
    tags: list[str] = Field(default_factory=list)
    description: str | None = None
    image: str | None = None
    price: float = Field(gt=0)
    sale_price: float | None = None
    sale_schedule_start_at: datetime | None = None
    sale_schedule_end_at: datetime | None = None
    stock: int = Field(default=0, ge=0)
    publish_status: PublishStatus = "Draft"

    @field_validator("name", "category")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str]) -> list[str]:
        seen: list[str] = []
        for tag in v:
            tag = tag.strip()
            if tag and tag not in seen:
                seen.append(tag)
        return seen


class ProductRead(SQLModel):
    """
    Product representation for clients, including derived pricing.
    """

    id: uuid.UUID
    slug: str
    name: str
    category: str
    tags: list[str]
    description: str | None
    image: str | None
    price: float
    sale_price: float | None
    sale_schedule_start_at: datetime | None
    sale_schedule_end_at: datetime | None
    stock: int
    publish_status: PublishStatus
    created_at: datetime
    pricing: ProductPricing


class ReviewSummary(SQLModel):
    average: float
    count: int


class ProductDetailRead(ProductRead):
    """
    Single product page: product + approved review summary.
    """

    reviews: ReviewSummary


class ProductListItem(SQLModel):
    """
    Compact row for top-products and search widgets.
    """

    id: uuid.UUID
    slug: str
    name: str
    image: str | None
    category: str
    price: float
    sale_price: float | None = None


class TopProductsResponse(SQLModel):
    products: list[ProductListItem]


class ProductSearchResponse(SQLModel):
    results: list[ProductListItem]


# ---- Preview drafts ----


class ProductPreviewDraft(SQLModel):
    """
    Snapshot of an unsaved product edit, rendered by the preview page.
    """

    model_config = ConfigDict(extra="ignore")

    product_id: str
    slug: str
    name: str
    category: str
    categories: list[str] = Field(default_factory=list)
    visibility: ProductVisibility = "Public"
    visibility_password: str = ""
    description: str = ""
    image: str = ""
    gallery: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    price: float
    sale_price: float | None = None
    sale_schedule_start_at: datetime | None = None
    sale_schedule_end_at: datetime | None = None
    stock: int = 0

    @field_validator("product_id", "slug", "name", "category")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class StoredPreviewDraft(SQLModel):
    token: str
    expires_at: datetime
    payload: ProductPreviewDraft


class PreviewDraftCreated(SQLModel):
    token: str
    expires_at: datetime


class PreviewDraftRead(SQLModel):
    draft: ProductPreviewDraft
    pricing: ProductPricing
