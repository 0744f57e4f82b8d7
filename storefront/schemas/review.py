# storefront/schemas/review.py
import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel

ReviewStatus = Literal["Approved", "Pending", "Hidden"]


class ReviewCreate(SQLModel):
    """
    Payload for POST /reviews.

    Loose on purpose: the service answers its own 400 for blank fields and
    an unusable rating.
    """

    model_config = ConfigDict(extra="ignore")

    product_id: str = ""
    author: str = ""
    rating: Any = None
    comment: str = ""

    @field_validator("product_id", "author", "comment")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class ReviewRead(SQLModel):
    id: uuid.UUID
    product_id: uuid.UUID
    author: str
    rating: int
    comment: str
    status: ReviewStatus
    created_at: datetime


class ReviewCreated(SQLModel):
    success: bool = True
    review: ReviewRead


class ReviewStatusUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    status: ReviewStatus
