# storefront/schemas/coupon.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field

CouponType = Literal["percent", "fixed"]


class CouponRead(SQLModel):
    id: uuid.UUID
    code: str
    description: str
    type: CouponType
    value: float
    min_subtotal: float
    is_active: bool
    created_at: datetime


class CouponApplyRequest(SQLModel):
    """
    Payload for POST /coupons/apply.
    """

    model_config = ConfigDict(extra="ignore")

    code: str = ""
    subtotal: float = 0

    @field_validator("code")
    @classmethod
    def strip_code(cls, v: str) -> str:
        return v.strip()


class CouponApplyResponse(SQLModel):
    coupon: CouponRead
    discount: float


class CouponCreate(SQLModel):
    """
    Payload for creating a coupon (staff only).

    - code is upper-cased.
    - percent coupons are capped at 100.
    """

    model_config = ConfigDict(extra="forbid")

    code: str = Field(max_length=64)
    description: str = ""
    type: CouponType = "percent"
    value: float = Field(gt=0)
    min_subtotal: float = Field(default=0, ge=0)
    is_active: bool = True

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("code cannot be empty")
        return v

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        return v.strip()

    @model_validator(mode="after")
    def cap_percent(self) -> "CouponCreate":
        if self.type == "percent" and self.value > 100:
            self.value = 100
        return self


class CouponStatusUpdate(SQLModel):
    is_active: bool
