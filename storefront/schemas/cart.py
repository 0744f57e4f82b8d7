# storefront/schemas/cart.py
from datetime import datetime
from typing import Any

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class CartItem(SQLModel):
    """
    One line of a server-side cart.

    Identity is the product id: a session never holds two lines with the
    same `id`.
    """

    id: str
    name: str
    price: float = Field(gt=0)
    quantity: int = Field(default=1, ge=1)
    image: str | None = None


class CartSession(SQLModel):
    """
    Cart contents for one session key (guest id or "user_<slug>").
    """

    items: list[CartItem] = Field(default_factory=list)
    updated_at: datetime


class CartItemCreate(SQLModel):
    """
    Payload for POST /cart.

    Fields are optional at the schema level so that an incomplete body gets
    the storefront's own 400 message instead of a field-by-field report.
    price and quantity stay raw: an unusable quantity becomes 1.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str | None = None
    price: Any = None
    image: str | None = None
    quantity: Any = None

    @field_validator("id", "name", "image")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip()


class CartItemQuantityUpdate(SQLModel):
    """
    Payload for PATCH /cart.

    quantity is coerced to an integer >= 1 (anything invalid => 1).
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    quantity: Any = None

    @field_validator("id")
    @classmethod
    def strip_id(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip()


class CartItemsResponse(SQLModel):
    """
    Every cart endpoint answers with the full, current item list.
    """

    items: list[CartItem]
