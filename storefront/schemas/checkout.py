# storefront/schemas/checkout.py
from typing import Any

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

TRUTHY = {"true", "1", "yes", "on"}


class CheckoutRequest(SQLModel):
    """
    Payload for POST /checkout.

    Every field is optional at the schema level; the checkout service
    answers "Checkout details are incomplete." itself. `items` is kept raw
    and parsed line by line (invalid lines are skipped).
    """

    model_config = ConfigDict(extra="ignore")

    customer_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    coupon_code: str = ""
    create_account: bool = False
    password: str = ""
    items: list[Any] = Field(default_factory=list)

    @field_validator("customer_name", "email", "phone", "address", "city", "coupon_code", mode="before")
    @classmethod
    def as_text(cls, v: Any) -> str:
        return v.strip() if isinstance(v, str) else ""

    @field_validator("password", mode="before")
    @classmethod
    def as_password(cls, v: Any) -> str:
        return v.strip() if isinstance(v, str) else ""

    @field_validator("create_account", mode="before")
    @classmethod
    def as_flag(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.strip().lower() in TRUTHY
        return False

    @field_validator("items", mode="before")
    @classmethod
    def as_list(cls, v: Any) -> list[Any]:
        return v if isinstance(v, list) else []


class CheckoutResponse(SQLModel):
    success: bool = True
    order_count: int
    subtotal: float
    discount: float
    total: float
    coupon_code: str | None = None
