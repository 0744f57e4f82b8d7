# storefront/services/pricing.py
"""
Effective product pricing.

Pure functions: the current time is always an argument so that sale windows
can be tested without touching the clock. Routers pass `utcnow()`.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Protocol

from storefront.core.money import money, to_decimal
from storefront.schemas.product import ProductPricing


class PricedProduct(Protocol):
    price: float
    sale_price: float | None
    sale_schedule_start_at: datetime | None
    sale_schedule_end_at: datetime | None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """
    Treat naive datetimes as UTC (SQLite hands them back without tzinfo).
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def normalize_sale_price(price: float, sale_price: float | None) -> float | None:
    """A sale price only counts when it is positive and below the regular price."""
    if sale_price is None:
        return None
    safe_sale = money(sale_price)
    if safe_sale <= 0 or safe_sale >= money(price):
        return None
    return safe_sale


def is_sale_window_active(
    start_at: datetime | None,
    end_at: datetime | None,
    now: datetime,
) -> bool:
    """
    True when `now` lies inside [start_at, end_at]. Either bound may be open.
    A window whose end is not after its start never matches.
    """
    start = as_utc(start_at)
    end = as_utc(end_at)
    moment = as_utc(now)

    if start is not None and end is not None and end <= start:
        return False
    if start is not None and moment < start:
        return False
    if end is not None and moment > end:
        return False
    return True


def get_effective_pricing(product: PricedProduct, now: datetime) -> ProductPricing:
    regular = money(product.price)
    sale_price = normalize_sale_price(product.price, product.sale_price)

    if sale_price is not None and not is_sale_window_active(
        product.sale_schedule_start_at,
        product.sale_schedule_end_at,
        now,
    ):
        sale_price = None

    discount_percent = 0
    if sale_price is not None and regular > 0:
        percent = to_decimal(regular - sale_price) / to_decimal(regular) * 100
        discount_percent = int(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    return ProductPricing(
        current=sale_price if sale_price is not None else regular,
        regular=regular,
        sale_price=sale_price,
        on_sale=sale_price is not None,
        discount_percent=discount_percent,
    )
