from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from storefront.services.pricing import (
    get_effective_pricing,
    is_sale_window_active,
    normalize_sale_price,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def product(price=100.0, sale_price=None, start=None, end=None):
    return SimpleNamespace(
        price=price,
        sale_price=sale_price,
        sale_schedule_start_at=start,
        sale_schedule_end_at=end,
    )


def test_sale_inside_window():
    pricing = get_effective_pricing(
        product(sale_price=80, start=NOW - timedelta(days=1), end=NOW + timedelta(days=1)),
        NOW,
    )

    assert pricing.on_sale is True
    assert pricing.current == 80
    assert pricing.regular == 100
    assert pricing.sale_price == 80
    assert pricing.discount_percent == 20


def test_future_window_is_regular_price():
    pricing = get_effective_pricing(
        product(sale_price=80, start=NOW + timedelta(days=1)),
        NOW,
    )

    assert pricing.on_sale is False
    assert pricing.current == 100
    assert pricing.sale_price is None
    assert pricing.discount_percent == 0


def test_open_ended_window():
    assert get_effective_pricing(product(sale_price=80), NOW).on_sale is True
    assert get_effective_pricing(
        product(sale_price=80, end=NOW - timedelta(seconds=1)), NOW
    ).on_sale is False


def test_window_ending_before_it_starts_never_matches():
    assert not is_sale_window_active(NOW - timedelta(days=1), NOW - timedelta(days=2), NOW)
    assert not is_sale_window_active(NOW, NOW, NOW)


def test_naive_datetimes_are_treated_as_utc():
    start = datetime(2025, 6, 1, 11, 0)
    end = datetime(2025, 6, 1, 13, 0)
    assert is_sale_window_active(start, end, NOW)


def test_sale_price_must_be_below_regular_price():
    assert normalize_sale_price(100, 100) is None
    assert normalize_sale_price(100, 120) is None
    assert normalize_sale_price(100, 0) is None
    assert normalize_sale_price(100, None) is None
    assert normalize_sale_price(100, 79.999) == 80.0


def test_discount_percent_is_rounded():
    pricing = get_effective_pricing(product(price=3, sale_price=2), NOW)
    assert pricing.discount_percent == 33
