import pytest

from storefront.core.exceptions import CouponError
from storefront.services.coupon_service import NO_COUPON, CouponService

from conftest import login_as

service = CouponService()


def test_percent_coupon(session, make_coupon):
    make_coupon(code="SAVE10", type="percent", value=10)

    result = service.apply_coupon(session, "SAVE10", 80)

    assert result.coupon.code == "SAVE10"
    assert result.discount == pytest.approx(8.0)


def test_code_lookup_ignores_case_and_spaces(session, make_coupon):
    make_coupon(code="SAVE10")
    assert service.apply_coupon(session, "  save10 ", 50).coupon.code == "SAVE10"


def test_fixed_coupon_never_exceeds_subtotal(session, make_coupon):
    make_coupon(code="FIVE", type="fixed", value=5)

    assert service.apply_coupon(session, "FIVE", 3).discount == 3
    assert service.apply_coupon(session, "FIVE", 40).discount == 5


def test_blank_code_means_no_coupon(session):
    assert service.apply_coupon(session, "", 80) is NO_COUPON
    assert service.apply_coupon(session, None, 80) is NO_COUPON


def test_unknown_or_inactive_coupon(session, make_coupon):
    make_coupon(code="OLD", is_active=False)

    for code in ("NOPE", "OLD"):
        with pytest.raises(CouponError) as exc:
            service.apply_coupon(session, code, 80)
        assert exc.value.detail == "Coupon does not exist or is not active."


def test_subtotal_must_be_positive(session, make_coupon):
    make_coupon(code="SAVE10")

    with pytest.raises(CouponError) as exc:
        service.apply_coupon(session, "SAVE10", 0)
    assert exc.value.detail == "Subtotal must be greater than 0."


def test_minimum_subtotal(session, make_coupon):
    make_coupon(code="BIG", min_subtotal=100)

    with pytest.raises(CouponError) as exc:
        service.apply_coupon(session, "BIG", 99.99)
    assert exc.value.detail == "Coupon requires a minimum subtotal of 100.00."

    assert service.apply_coupon(session, "BIG", 100).discount == pytest.approx(10.0)


# ---- HTTP ----


def test_apply_endpoint(client, make_coupon):
    make_coupon(code="SAVE10")

    res = client.post("/api/coupons/apply", json={"code": "save10", "subtotal": 80})

    assert res.status_code == 200
    body = res.json()
    assert body["discount"] == 8.0
    assert body["coupon"]["code"] == "SAVE10"


def test_apply_endpoint_requires_a_code(client):
    res = client.post("/api/coupons/apply", json={"code": "  ", "subtotal": 80})

    assert res.status_code == 400
    assert res.json() == {"error": "Coupon code is required."}


def test_apply_endpoint_reports_coupon_errors(client):
    res = client.post("/api/coupons/apply", json={"code": "NOPE", "subtotal": 80})

    assert res.status_code == 400
    assert res.json()["error"] == "Coupon does not exist or is not active."


def test_admin_coupon_management(client):
    login_as(client, "manager", "Manager")

    res = client.post(
        "/api/admin/coupons",
        json={"code": "spring", "type": "fixed", "value": 5, "min_subtotal": 20},
    )
    assert res.status_code == 201
    coupon = res.json()
    assert coupon["code"] == "SPRING"

    duplicate = client.post(
        "/api/admin/coupons",
        json={"code": "Spring", "type": "percent", "value": 5},
    )
    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "Coupon code already exists."

    res = client.patch(f"/api/admin/coupons/{coupon['id']}/status", json={"is_active": False})
    assert res.status_code == 200
    assert res.json()["is_active"] is False

    listed = client.get("/api/admin/coupons").json()
    assert [c["code"] for c in listed] == ["SPRING"]


def test_admin_coupons_closed_to_customers(client):
    assert client.get("/api/admin/coupons").status_code == 401

    login_as(client, "jane", "Customer")
    assert client.get("/api/admin/coupons").status_code == 403
