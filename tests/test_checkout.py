import pytest
from sqlmodel import select

from storefront.models.notification import AdminNotification
from storefront.models.order import Order, Sale
from storefront.models.product import Product
from storefront.models.user import User
from storefront.services.checkout_service import parse_lines
from storefront.services.user_service import UserService

from conftest import login_as

CUSTOMER = {
    "customer_name": "Jane Doe",
    "email": "jane@example.com",
    "phone": "+33 6 00 00 00 00",
    "address": "1 Rue de la Paix",
    "city": "Paris",
}


def checkout_payload(items, **overrides):
    payload = dict(CUSTOMER, items=items)
    payload.update(overrides)
    return payload


def orders(session):
    return list(session.exec(select(Order)).all())


def test_parse_lines_keeps_valid_lines_in_order():
    lines = parse_lines(
        [
            {"id": "a", "name": "A", "price": 10, "quantity": 2.9},
            {"id": "", "name": "B", "price": 10},
            {"id": "c", "name": "C", "price": 0},
            "garbage",
            {"id": "d", "name": "D", "price": "4.5", "quantity": "abc"},
        ]
    )

    assert [(line.id, line.quantity) for line in lines] == [("a", 2), ("d", 1)]
    assert lines[1].price == 4.5


def test_checkout_with_coupon_and_unknown_product(client, session, stores, make_product, make_coupon):
    tee = make_product()
    make_coupon(code="SAVE10", type="percent", value=10)

    res = client.post(
        "/api/checkout",
        json=checkout_payload(
            [
                {"id": str(tee.id), "name": "Classic Tee", "price": 30, "quantity": 2},
                {"id": "mug-1", "name": "Mystery Mug", "price": 20, "quantity": 1},
            ],
            coupon_code="save10",
        ),
    )

    assert res.status_code == 200
    assert res.json() == {
        "success": True,
        "order_count": 2,
        "subtotal": 80.0,
        "discount": 8.0,
        "total": 72.0,
        "coupon_code": "SAVE10",
    }

    rows = sorted(orders(session), key=lambda o: o.total, reverse=True)
    assert [(o.quantity, o.discount, o.total) for o in rows] == [(2, 6.0, 54.0), (1, 2.0, 18.0)]
    assert all(o.status == "Paid" and o.coupon_code == "SAVE10" for o in rows)
    assert all(o.customer == "Jane Doe" and o.user_id is None for o in rows)
    assert rows[0].items == [
        {"id": str(tee.id), "name": "Classic Tee", "price": 30.0, "quantity": 2}
    ]

    sales = list(session.exec(select(Sale)).all())
    assert [s.amount for s in sales] == [72.0]

    session.refresh(tee)
    assert tee.stock == 8

    stub = session.exec(select(Product).where(Product.name == "Mystery Mug")).one()
    assert stub.slug == "mystery-mug"
    assert stub.category == "Uncategorized"
    assert stub.publish_status == "Published"
    assert stub.stock == 998
    assert rows[1].product_id == stub.id

    notifications = session.exec(select(AdminNotification)).all()
    assert len(notifications) == 2
    assert all(n.type == "Order" for n in notifications)

    assert "/dashboard/orders" in stores.render_cache.recent_paths


def test_lines_match_existing_products_by_name(client, session, make_product):
    tee = make_product(name="Classic Tee")

    res = client.post(
        "/api/checkout",
        json=checkout_payload([{"id": "cart-line-1", "name": "classic TEE", "price": 30}]),
    )

    assert res.status_code == 200
    assert [o.product_id for o in orders(session)] == [tee.id]
    assert len(session.exec(select(Product)).all()) == 1


def test_stock_never_goes_negative(client, session, make_product):
    tee = make_product(stock=1)

    res = client.post(
        "/api/checkout",
        json=checkout_payload([{"id": str(tee.id), "name": "Classic Tee", "price": 30, "quantity": 3}]),
    )

    assert res.status_code == 200
    session.refresh(tee)
    assert tee.stock == 0


def test_coupon_below_minimum_writes_nothing(client, session, make_coupon):
    make_coupon(code="BIG", min_subtotal=100)

    res = client.post(
        "/api/checkout",
        json=checkout_payload([{"id": "x", "name": "Thing", "price": 20}], coupon_code="BIG"),
    )

    assert res.status_code == 400
    assert res.json() == {"error": "Coupon requires a minimum subtotal of 100.00."}
    assert orders(session) == []
    assert session.exec(select(Sale)).all() == []


@pytest.mark.parametrize(
    "payload",
    [
        checkout_payload([{"id": "x", "name": "Thing", "price": 20}], city=""),
        checkout_payload([{"id": "x", "name": "Thing", "price": 20}], email="   "),
        checkout_payload([]),
        checkout_payload([{"id": "x", "name": "Thing", "price": 0}]),
        checkout_payload("not a list"),
    ],
)
def test_incomplete_checkout_is_rejected(client, session, payload):
    res = client.post("/api/checkout", json=payload)

    assert res.status_code == 400
    assert res.json() == {"error": "Checkout details are incomplete."}
    assert orders(session) == []


def test_account_password_too_short(client, session):
    res = client.post(
        "/api/checkout",
        json=checkout_payload(
            [{"id": "x", "name": "Thing", "price": 20}],
            create_account="on",
            password="123",
        ),
    )

    assert res.status_code == 400
    assert res.json() == {
        "error": "Password must be at least 6 characters to create an account."
    }
    assert session.exec(select(User)).all() == []


def test_checkout_creates_account(client, session):
    res = client.post(
        "/api/checkout",
        json=checkout_payload(
            [{"id": "x", "name": "Thing", "price": 20}],
            customer_name="Jane Ada Doe",
            create_account=True,
            password="secret1",
        ),
    )

    assert res.status_code == 200
    user = session.exec(select(User)).one()
    assert user.role == "Customer"
    assert user.source == "Checkout"
    assert (user.name, user.surname) == ("Jane", "Ada Doe")
    assert user.username == "janeadadoe"
    assert user.city == "Paris"
    assert [o.user_id for o in orders(session)] == [user.id]


def test_checkout_account_with_taken_email(client, session):
    UserService().create_account(
        session, name="Jane", email="jane@example.com", password="secret1", source="Checkout"
    )

    res = client.post(
        "/api/checkout",
        json=checkout_payload(
            [{"id": "x", "name": "Thing", "price": 20}],
            create_account="yes",
            password="secret1",
        ),
    )

    assert res.status_code == 400
    assert "already be registered" in res.json()["error"]
    assert orders(session) == []


def test_signed_in_customer_details_come_from_the_account(client, session):
    user = UserService().create_account(
        session,
        name="Ada",
        surname="Lovelace",
        email="ada@example.com",
        password="secret1",
        source="Checkout",
        phone="0102030405",
        city="London",
        address="12 St James's Square",
    )
    login_as(client, user.username, "Customer")

    res = client.post(
        "/api/checkout",
        json={
            "customer_name": "Someone Else",
            "items": [{"id": "x", "name": "Thing", "price": 20}],
            "create_account": True,
        },
    )

    assert res.status_code == 200
    rows = orders(session)
    assert [(o.customer, o.user_id) for o in rows] == [("Ada Lovelace", user.id)]
    assert len(session.exec(select(User)).all()) == 1

    mine = client.get("/api/orders/me")
    assert mine.status_code == 200
    assert [o["id"] for o in mine.json()] == [str(rows[0].id)]
