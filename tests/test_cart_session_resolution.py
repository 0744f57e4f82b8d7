import pytest

from storefront.core.auth import GUEST, AuthState
from storefront.core.file_store import InMemoryBackend
from storefront.repositories.cart_session_store import CartSessionStore
from storefront.services.cart_service import (
    derive_session_id,
    resolve_cart_session,
    slugify_username,
)

JANE = AuthState(is_logged_in=True, username="Jane.Doe", role="Customer")


@pytest.mark.parametrize(
    "username, expected",
    [
        ("Jane.Doe", "jane-doe"),
        ("  admin  ", "admin"),
        ("--Mr  X!!", "mr-x"),
        ("!!!", "account"),
    ],
)
def test_slugify_username(username, expected):
    assert slugify_username(username) == expected


def test_signed_in_uses_user_key_and_merges_guest_cart():
    resolution = derive_session_id(JANE, "cart_abc")

    assert resolution.session_id == "user_jane-doe"
    assert resolution.merge_from == "cart_abc"
    assert resolution.should_set_cookie is False


def test_signed_in_without_guest_cookie():
    resolution = derive_session_id(JANE, None)

    assert resolution.session_id == "user_jane-doe"
    assert resolution.merge_from is None


def test_logged_in_flag_without_username_is_a_guest():
    auth = AuthState(is_logged_in=True, username="", role="Customer")
    resolution = derive_session_id(auth, "cart_abc")

    assert resolution.session_id == "cart_abc"
    assert resolution.merge_from is None


def test_guest_cookie_is_reused_verbatim():
    resolution = derive_session_id(GUEST, "cart_abc")

    assert resolution.session_id == "cart_abc"
    assert resolution.should_set_cookie is False


def test_new_guest_gets_a_fresh_id():
    resolution = derive_session_id(GUEST, None, new_session_id=lambda: "cart_new")

    assert resolution.session_id == "cart_new"
    assert resolution.should_set_cookie is True


def test_resolve_merges_once():
    store = CartSessionStore(InMemoryBackend())
    store.add_item("cart_abc", {"id": "A", "name": "A", "price": 10, "quantity": 2})
    store.add_item("user_jane-doe", {"id": "A", "name": "A", "price": 10, "quantity": 1})

    resolve_cart_session(store, JANE, "cart_abc")
    resolve_cart_session(store, JANE, "cart_abc")

    items = store.list_items("user_jane-doe")
    assert [(item.id, item.quantity) for item in items] == [("A", 3)]
    assert store.list_items("cart_abc") == []
