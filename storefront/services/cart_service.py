# storefront/services/cart_service.py
import re
from dataclasses import dataclass
from typing import Callable

from storefront.core.auth import AuthState
from storefront.core.exceptions import BadRequestException
from storefront.repositories.cart_session_store import (
    CartSessionStore,
    create_cart_session_id,
    normalize_item,
    safe_string,
)
from storefront.schemas.cart import CartItem, CartItemCreate, CartItemQuantityUpdate


def slugify_username(username: str) -> str:
    """
    Lower-case, runs of non-alphanumerics -> '-', trim dashes.
    Empty result => "account".
    """
    value = username.strip().lower()
    value = re.sub(r"[^a-z0-9]+", "-", value)
    value = value.strip("-")
    return value or "account"


def user_cart_session_id(username: str) -> str:
    return f"user_{slugify_username(username)}"


@dataclass(frozen=True)
class SessionResolution:
    """
    session_id: cart key to use for this request
    should_set_cookie: a fresh guest id was minted and must be sent back
    merge_from: guest cart to fold into session_id (signed-in callers only)
    """

    session_id: str
    should_set_cookie: bool = False
    merge_from: str | None = None


def derive_session_id(
    auth: AuthState,
    guest_cookie: str | None,
    new_session_id: Callable[[], str] = create_cart_session_id,
) -> SessionResolution:
    """
    Pure identity step of cart session resolution.

      1. Signed in => "user_<slug>", merge the guest cart if it differs.
      2. Guest with a cart cookie => reuse it verbatim.
      3. Otherwise => mint a new id and ask for the cookie to be set.
    """
    guest_id = safe_string(guest_cookie)

    if auth.is_authenticated:
        session_id = user_cart_session_id(auth.username)
        merge_from = guest_id if guest_id and guest_id != session_id else None
        return SessionResolution(session_id=session_id, merge_from=merge_from)

    if guest_id:
        return SessionResolution(session_id=guest_id)

    return SessionResolution(session_id=new_session_id(), should_set_cookie=True)


def resolve_cart_session(
    store: CartSessionStore,
    auth: AuthState,
    guest_cookie: str | None,
) -> SessionResolution:
    """
    derive_session_id + apply the guest -> user merge when one is due.
    Merging an already emptied guest cart changes nothing.
    """
    resolution = derive_session_id(auth, guest_cookie)
    if resolution.merge_from:
        store.merge(resolution.merge_from, resolution.session_id)
    return resolution


class CartService:
    """
    Business logic for the cart endpoints.

    Responsibilities:
      - validate incoming payloads (400 on bad input, store untouched)
      - delegate mutations to the session store
    """

    def __init__(self, store: CartSessionStore):
        self.store = store

    def list_items(self, session_id: str) -> list[CartItem]:
        return self.store.list_items(session_id)

    def add_item(self, session_id: str, payload: CartItemCreate) -> list[CartItem]:
        data = payload.model_dump()
        if not data.get("quantity"):
            data["quantity"] = 1
        if normalize_item(data) is None:
            raise BadRequestException("Invalid cart item payload.")
        return self.store.add_item(session_id, data)

    def update_quantity(
        self,
        session_id: str,
        payload: CartItemQuantityUpdate,
    ) -> list[CartItem]:
        if not payload.id:
            raise BadRequestException("Missing cart item id.")
        return self.store.update_quantity(session_id, payload.id, payload.quantity)

    def remove_or_clear(self, session_id: str, item_id: str | None) -> list[CartItem]:
        """
        DELETE /cart: with an id remove that line, without one empty the cart.
        """
        key = safe_string(item_id)
        if key:
            return self.store.remove_item(session_id, key)
        return self.store.clear(session_id)
