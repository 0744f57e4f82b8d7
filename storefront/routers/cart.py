# storefront/routers/cart.py
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from storefront.core.auth import (
    CART_SESSION_COOKIE,
    AuthState,
    get_auth_state,
    set_cart_cookie,
)
from storefront.core.dependencies import get_cart_store
from storefront.core.exceptions import StorefrontException
from storefront.repositories.cart_session_store import CartSessionStore
from storefront.schemas.cart import (
    CartItemCreate,
    CartItemQuantityUpdate,
    CartItemsResponse,
)
from storefront.services.cart_service import (
    CartService,
    SessionResolution,
    resolve_cart_session,
)

router = APIRouter(prefix="/cart", tags=["Cart"])


def cart_session(
    request: Request,
    response: Response,
    auth: AuthState = Depends(get_auth_state),
    store: CartSessionStore = Depends(get_cart_store),
) -> SessionResolution:
    """
    Resolve the cart key for this request.

    A newly minted guest id is written back as an http-only cookie.
    """
    resolution = resolve_cart_session(store, auth, request.cookies.get(CART_SESSION_COOKIE))
    if resolution.should_set_cookie:
        set_cart_cookie(response, resolution.session_id)
    return resolution


def cart_service(store: CartSessionStore = Depends(get_cart_store)) -> CartService:
    return CartService(store)


def cart_error(exc: StorefrontException, resolution: SessionResolution) -> JSONResponse:
    """
    Error body for a cart mutation. A freshly minted guest cookie is still
    sent so the next request lands on the same cart.
    """
    response = JSONResponse(status_code=exc.status_code, content={"error": exc.detail})
    if resolution.should_set_cookie:
        set_cart_cookie(response, resolution.session_id)
    return response


@router.get("", response_model=CartItemsResponse)
def get_cart(
    resolution: SessionResolution = Depends(cart_session),
    service: CartService = Depends(cart_service),
):
    """
    Current cart items (guest or signed-in).
    """
    return {"items": service.list_items(resolution.session_id)}


@router.post("", response_model=CartItemsResponse)
def add_to_cart(
    payload: CartItemCreate,
    resolution: SessionResolution = Depends(cart_session),
    service: CartService = Depends(cart_service),
):
    """
    Add a product line, or increase its quantity if already in the cart.

    400 when id/name are blank or price is not positive.
    """
    try:
        items = service.add_item(resolution.session_id, payload)
    except StorefrontException as exc:
        return cart_error(exc, resolution)
    return {"items": items}


@router.patch("", response_model=CartItemsResponse)
def update_cart_item(
    payload: CartItemQuantityUpdate,
    resolution: SessionResolution = Depends(cart_session),
    service: CartService = Depends(cart_service),
):
    """
    Set the quantity of a line (coerced to an integer >= 1).

    Unknown ids leave the cart unchanged; a missing id is a 400.
    """
    try:
        items = service.update_quantity(resolution.session_id, payload)
    except StorefrontException as exc:
        return cart_error(exc, resolution)
    return {"items": items}


@router.delete("", response_model=CartItemsResponse)
def remove_cart_item(
    id: str | None = None,
    resolution: SessionResolution = Depends(cart_session),
    service: CartService = Depends(cart_service),
):
    """
    Remove one line (`?id=`) or, without an id, clear the cart.
    """
    return {"items": service.remove_or_clear(resolution.session_id, id)}
