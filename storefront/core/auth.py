# storefront/core/auth.py
from dataclasses import dataclass
from typing import Literal

from fastapi import Depends, Request, Response

from storefront.core.config import get_settings
from storefront.core.exceptions import ForbiddenException, UnauthorizedException
from storefront.core.security import create_session_token, decode_session_token

settings = get_settings()

ADMIN_COOKIE_NAME = "sf_admin_session"
ADMIN_ROLE_COOKIE_NAME = "sf_admin_role"
ADMIN_USERNAME_COOKIE_NAME = "sf_admin_username"
CART_SESSION_COOKIE = "sf_cart_session"

Role = Literal["Super Admin", "Admin", "Manager", "Customer"]
ROLES: tuple[Role, ...] = ("Super Admin", "Admin", "Manager", "Customer")


def resolve_role(value: str | None) -> Role:
    """
    Map loose role strings ("superadmin", "ADMIN", ...) to a Role.
    Anything unknown is a Customer.
    """
    role = (value or "").strip().lower()
    if role in ("super admin", "superadmin"):
        return "Super Admin"
    if role == "admin":
        return "Admin"
    if role == "manager":
        return "Manager"
    return "Customer"


def can_access_admin(role: Role) -> bool:
    return role != "Customer"


def can_manage_users(role: Role) -> bool:
    """User management and settings are closed to Managers."""
    return role in ("Super Admin", "Admin")


def can_create_user_role(actor: Role, target: Role) -> bool:
    if actor == "Super Admin":
        return True
    if actor == "Admin":
        return target != "Super Admin"
    if actor == "Manager":
        return target in ("Manager", "Customer")
    return False


def can_delete_user(actor: Role, target: Role) -> bool:
    if actor == "Customer":
        return False
    if actor == "Super Admin":
        return True
    if target == "Super Admin":
        return False
    return actor in ("Admin", "Manager")


@dataclass(frozen=True)
class AuthState:
    """
    Identity resolved from request cookies.

    is_logged_in is True only for a session cookie whose signature and
    expiry check out; username and role come from the signed token.
    """

    is_logged_in: bool = False
    username: str = ""
    role: Role = "Customer"

    @property
    def is_authenticated(self) -> bool:
        return self.is_logged_in and bool(self.username)


GUEST = AuthState()


def auth_state_from_cookies(cookies: dict[str, str]) -> AuthState:
    token = (cookies.get(ADMIN_COOKIE_NAME) or "").strip()
    if not token:
        return GUEST

    claims = decode_session_token(token)
    if not claims:
        return GUEST

    username = str(claims.get("sub") or "").strip()
    return AuthState(
        is_logged_in=True,
        username=username,
        role=resolve_role(claims.get("role")),
    )


def get_auth_state(request: Request) -> AuthState:
    """
    Resolve the caller's identity.

    Missing / invalid / expired session cookie => guest AuthState.
    """
    return auth_state_from_cookies(request.cookies)


def require_auth(auth: AuthState = Depends(get_auth_state)) -> AuthState:
    """
    Enforce a signed-in caller.

    Raises:
        UnauthorizedException(401): for guests.
    """
    if not auth.is_authenticated:
        raise UnauthorizedException("Authentication required")
    return auth


def require_staff(auth: AuthState = Depends(require_auth)) -> AuthState:
    """
    Back office access: every role except Customer.
    """
    if not can_access_admin(auth.role):
        raise ForbiddenException("Admin access required")
    return auth


def require_user_admin(auth: AuthState = Depends(require_staff)) -> AuthState:
    """
    User management: Super Admin and Admin only.
    """
    if not can_manage_users(auth.role):
        raise ForbiddenException("User management requires an Admin role")
    return auth


# ---- cookie writers ----


def set_login_cookies(response: Response, username: str, role: Role) -> None:
    """
    Write the three http-only session cookies (8h by default).

    The signed token is authoritative; role/username cookies mirror it for
    clients that only need to display them.
    """
    common = dict(
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
        path="/",
        max_age=settings.SESSION_MAX_AGE_SECONDS,
    )
    response.set_cookie(ADMIN_COOKIE_NAME, create_session_token(username, role), **common)
    response.set_cookie(ADMIN_ROLE_COOKIE_NAME, role, **common)
    response.set_cookie(ADMIN_USERNAME_COOKIE_NAME, username, **common)


def clear_login_cookies(response: Response) -> None:
    for name in (ADMIN_COOKIE_NAME, ADMIN_ROLE_COOKIE_NAME, ADMIN_USERNAME_COOKIE_NAME):
        response.delete_cookie(name, path="/")


def set_cart_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        CART_SESSION_COOKIE,
        session_id,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
        path="/",
        max_age=settings.CART_COOKIE_MAX_AGE_SECONDS,
    )
