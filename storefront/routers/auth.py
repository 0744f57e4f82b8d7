# storefront/routers/auth.py
from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from storefront.core.auth import (
    AuthState,
    clear_login_cookies,
    get_auth_state,
    resolve_role,
    set_login_cookies,
)
from storefront.core.config import get_settings
from storefront.core.exceptions import BadRequestException
from storefront.database import get_session
from storefront.schemas.user import (
    LoginRequest,
    MeResponse,
    OkResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    PasswordResetRequested,
    RegisterRequest,
    SessionInfo,
    UserRead,
)
from storefront.services.user_service import RESET_NEUTRAL_MESSAGE, UserService

router = APIRouter(prefix="/auth", tags=["Auth"])
settings = get_settings()
service = UserService()


@router.post("/login", response_model=SessionInfo)
def login(
    payload: LoginRequest,
    response: Response,
    session: Session = Depends(get_session),
):
    """
    Cookie login for customers and staff.

    Sets the signed session cookie plus role/username cookies (8h).
    """
    signed_in = service.authenticate(session, payload.identifier, payload.password)
    set_login_cookies(response, signed_in.username, signed_in.role)
    return SessionInfo(username=signed_in.username, role=signed_in.role)


@router.post("/logout", response_model=OkResponse)
def logout(response: Response):
    clear_login_cookies(response)
    return OkResponse()


@router.post(
    "/register",
    response_model=SessionInfo,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: RegisterRequest,
    response: Response,
    session: Session = Depends(get_session),
):
    """
    Self-registration. Creates a Customer, notifies staff and signs the new
    customer in.
    """
    user = service.register(session, payload)
    role = resolve_role(user.role)
    set_login_cookies(response, user.username, role)
    return SessionInfo(username=user.username, role=role)


@router.get("/me", response_model=MeResponse)
def me(
    auth: AuthState = Depends(get_auth_state),
    session: Session = Depends(get_session),
):
    """
    `authenticated: false` for guests and for sessions whose account no
    longer exists or was deactivated.
    """
    user = service.get_me(session, auth)
    if user is None:
        return MeResponse(authenticated=False)
    return MeResponse(authenticated=True, role=auth.role, user=UserRead.model_validate(user))


@router.post("/request-reset", response_model=PasswordResetRequested)
def request_reset(
    payload: PasswordResetRequest,
    session: Session = Depends(get_session),
):
    """
    Always answers with a neutral success message so accounts cannot be
    probed. Outside production the token is echoed back for local testing.
    """
    if not payload.identifier:
        raise BadRequestException("Username or email is required.")

    token = service.request_password_reset(session, payload.identifier)
    return PasswordResetRequested(
        message=RESET_NEUTRAL_MESSAGE,
        preview_token=None if settings.is_production else token,
    )


@router.post("/reset-password", response_model=OkResponse)
def reset_password(
    payload: PasswordResetConfirm,
    session: Session = Depends(get_session),
):
    service.reset_password(session, payload.identifier, payload.token, payload.new_password)
    return OkResponse()
