# storefront/services/user_service.py
import logging
import re
import secrets
import unicodedata
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlmodel import Session

from storefront.core import email_client
from storefront.core.auth import (
    AuthState,
    Role,
    can_create_user_role,
    can_delete_user,
    resolve_role,
)
from storefront.core.config import get_settings
from storefront.core.exceptions import (
    BadRequestException,
    ForbiddenException,
    NotFoundException,
    UnauthorizedException,
)
from storefront.core.security import hash_password, verify_password
from storefront.models.user import PasswordResetToken, User
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import AdminUserCreate, RegisterRequest
from storefront.services.notification_service import NotificationService
from storefront.services.pricing import as_utc

logger = logging.getLogger(__name__)
settings = get_settings()

RESET_NEUTRAL_MESSAGE = "If account exists, reset token has been sent to your email."


def normalize_username(value: str | None) -> str:
    """
    Lower-case ASCII letters and digits only (accents folded).
    Empty result => "user".
    """
    folded = unicodedata.normalize("NFKD", (value or "").strip().lower())
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch))
    return re.sub(r"[^a-z0-9]+", "", folded) or "user"


def next_unique_username(base: str, taken: set[str]) -> str:
    """base, base1, base2, ... whichever is free first."""
    normalized = normalize_username(base)
    candidate = normalized
    index = 1
    while candidate in taken:
        candidate = f"{normalized}{index}"
        index += 1
    return candidate


def split_full_name(full_name: str) -> tuple[str, str]:
    """'Ada King Lovelace' -> ('Ada', 'King Lovelace')"""
    parts = full_name.split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def normalize_email(value: str | None) -> str:
    return (value or "").strip().lower()


def _same(a: str, b: str) -> bool:
    # compare_digest only accepts ASCII str; compare bytes instead.
    return secrets.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


@dataclass(frozen=True)
class SignedIn:
    username: str
    role: Role


class UserService:
    """
    Business logic for accounts.

    Responsibilities:
      - account creation rules (unique e-mail, unique username, password length)
      - credential checks for the cookie login
      - password reset tokens
      - back office user management with role rules
    """

    def __init__(
        self,
        repo: UserRepository | None = None,
        notifications: NotificationService | None = None,
    ):
        self.repo = repo or UserRepository()
        self.notifications = notifications or NotificationService()

    # ----- lookups -----

    def find_by_identifier(self, session: Session, identifier: str) -> User | None:
        """E-mail first, then username."""
        email = normalize_email(identifier)
        if email:
            user = self.repo.get_by_email(session, email)
            if user:
                return user
        if not identifier.strip():
            return None
        return self.repo.get_by_username(session, normalize_username(identifier))

    def get_active_by_username(self, session: Session, username: str) -> User | None:
        if not username:
            return None
        user = self.repo.get_by_username(session, username)
        if not user or not user.is_active:
            return None
        return user

    # ----- account creation -----

    def create_account(
        self,
        session: Session,
        *,
        name: str,
        email: str,
        password: str,
        surname: str = "",
        role: Role | None = None,
        source: str = "Admin",
        username: str | None = None,
        phone: str = "",
        city: str = "",
        address: str = "",
    ) -> User | None:
        """
        Insert a new account.

        Returns None when the e-mail is blank or already registered, the name
        is blank, or the password is too short.
        """
        email = normalize_email(email)
        name = name.strip()
        surname = surname.strip()
        if not email or not name or len(password) < settings.PASSWORD_MIN_LENGTH:
            return None
        if self.repo.get_by_email(session, email):
            return None

        if role is None:
            role = "Customer" if source == "Checkout" else "Admin"

        base = username or f"{name} {surname}"
        taken = self.repo.usernames_like(session, normalize_username(base))

        user = User(
            name=name,
            surname=surname,
            username=next_unique_username(base, taken),
            email=email,
            password_hash=hash_password(password),
            role=role,
            phone=phone.strip(),
            city=city.strip(),
            address=address.strip(),
            source=source,
        )
        user = self.repo.create(session, user)
        logger.info("Created %s account %s (source=%s)", user.role, user.username, source)
        return user

    def register(self, session: Session, payload: RegisterRequest) -> User:
        """
        Storefront self-registration. Always a Customer; staff are notified.
        """
        if (
            not payload.name
            or not payload.email
            or len(payload.password) < settings.PASSWORD_MIN_LENGTH
        ):
            raise BadRequestException("Please fill valid name, email and password.")

        user = self.create_account(
            session,
            name=payload.name,
            surname=payload.surname,
            email=payload.email,
            password=payload.password,
            role="Customer",
            source="Checkout",
        )
        if user is None:
            raise BadRequestException("Registration failed. Email may already exist.")

        self.notifications.add(
            session,
            type="User",
            title="New user register",
            message=f"{user.name} {user.surname}".strip() or user.username,
            href=f"/dashboard/users/{user.id}",
        )
        session.commit()
        return user

    # ----- login -----

    def authenticate(self, session: Session, identifier: str, password: str) -> SignedIn:
        """
        Check credentials: the configured back office account first, then
        active accounts by e-mail or username.

        Raises:
            UnauthorizedException(401): on any mismatch.
        """
        identifier = identifier.strip()
        if not identifier or not password:
            raise UnauthorizedException("Invalid username or password.")

        if _same(identifier, settings.ADMIN_USERNAME) and _same(password, settings.ADMIN_PASSWORD):
            return SignedIn(
                username=settings.ADMIN_USERNAME,
                role=resolve_role(settings.ADMIN_ROLE),
            )

        user = self.find_by_identifier(session, identifier)
        if not user or not user.is_active or not verify_password(password, user.password_hash):
            raise UnauthorizedException("Invalid username or password.")

        return SignedIn(username=user.username, role=resolve_role(user.role))

    def get_me(self, session: Session, auth: AuthState) -> User | None:
        if not auth.is_authenticated:
            return None
        return self.get_active_by_username(session, auth.username)

    # ----- password reset -----

    def request_password_reset(self, session: Session, identifier: str) -> str | None:
        """
        Issue a 6-digit, single-use token valid for PASSWORD_RESET_TTL_MINUTES
        and e-mail it. Returns the token, or None when no active account
        matches (callers answer neutrally either way).
        """
        user = self.find_by_identifier(session, identifier)
        if not user or not user.is_active:
            return None

        now = datetime.now(timezone.utc)
        token = PasswordResetToken(
            user_id=user.id,
            token=f"{100000 + secrets.randbelow(900000)}",
            created_at=now,
            expires_at=now + timedelta(minutes=settings.PASSWORD_RESET_TTL_MINUTES),
        )
        token = self.repo.add_reset_token(session, token)
        self._send_reset_email(user, token.token)
        return token.token

    def _send_reset_email(self, user: User, token: str) -> None:
        if not email_client.is_email_configured():
            logger.info("SMTP not configured; reset token for %s not e-mailed", user.username)
            return
        try:
            email_client.send_email(
                to_email=user.email,
                subject=f"[{settings.SMTP_FROM_NAME}] Password reset code",
                text_body=(
                    f"Hello {user.name},\n\n"
                    f"Your password reset code is {token}. "
                    f"It expires in {settings.PASSWORD_RESET_TTL_MINUTES} minutes.\n"
                ),
            )
        except (RuntimeError, OSError):
            # The caller's response stays neutral; the token can be re-requested.
            logger.exception("Failed to send password reset e-mail to %s", user.email)

    def reset_password(
        self,
        session: Session,
        identifier: str,
        token: str,
        new_password: str,
    ) -> None:
        """
        Raises:
            BadRequestException(400): missing input, short password, or an
            unknown / used / expired token.
        """
        if not identifier or not token or len(new_password) < settings.PASSWORD_MIN_LENGTH:
            raise BadRequestException("Username/email, token and valid password are required.")

        invalid = BadRequestException("Invalid or expired token. Please request a new token.")

        user = self.find_by_identifier(session, identifier)
        if not user or not user.is_active:
            raise invalid

        entry = self.repo.find_reset_token(session, user.id, token)
        now = datetime.now(timezone.utc)
        if not entry or as_utc(entry.expires_at) <= now:
            raise invalid

        user.password_hash = hash_password(new_password)
        user.password_reset_required = False
        self.repo.update(session, user)
        self.repo.mark_reset_token_used(session, entry, now)
        logger.info("Password reset for %s", user.username)

    # ----- back office -----

    def list_users(self, session: Session, skip: int = 0, limit: int = 50) -> list[User]:
        return self.repo.list(session, skip=skip, limit=limit)

    def get_user(self, session: Session, user_id: uuid.UUID) -> User:
        """
        Raises:
            NotFoundException(404): if not found.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise NotFoundException("User not found")
        return user

    def create_user(self, session: Session, actor: AuthState, payload: AdminUserCreate) -> User:
        if not can_create_user_role(actor.role, payload.role):
            raise ForbiddenException(f"{actor.role} cannot create {payload.role} accounts")

        user = self.create_account(
            session,
            name=payload.name,
            surname=payload.surname,
            email=payload.email,
            password=payload.password,
            role=payload.role,
            source="Admin",
            username=payload.username,
            phone=payload.phone,
            city=payload.city,
            address=payload.address,
        )
        if user is None:
            raise BadRequestException(
                "User was not created. Check the e-mail (it may already exist) and the password."
            )
        return user

    def deactivate_user(self, session: Session, actor: AuthState, user_id: uuid.UUID) -> User:
        user = self.get_user(session, user_id)
        if not can_delete_user(actor.role, resolve_role(user.role)):
            raise ForbiddenException("Not allowed to deactivate this user")

        user.is_active = False
        return self.repo.update(session, user)

    def delete_user(self, session: Session, actor: AuthState, user_id: uuid.UUID) -> None:
        user = self.get_user(session, user_id)
        if not can_delete_user(actor.role, resolve_role(user.role)):
            raise ForbiddenException("Not allowed to delete this user")
        self.repo.delete(session, user)
