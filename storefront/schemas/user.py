# storefront/schemas/user.py
import uuid
from datetime import datetime

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from storefront.core.auth import Role


def _strip(v: str | None) -> str:
    return (v or "").strip()


class UserRead(SQLModel):
    """Response schema returned to clients (never includes the hash)."""

    id: uuid.UUID
    name: str
    surname: str
    username: str
    email: str
    role: Role
    phone: str
    city: str
    address: str
    source: str
    is_active: bool
    created_at: datetime


class LoginRequest(SQLModel):
    """
    identifier: e-mail or username
    """

    model_config = ConfigDict(extra="ignore")

    identifier: str = ""
    password: str = ""

    @field_validator("identifier")
    @classmethod
    def strip_identifier(cls, v: str) -> str:
        return v.strip()


class SessionInfo(SQLModel):
    ok: bool = True
    username: str
    role: Role


class RegisterRequest(SQLModel):
    """
    Self-registration from the storefront; always creates a Customer.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    surname: str = ""
    email: str = ""
    password: str = ""

    @field_validator("name", "surname", "email")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _strip(v)


class MeResponse(SQLModel):
    authenticated: bool
    role: Role | None = None
    user: UserRead | None = None


class PasswordResetRequest(SQLModel):
    model_config = ConfigDict(extra="ignore")

    identifier: str = ""

    @field_validator("identifier")
    @classmethod
    def strip_identifier(cls, v: str) -> str:
        return v.strip()


class PasswordResetRequested(SQLModel):
    ok: bool = True
    message: str
    preview_token: str | None = None


class PasswordResetConfirm(SQLModel):
    model_config = ConfigDict(extra="ignore")

    identifier: str = ""
    token: str = ""
    new_password: str = ""

    @field_validator("identifier", "token")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class OkResponse(SQLModel):
    ok: bool = True


# ---- back office ----


class AdminUserCreate(SQLModel):
    """
    Payload for creating an account from the back office.

    The actor's role limits which roles may be created.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    surname: str = Field(default="", max_length=100)
    email: EmailStr
    password: str
    role: Role = "Customer"
    username: str | None = None
    phone: str = ""
    city: str = ""
    address: str = ""

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("surname", "phone", "city", "address")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _strip(v)
