# storefront/repositories/user_repo.py
import uuid
from datetime import datetime

from sqlmodel import Session, select

from storefront.models.user import PasswordResetToken, User


class UserRepository:
    """
    Data access layer for User and PasswordResetToken.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    # ----- Users -----

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Return a User by unique (lower-cased) email, or None if not found."""
        stmt = select(User).where(User.email == email)
        return session.exec(stmt).first()

    def get_by_username(self, session: Session, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        return session.exec(stmt).first()

    def usernames_like(self, session: Session, base: str) -> set[str]:
        stmt = select(User.username).where(User.username.startswith(base))
        return set(session.exec(stmt).all())

    def list(self, session: Session, skip: int = 0, limit: int = 50) -> list[User]:
        stmt = select(User).order_by(User.created_at.desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def delete(self, session: Session, user: User) -> None:
        """Delete a User."""
        session.delete(user)
        session.commit()

    # ----- Password reset tokens -----

    def add_reset_token(self, session: Session, token: PasswordResetToken) -> PasswordResetToken:
        session.add(token)
        session.commit()
        session.refresh(token)
        return token

    def find_reset_token(
        self,
        session: Session,
        user_id: uuid.UUID,
        token: str,
    ) -> PasswordResetToken | None:
        stmt = (
            select(PasswordResetToken)
            .where(
                PasswordResetToken.user_id == user_id,
                PasswordResetToken.token == token,
                PasswordResetToken.used_at.is_(None),
            )
            .order_by(PasswordResetToken.created_at.desc())
        )
        return session.exec(stmt).first()

    def mark_reset_token_used(
        self,
        session: Session,
        token: PasswordResetToken,
        used_at: datetime,
    ) -> None:
        token.used_at = used_at
        session.add(token)
        session.commit()
