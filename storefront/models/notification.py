# storefront/models/notification.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class AdminNotification(SQLModel, table=True):
    """
    Back office bell notification.

    type: Order | Ticket | User
    href: dashboard path the notification links to
    """

    __tablename__ = "admin_notifications"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    type: str = Field(default="Order")
    title: str = Field(default="Notification")
    message: str
    href: str = Field(default="/dashboard")

    is_read: bool = Field(default=False, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
    )
