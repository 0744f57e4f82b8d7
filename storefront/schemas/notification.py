# storefront/schemas/notification.py
import uuid
from datetime import datetime
from typing import Literal

from sqlmodel import SQLModel

NotificationType = Literal["Order", "Ticket", "User"]


class NotificationRead(SQLModel):
    id: uuid.UUID
    type: NotificationType
    title: str
    message: str
    href: str
    is_read: bool
    created_at: datetime


class NotificationListResponse(SQLModel):
    notifications: list[NotificationRead]
    unread_count: int


class NotificationsMarkedRead(SQLModel):
    ok: bool = True
    updated: int
