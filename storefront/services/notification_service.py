# storefront/services/notification_service.py
from sqlmodel import Session

from storefront.models.notification import AdminNotification
from storefront.repositories.notification_repo import NotificationRepository

DEFAULT_LIMIT = 14
MAX_LIMIT = 50


def clamp_limit(limit: int | None, default: int = DEFAULT_LIMIT, maximum: int = MAX_LIMIT) -> int:
    if limit is None:
        return default
    return max(1, min(maximum, int(limit)))


class NotificationService:
    """
    Back office bell notifications.

    add() only stages the row; it is committed together with whatever
    triggered it (a checkout, a registration).
    """

    def __init__(self, repo: NotificationRepository | None = None):
        self.repo = repo or NotificationRepository()

    def add(
        self,
        session: Session,
        type: str,
        title: str,
        message: str,
        href: str,
    ) -> AdminNotification:
        notification = AdminNotification(
            type=type,
            title=title.strip() or "Notification",
            message=message.strip(),
            href=href.strip() or "/dashboard",
        )
        return self.repo.add(session, notification)

    def list_latest(self, session: Session, limit: int | None = None) -> list[AdminNotification]:
        return self.repo.list_latest(session, clamp_limit(limit))

    def unread_count(self, session: Session) -> int:
        return self.repo.count_unread(session)

    def mark_all_read(self, session: Session) -> int:
        return self.repo.mark_all_read(session)
