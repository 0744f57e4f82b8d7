# storefront/repositories/notification_repo.py
from sqlalchemy import func, update
from sqlmodel import Session, select

from storefront.models.notification import AdminNotification


class NotificationRepository:
    """
    Data access layer for AdminNotification.

    add() does not commit: notifications are written in the same unit of
    work as the event that caused them.
    """

    def add(self, session: Session, notification: AdminNotification) -> AdminNotification:
        session.add(notification)
        session.flush()
        return notification

    def list_latest(self, session: Session, limit: int) -> list[AdminNotification]:
        stmt = (
            select(AdminNotification)
            .order_by(AdminNotification.created_at.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def count_unread(self, session: Session) -> int:
        stmt = (
            select(func.count())
            .select_from(AdminNotification)
            .where(AdminNotification.is_read == False)  # noqa: E712
        )
        return int(session.exec(stmt).one() or 0)

    def mark_all_read(self, session: Session) -> int:
        result = session.exec(
            update(AdminNotification)
            .where(AdminNotification.is_read == False)  # noqa: E712
            .values(is_read=True)
        )
        session.commit()
        return int(result.rowcount or 0)
