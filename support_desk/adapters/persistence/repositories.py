"""SQLAlchemy repository implementations."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from support_desk.adapters.persistence.models import NotificationModel
from support_desk.application.ports.notification_repo import NotificationRepository
from support_desk.domain.entities.notification import Notification


class SqlNotificationRepository(NotificationRepository):
    """Each save commits in its own session, so a failed alert never
    rolls back unrelated work."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def save(self, notification: Notification) -> Notification:
        async with self._session_factory() as session:
            m = NotificationModel(
                user_id=notification.user_id,
                type=notification.type.value,
                title=notification.title,
                body=notification.body,
                data=notification.data,
                read=notification.read,
                expires_at=notification.expires_at,
            )
            session.add(m)
            await session.commit()
            await session.refresh(m)
            notification.id = m.id
            notification.created_at = m.created_at
            return notification
