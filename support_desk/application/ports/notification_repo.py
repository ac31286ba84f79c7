"""Port interface for notification persistence."""

from abc import ABC, abstractmethod

from support_desk.domain.entities.notification import Notification


class NotificationRepository(ABC):
    @abstractmethod
    async def save(self, notification: Notification) -> Notification:
        ...
