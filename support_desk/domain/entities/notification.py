"""Notification entity — an in-app alert addressed to one user."""

from dataclasses import dataclass, field
from datetime import datetime

from support_desk.domain.value_objects.enums import NotificationType


@dataclass
class Notification:
    id: int | None
    user_id: str
    type: NotificationType
    title: str
    body: str
    data: dict = field(default_factory=dict)
    read: bool = False
    created_at: datetime | None = None
    expires_at: datetime | None = None
