"""Ticket entity — the subset of backend ticket fields used for decisions."""

from dataclasses import dataclass
from datetime import datetime

from support_desk.domain.value_objects.enums import (
    ASSIGNABLE_STATE_IDS,
    LOAD_STATE_IDS,
    state_name,
)

# The backend's own placeholder "system" user; owning a ticket with it means unassigned.
SYSTEM_PLACEHOLDER_OWNER_ID = 1


@dataclass
class Ticket:
    id: int
    customer_id: int | None = None
    owner_id: int | None = None
    group_id: int | None = None
    state_id: int | None = None
    number: str | None = None
    title: str | None = None
    created_at: datetime | None = None

    @property
    def state(self) -> str:
        return state_name(self.state_id)

    def has_placeholder_owner(self) -> bool:
        return self.owner_id == SYSTEM_PLACEHOLDER_OWNER_ID

    def has_real_owner(self) -> bool:
        return self.owner_id is not None and not self.has_placeholder_owner()

    def is_unowned(self) -> bool:
        """No human owner: owner missing or the placeholder system user."""
        return not self.has_real_owner()

    def is_assignment_candidate(self) -> bool:
        return self.is_unowned() and self.state_id in ASSIGNABLE_STATE_IDS

    def counts_towards_load(self) -> bool:
        return self.has_real_owner() and self.state_id in LOAD_STATE_IDS
