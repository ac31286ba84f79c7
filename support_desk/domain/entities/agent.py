"""Agent entity — a backend user who can own tickets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from support_desk.domain.value_objects.enums import BackendRole
from support_desk.domain.value_objects.vacation import VacationWindow


@dataclass
class Agent:
    id: int
    email: str | None = None
    firstname: str | None = None
    lastname: str | None = None
    login: str | None = None
    role_ids: frozenset[int] = field(default_factory=frozenset)
    group_ids: frozenset[int] = field(default_factory=frozenset)
    active: bool = True
    out_of_office: bool = False
    vacation: VacationWindow = field(default_factory=VacationWindow)

    @property
    def display_name(self) -> str:
        full = " ".join(p.strip() for p in (self.firstname, self.lastname) if p and p.strip())
        if full:
            return full
        return self.login or self.email or f"Agent #{self.id}"

    def is_admin(self) -> bool:
        return BackendRole.ADMIN in self.role_ids

    def services_group(self, group_id: int | None) -> bool:
        return group_id is not None and group_id in self.group_ids

    def is_on_vacation(self, now: datetime) -> bool:
        if not self.out_of_office:
            return False
        return self.vacation.covers(now)
