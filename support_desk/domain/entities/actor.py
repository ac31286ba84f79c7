"""Actor entity — the authenticated party making a request."""

from dataclasses import dataclass, field

from support_desk.domain.value_objects.enums import Role


@dataclass(frozen=True)
class Actor:
    id: str
    role: Role | str
    backend_id: int | None = None
    group_ids: frozenset[int] = field(default_factory=frozenset)
    region: str | None = None
    email: str | None = None

    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def is_staff(self) -> bool:
        return self.role == Role.STAFF

    def is_customer(self) -> bool:
        return self.role == Role.CUSTOMER

    def describe(self) -> str:
        return self.email or self.id
