"""Port interface for the ticketing backend's ticket API."""

from abc import ABC, abstractmethod

from support_desk.domain.entities.ticket import Ticket


class TicketRepository(ABC):
    @abstractmethod
    async def get_all(self) -> list[Ticket]:
        """Return every ticket the backend exposes, in backend order."""
        ...

    @abstractmethod
    async def get_by_id(self, ticket_id: int) -> Ticket | None:
        ...

    @abstractmethod
    async def assign_owner(
        self, ticket_id: int, owner_id: int, state_id: int | None = None
    ) -> None:
        """Set the ticket owner (optionally also its state).

        Idempotent. Failures must raise, never pass silently.
        """
        ...

    @abstractmethod
    async def update_state(self, ticket_id: int, state_id: int) -> None:
        ...

    @abstractmethod
    async def delete(self, ticket_id: int) -> None:
        ...
