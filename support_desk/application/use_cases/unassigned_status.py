"""UnassignedStatusUseCase — read-only report of tickets awaiting assignment."""

from __future__ import annotations

from support_desk.application.ports.ticket_repo import TicketRepository
from support_desk.domain.entities.assignment import UnassignedStatus
from support_desk.domain.value_objects.regions import region_label


class UnassignedStatusUseCase:
    def __init__(self, ticket_repo: TicketRepository):
        self._tickets = ticket_repo

    async def execute(self) -> UnassignedStatus:
        all_tickets = await self._tickets.get_all()
        unassigned = [t for t in all_tickets if t.is_assignment_candidate()]

        by_region: dict[str, int] = {}
        for ticket in unassigned:
            label = region_label(ticket.group_id)
            by_region[label] = by_region.get(label, 0) + 1

        return UnassignedStatus(
            total_unassigned=len(unassigned),
            by_region=by_region,
            tickets=[
                {
                    "id": t.id,
                    "number": t.number,
                    "title": t.title,
                    "group_id": t.group_id,
                    "created_at": t.created_at.isoformat() if t.created_at else None,
                }
                for t in unassigned
            ],
        )
