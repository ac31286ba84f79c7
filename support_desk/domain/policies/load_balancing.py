"""LoadBalancingPolicy — least-loaded agent selection over a live load table."""

from __future__ import annotations

from collections.abc import Iterable

from support_desk.domain.entities.agent import Agent
from support_desk.domain.entities.ticket import Ticket


class LoadTable:
    """Per-agent count of non-terminal tickets, mutated during one run.

    Every assignment made in a run must be recorded with :meth:`increment`
    before the next candidate is scored.
    """

    def __init__(self, counts: dict[int, int] | None = None):
        self._counts: dict[int, int] = dict(counts or {})

    @classmethod
    def from_tickets(cls, tickets: Iterable[Ticket]) -> LoadTable:
        table = cls()
        for ticket in tickets:
            if ticket.counts_towards_load():
                table.increment(ticket.owner_id)
        return table

    def count(self, agent_id: int) -> int:
        return self._counts.get(agent_id, 0)

    def increment(self, agent_id: int) -> int:
        self._counts[agent_id] = self.count(agent_id) + 1
        return self._counts[agent_id]

    def as_dict(self) -> dict[int, int]:
        return dict(self._counts)

    def __len__(self) -> int:
        return len(self._counts)


def pick_least_loaded(candidates: list[Agent], load: LoadTable) -> Agent:
    """Lowest current load wins; ties keep roster order.

    Raises:
        ValueError: if candidates list is empty.
    """
    if not candidates:
        raise ValueError("Cannot pick from an empty candidate list")

    # sorted() is stable, so equal loads stay in roster order
    return sorted(candidates, key=lambda a: load.count(a.id))[0]
