"""Zammad-backed repository implementations."""

from __future__ import annotations

from support_desk.adapters.zammad.client import ZammadClient, ZammadError
from support_desk.adapters.zammad.schemas import ZammadTicket, ZammadUser
from support_desk.application.ports.agent_repo import AgentRepository
from support_desk.application.ports.ticket_repo import TicketRepository
from support_desk.domain.entities.agent import Agent
from support_desk.domain.entities.ticket import Ticket
from support_desk.domain.value_objects.vacation import VacationWindow

# ─── Mappers ─────────────────────────────────────────────────────────


def ticket_to_domain(raw: dict) -> Ticket:
    t = ZammadTicket.model_validate(raw)
    return Ticket(
        id=t.id,
        customer_id=t.customer_id,
        owner_id=t.owner_id,
        group_id=t.group_id,
        state_id=t.state_id,
        number=t.number,
        title=t.title,
        created_at=t.created_at,
    )


def user_to_agent(raw: dict) -> Agent:
    u = ZammadUser.model_validate(raw)
    return Agent(
        id=u.id,
        email=u.email,
        firstname=u.firstname,
        lastname=u.lastname,
        login=u.login,
        role_ids=frozenset(u.role_ids),
        group_ids=u.group_id_set(),
        active=u.active,
        out_of_office=u.out_of_office,
        vacation=VacationWindow(
            start=u.out_of_office_start_at,
            end=u.out_of_office_end_at,
        ),
    )


class ZammadTicketRepository(TicketRepository):
    def __init__(self, client: ZammadClient):
        self._client = client

    async def get_all(self) -> list[Ticket]:
        return [ticket_to_domain(raw) for raw in await self._client.get_all_tickets()]

    async def get_by_id(self, ticket_id: int) -> Ticket | None:
        try:
            raw = await self._client.get_ticket(ticket_id)
        except ZammadError as e:
            if e.status_code == 404:
                return None
            raise
        return ticket_to_domain(raw)

    async def assign_owner(
        self, ticket_id: int, owner_id: int, state_id: int | None = None
    ) -> None:
        data: dict = {"owner_id": owner_id}
        if state_id is not None:
            data["state_id"] = int(state_id)
        await self._client.update_ticket(ticket_id, data)

    async def update_state(self, ticket_id: int, state_id: int) -> None:
        await self._client.update_ticket(ticket_id, {"state_id": int(state_id)})

    async def delete(self, ticket_id: int) -> None:
        await self._client.delete_ticket(ticket_id)


class ZammadAgentRepository(AgentRepository):
    def __init__(self, client: ZammadClient):
        self._client = client

    async def get_active_agents(self) -> list[Agent]:
        return [user_to_agent(raw) for raw in await self._client.get_agents(active_only=True)]

    async def get_admins(self) -> list[Agent]:
        return [user_to_agent(raw) for raw in await self._client.get_admins()]
