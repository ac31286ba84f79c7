"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException

from support_desk.adapters.persistence.database import async_session_factory
from support_desk.adapters.persistence.repositories import SqlNotificationRepository
from support_desk.adapters.zammad.client import ZammadClient
from support_desk.adapters.zammad.repositories import (
    ZammadAgentRepository,
    ZammadTicketRepository,
)
from support_desk.application.ports.agent_repo import AgentRepository
from support_desk.application.ports.notification_repo import NotificationRepository
from support_desk.application.ports.ticket_repo import TicketRepository
from support_desk.application.use_cases.auto_assign import AutoAssignUseCase
from support_desk.application.use_cases.unassigned_status import UnassignedStatusUseCase
from support_desk.config import settings
from support_desk.domain.entities.actor import Actor

# Singleton client (stateless, one httpx client per request)
_zammad_client = ZammadClient()


def get_zammad_client() -> ZammadClient:
    return _zammad_client


def get_ticket_repo(client: ZammadClient = Depends(get_zammad_client)) -> TicketRepository:
    return ZammadTicketRepository(client)


def get_agent_repo(client: ZammadClient = Depends(get_zammad_client)) -> AgentRepository:
    return ZammadAgentRepository(client)


def get_notification_repo() -> NotificationRepository:
    return SqlNotificationRepository(async_session_factory)


def get_auto_assign_uc(
    ticket_repo: TicketRepository = Depends(get_ticket_repo),
    agent_repo: AgentRepository = Depends(get_agent_repo),
    notification_repo: NotificationRepository = Depends(get_notification_repo),
) -> AutoAssignUseCase:
    return AutoAssignUseCase(
        ticket_repo=ticket_repo,
        agent_repo=agent_repo,
        notification_repo=notification_repo,
        excluded_emails=settings.excluded_agent_emails,
    )


def get_unassigned_status_uc(
    ticket_repo: TicketRepository = Depends(get_ticket_repo),
) -> UnassignedStatusUseCase:
    return UnassignedStatusUseCase(ticket_repo)


# ─── Actor ───────────────────────────────────────────────────────────
# Identity is established by the auth gateway in front of this service and
# forwarded as X-Actor-* headers.


def _parse_group_ids(raw: str | None) -> frozenset[int]:
    if not raw:
        return frozenset()
    try:
        return frozenset(int(p) for p in raw.split(",") if p.strip())
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid X-Actor-Group-Ids header")


def get_optional_actor(
    x_actor_id: str | None = Header(default=None),
    x_actor_role: str | None = Header(default=None),
    x_actor_backend_id: int | None = Header(default=None),
    x_actor_group_ids: str | None = Header(default=None),
    x_actor_region: str | None = Header(default=None),
    x_actor_email: str | None = Header(default=None),
) -> Actor | None:
    if not x_actor_id or not x_actor_role:
        return None
    return Actor(
        id=x_actor_id,
        role=x_actor_role.strip().lower(),
        backend_id=x_actor_backend_id,
        group_ids=_parse_group_ids(x_actor_group_ids),
        region=x_actor_region,
        email=x_actor_email,
    )


def get_current_actor(actor: Actor | None = Depends(get_optional_actor)) -> Actor:
    if actor is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return actor
