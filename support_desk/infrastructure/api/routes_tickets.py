"""Ticket endpoints — permission-checked access to backend tickets."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from support_desk.application.ports.ticket_repo import TicketRepository
from support_desk.application.use_cases.auto_assign import AutoAssignUseCase
from support_desk.domain.entities.actor import Actor
from support_desk.domain.entities.ticket import Ticket
from support_desk.domain.exceptions import AccessDeniedError
from support_desk.domain.policies.ticket_permission import (
    check_permission,
    filter_by_permission,
)
from support_desk.domain.value_objects.enums import TicketAction, TicketState
from support_desk.domain.value_objects.regions import region_label
from support_desk.infrastructure.api.dependencies import (
    get_auto_assign_uc,
    get_current_actor,
    get_ticket_repo,
)
from support_desk.infrastructure.api.serializers import assignment_result_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tickets", tags=["tickets"])


class AssignOwnerRequest(BaseModel):
    owner_id: int


@router.get("")
async def list_tickets(
    actor: Actor = Depends(get_current_actor),
    repo: TicketRepository = Depends(get_ticket_repo),
):
    """List the tickets the caller may view."""
    tickets = await repo.get_all()
    visible = filter_by_permission(tickets, actor)
    logger.info(
        "%s %s (backend id %s, groups %s) sees %d/%d tickets",
        actor.role, actor.describe(), actor.backend_id,
        sorted(actor.group_ids), len(visible), len(tickets),
    )
    return {
        "total": len(visible),
        "tickets": [_serialize_ticket(t) for t in visible],
    }


@router.get("/{ticket_id}")
async def get_ticket(
    ticket_id: int,
    actor: Actor = Depends(get_current_actor),
    repo: TicketRepository = Depends(get_ticket_repo),
):
    ticket = await _load_authorized(ticket_id, actor, TicketAction.VIEW, repo)
    return _serialize_ticket(ticket)


@router.patch("/{ticket_id}/owner")
async def assign_ticket(
    ticket_id: int,
    body: AssignOwnerRequest,
    actor: Actor = Depends(get_current_actor),
    repo: TicketRepository = Depends(get_ticket_repo),
):
    """Manually (re)assign a ticket to an agent."""
    ticket = await _load_authorized(ticket_id, actor, TicketAction.ASSIGN, repo)
    await repo.assign_owner(ticket.id, body.owner_id)
    logger.info("Ticket %s assigned to %s by %s", ticket.id, body.owner_id, actor.describe())
    return {"status": "ok", "ticket_id": ticket.id, "owner_id": body.owner_id}


@router.post("/{ticket_id}/close")
async def close_ticket(
    ticket_id: int,
    actor: Actor = Depends(get_current_actor),
    repo: TicketRepository = Depends(get_ticket_repo),
):
    ticket = await _load_authorized(ticket_id, actor, TicketAction.CLOSE, repo)
    await repo.update_state(ticket.id, TicketState.CLOSED)
    logger.info("Ticket %s closed by %s", ticket.id, actor.describe())
    return {"status": "ok", "ticket_id": ticket.id, "state": "closed"}


@router.delete("/{ticket_id}")
async def delete_ticket(
    ticket_id: int,
    actor: Actor = Depends(get_current_actor),
    repo: TicketRepository = Depends(get_ticket_repo),
):
    ticket = await _load_authorized(ticket_id, actor, TicketAction.DELETE, repo)
    await repo.delete(ticket.id)
    logger.info("Ticket %s deleted by %s", ticket.id, actor.describe())
    return {"status": "ok", "ticket_id": ticket.id}


@router.post("/{ticket_id}/auto-assign")
async def auto_assign_ticket(
    ticket_id: int,
    actor: Actor = Depends(get_current_actor),
    repo: TicketRepository = Depends(get_ticket_repo),
    uc: AutoAssignUseCase = Depends(get_auto_assign_uc),
):
    """Pick the least-loaded eligible agent for one ticket."""
    await _load_authorized(ticket_id, actor, TicketAction.ASSIGN, repo)
    result = await uc.assign_single(ticket_id)
    return {
        "status": "ok" if result.succeeded else "error",
        **assignment_result_to_dict(result),
    }


async def _load_authorized(
    ticket_id: int,
    actor: Actor,
    action: TicketAction,
    repo: TicketRepository,
) -> Ticket:
    ticket = await repo.get_by_id(ticket_id)
    if ticket is None:
        raise HTTPException(status_code=404, detail="Ticket not found")

    result = check_permission(actor, ticket, action)
    if not result.allowed:
        logger.warning(
            "Denied %s on ticket %s for %s: %s",
            action.value, ticket_id, actor.describe(), result.reason,
        )
        raise AccessDeniedError(result.reason or "Forbidden")
    return ticket


def _serialize_ticket(t: Ticket) -> dict:
    return {
        "id": t.id,
        "number": t.number,
        "title": t.title,
        "customer_id": t.customer_id,
        "owner_id": t.owner_id,
        "group_id": t.group_id,
        "region": region_label(t.group_id, default="unknown"),
        "state_id": t.state_id,
        "state": t.state,
        "created_at": t.created_at.isoformat() if t.created_at else None,
    }
