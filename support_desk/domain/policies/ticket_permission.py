"""TicketPermissionPolicy — decides what an actor may do with a ticket.

Both public functions are pure: no I/O, no logging, no hidden state.
Callers log the outcome and translate denials into transport errors.
"""

from __future__ import annotations

from dataclasses import dataclass

from support_desk.domain.entities.actor import Actor
from support_desk.domain.entities.ticket import Ticket
from support_desk.domain.value_objects.enums import Role, TicketAction

UNASSIGNED_REASON = "Staff cannot access unassigned tickets"


@dataclass(frozen=True)
class PermissionResult:
    allowed: bool
    reason: str | None = None


ALLOWED = PermissionResult(allowed=True)


def _deny(reason: str) -> PermissionResult:
    return PermissionResult(allowed=False, reason=reason)


def _is_assigned_to(ticket: Ticket, actor: Actor) -> bool:
    # An actor without a backend id owns nothing
    return actor.backend_id is not None and ticket.owner_id == actor.backend_id


def _is_in_groups(ticket: Ticket, actor: Actor) -> bool:
    return ticket.group_id is not None and ticket.group_id in actor.group_ids


def _owns_as_customer(ticket: Ticket, actor: Actor) -> bool:
    return actor.backend_id is not None and ticket.customer_id == actor.backend_id


def check_permission(
    actor: Actor,
    ticket: Ticket | None,
    action: TicketAction | str,
) -> PermissionResult:
    """Check a single action on a single ticket.

    Raises ValueError for an unknown action, whatever the role.

    Rules, first match wins:
      1. admin → always allowed.
      2. no ticket → denied.
      3. customer → own tickets only, and only view / close.
      4. staff → never tickets owned by the placeholder user or with neither
         owner nor group; otherwise tickets assigned to them or in one of
         their groups, for every action but delete.
      5. anything else → denied.
    """
    action = TicketAction(action)

    if actor.role == Role.ADMIN:
        return ALLOWED

    if ticket is None:
        return _deny("No ticket provided")

    if actor.role == Role.CUSTOMER:
        if not _owns_as_customer(ticket, actor):
            return _deny(
                f"Customer {actor.backend_id} cannot access ticket owned by "
                f"customer {ticket.customer_id}"
            )
        if action in (TicketAction.VIEW, TicketAction.CLOSE):
            return ALLOWED
        return _deny(f"Customer cannot perform action: {action.value}")

    if actor.role == Role.STAFF:
        # Placeholder owner hides the ticket even when the group matches
        if ticket.has_placeholder_owner():
            return _deny(UNASSIGNED_REASON)
        if ticket.owner_id is None and ticket.group_id is None:
            return _deny(UNASSIGNED_REASON)

        if _is_assigned_to(ticket, actor) or _is_in_groups(ticket, actor):
            if action == TicketAction.DELETE:
                return _deny("Only admin can delete tickets")
            return ALLOWED

        return _deny(
            f"Staff {actor.backend_id} cannot access ticket "
            f"(owner: {ticket.owner_id}, group: {ticket.group_id})"
        )

    return _deny(f"Unknown role: {actor.role}")


def filter_by_permission(tickets: list[Ticket], actor: Actor) -> list[Ticket]:
    """Keep the tickets *actor* may view, preserving input order.

    Unknown roles get an empty list.
    """
    if actor.role == Role.ADMIN:
        return tickets

    if actor.role == Role.CUSTOMER:
        return [t for t in tickets if _owns_as_customer(t, actor)]

    if actor.role == Role.STAFF:
        return [
            t for t in tickets
            if _is_assigned_to(t, actor)
            or (_is_in_groups(t, actor) and not t.has_placeholder_owner())
        ]

    return []
