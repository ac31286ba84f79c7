"""AutoAssignUseCase — least-loaded assignment of unowned tickets."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from support_desk.application.ports.agent_repo import AgentRepository
from support_desk.application.ports.notification_repo import NotificationRepository
from support_desk.application.ports.ticket_repo import TicketRepository
from support_desk.domain.entities.agent import Agent
from support_desk.domain.entities.assignment import (
    AssignedAgent,
    AssignmentResult,
    AutoAssignReport,
)
from support_desk.domain.entities.notification import Notification
from support_desk.domain.entities.ticket import Ticket
from support_desk.domain.policies.agent_eligibility import (
    DEFAULT_EXCLUDED_EMAILS,
    eligible_agents,
)
from support_desk.domain.policies.load_balancing import LoadTable, pick_least_loaded
from support_desk.domain.value_objects.enums import NotificationType, TicketState
from support_desk.domain.value_objects.regions import region_label

logger = logging.getLogger(__name__)

# Failures quoted in the admin alert
ALERT_SAMPLE_SIZE = 5


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AutoAssignUseCase:
    """Assigns every unowned new/open ticket to the least-loaded eligible agent.

    Not safe to run concurrently with itself: the caller guarantees at most
    one run at a time.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        agent_repo: AgentRepository,
        notification_repo: NotificationRepository,
        excluded_emails: Iterable[str] = DEFAULT_EXCLUDED_EMAILS,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._tickets = ticket_repo
        self._agents = agent_repo
        self._notifications = notification_repo
        self._excluded = tuple(excluded_emails)
        self._clock = clock

    async def execute(self) -> AutoAssignReport:
        """Run one assignment pass over the whole backend.

        Pipeline:
        1. Read all tickets, select candidates (fatal on read failure)
        2. Read the active roster (fatal on read failure)
        3. Build the load table from non-terminal owned tickets
        4. Assign candidates one by one, updating the load table as we go
        5. Alert admins if anything failed
        """
        all_tickets = await self._tickets.get_all()
        candidates = [t for t in all_tickets if t.is_assignment_candidate()]

        if not candidates:
            logger.info("Auto-assign: no unassigned tickets among %d", len(all_tickets))
            return AutoAssignReport()

        agents = await self._agents.get_active_agents()
        load = LoadTable.from_tickets(all_tickets)
        now = self._clock()

        logger.info(
            "Auto-assign: %d candidate tickets, %d active agents",
            len(candidates), len(agents),
        )

        report = AutoAssignReport(processed=len(candidates))
        for ticket in candidates:
            result = await self._assign(ticket, agents, load, now)
            report.results.append(result)

        report.succeeded = sum(1 for r in report.results if r.succeeded)
        report.failed = report.processed - report.succeeded
        logger.info("Auto-assign complete: %s", report.message)

        if report.failed:
            await self._alert_admins(report.failures, processed=report.processed)

        return report

    async def assign_single(self, ticket_id: int) -> AssignmentResult:
        """Auto-assign one ticket, e.g. right after it was created.

        Only an unowned new/open ticket is touched; it moves to the open
        state along with the new owner.
        """
        ticket = await self._tickets.get_by_id(ticket_id)
        if ticket is None:
            return AssignmentResult(
                ticket_id=ticket_id, ticket_number=None, error="Ticket not found"
            )
        if ticket.has_real_owner():
            return AssignmentResult(
                ticket_id=ticket.id,
                ticket_number=ticket.number,
                error=f"Ticket already assigned to agent {ticket.owner_id}",
            )
        if not ticket.is_assignment_candidate():
            return AssignmentResult(
                ticket_id=ticket.id,
                ticket_number=ticket.number,
                error=f"Ticket is not new/open (state: {ticket.state})",
            )

        all_tickets = await self._tickets.get_all()
        agents = await self._agents.get_active_agents()
        load = LoadTable.from_tickets(all_tickets)

        result = await self._assign(
            ticket, agents, load, self._clock(), state_id=TicketState.OPEN
        )
        if not result.succeeded:
            await self._alert_admins([result], processed=1)
        return result

    async def _assign(
        self,
        ticket: Ticket,
        agents: list[Agent],
        load: LoadTable,
        now: datetime,
        state_id: int | None = None,
    ) -> AssignmentResult:
        eligible = eligible_agents(agents, ticket.group_id, now, self._excluded)
        if not eligible:
            region = region_label(ticket.group_id, default="unknown")
            logger.warning(
                "Ticket %s: no available agents in group %s (%s)",
                ticket.number or ticket.id, ticket.group_id, region,
            )
            return AssignmentResult(
                ticket_id=ticket.id,
                ticket_number=ticket.number,
                error=f"No available agents for group {ticket.group_id} (region: {region})",
            )

        chosen = pick_least_loaded(eligible, load)

        try:
            await self._tickets.assign_owner(ticket.id, chosen.id, state_id=state_id)
        except Exception as e:
            logger.exception("Failed to assign ticket %s", ticket.id)
            return AssignmentResult(
                ticket_id=ticket.id,
                ticket_number=ticket.number,
                error=str(e) or "Assignment failed",
            )

        load.increment(chosen.id)
        logger.info(
            "Ticket #%s → %s (%s), load now %d",
            ticket.number or ticket.id, chosen.display_name,
            chosen.email, load.count(chosen.id),
        )
        return AssignmentResult(
            ticket_id=ticket.id,
            ticket_number=ticket.number,
            assigned_to=AssignedAgent(
                id=chosen.id, name=chosen.display_name, email=chosen.email
            ),
        )

    async def _alert_admins(self, failures: list[AssignmentResult], processed: int) -> None:
        """Best-effort system alert to every admin; never raises."""
        try:
            admins = await self._agents.get_admins()
            recipients = sorted({a.email or str(a.id) for a in admins})
            if not recipients:
                logger.warning("Auto-assign: %d failures but no admin to alert", len(failures))
                return

            samples = failures[:ALERT_SAMPLE_SIZE]
            lines = [f"#{r.ticket_number or r.ticket_id}: {r.error}" for r in samples]
            if len(failures) > len(samples):
                lines.append(f"... and {len(failures) - len(samples)} more")

            title = f"Auto-assignment failed for {len(failures)} ticket(s)"
            body = (
                f"{len(failures)} of {processed} ticket(s) could not be assigned.\n"
                + "\n".join(lines)
            )
            data = {
                "processed": processed,
                "failed": len(failures),
                "samples": [
                    {
                        "ticket_id": r.ticket_id,
                        "ticket_number": r.ticket_number,
                        "error": r.error,
                    }
                    for r in samples
                ],
            }

            for user_id in recipients:
                await self._notifications.save(
                    Notification(
                        id=None,
                        user_id=user_id,
                        type=NotificationType.SYSTEM_ALERT,
                        title=title,
                        body=body,
                        data=data,
                    )
                )
            logger.info("Auto-assign: alerted %d admins", len(recipients))
        except Exception:
            logger.exception("Failed to send auto-assign failure alert")
