"""Run one auto-assignment pass from a scheduler (cron, systemd timer).

Usage:
    python -m support_desk.tools.run_auto_assign
    python -m support_desk.tools.run_auto_assign --status-only
    python -m support_desk.tools.run_auto_assign --ticket 1234

The scheduler must guarantee a single run at a time (e.g. ``flock``).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from support_desk.adapters.persistence.database import async_session_factory, engine
from support_desk.adapters.persistence.repositories import SqlNotificationRepository
from support_desk.adapters.zammad.client import ZammadClient
from support_desk.adapters.zammad.repositories import (
    ZammadAgentRepository,
    ZammadTicketRepository,
)
from support_desk.application.use_cases.auto_assign import AutoAssignUseCase
from support_desk.application.use_cases.unassigned_status import UnassignedStatusUseCase
from support_desk.config import settings
from support_desk.domain.exceptions import BackendError

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


async def _status(client: ZammadClient) -> int:
    status = await UnassignedStatusUseCase(ZammadTicketRepository(client)).execute()
    print(f"Unassigned tickets: {status.total_unassigned}")
    for region, count in sorted(status.by_region.items()):
        print(f"  {region}: {count}")
    return 0


async def _run(client: ZammadClient, ticket_id: int | None) -> int:
    uc = AutoAssignUseCase(
        ticket_repo=ZammadTicketRepository(client),
        agent_repo=ZammadAgentRepository(client),
        notification_repo=SqlNotificationRepository(async_session_factory),
        excluded_emails=settings.excluded_agent_emails,
    )
    try:
        if ticket_id is not None:
            result = await uc.assign_single(ticket_id)
            if result.succeeded:
                print(f"Ticket {ticket_id} → {result.assigned_to.name} ({result.assigned_to.email})")
                return 0
            print(f"Ticket {ticket_id} not assigned: {result.error}")
            return 1

        report = await uc.execute()
    finally:
        await engine.dispose()

    print(f"\n{'='*50}")
    print(report.message)
    print(f"Processed: {report.processed}  Assigned: {report.succeeded}  Failed: {report.failed}")
    for r in report.failures:
        print(f"  #{r.ticket_number or r.ticket_id}: {r.error}")
    print(f"{'='*50}\n")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Auto-assign unowned support tickets")
    parser.add_argument(
        "--status-only", action="store_true",
        help="Only report unassigned tickets by region, don't assign",
    )
    parser.add_argument(
        "--ticket", type=int, default=None,
        help="Assign a single ticket by id",
    )
    args = parser.parse_args()

    client = ZammadClient()
    if not client.is_configured:
        logger.error("ZAMMAD_URL / ZAMMAD_API_TOKEN are not set")
        sys.exit(2)

    try:
        if args.status_only:
            code = asyncio.run(_status(client))
        else:
            code = asyncio.run(_run(client, args.ticket))
    except BackendError as e:
        logger.error("Auto-assign run failed: %s", e)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
