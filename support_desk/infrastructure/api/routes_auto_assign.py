"""Auto-assignment endpoints — scheduler/admin trigger and status report.

Registered before the ticket router so that ``/tickets/auto-assign`` is not
captured by ``/tickets/{ticket_id}``.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header

from support_desk.application.use_cases.auto_assign import AutoAssignUseCase
from support_desk.application.use_cases.unassigned_status import UnassignedStatusUseCase
from support_desk.config import settings
from support_desk.domain.entities.actor import Actor
from support_desk.domain.exceptions import TriggerAuthError
from support_desk.domain.policies.trigger_auth import authorize_trigger
from support_desk.infrastructure.api.dependencies import (
    get_auto_assign_uc,
    get_current_actor,
    get_optional_actor,
    get_unassigned_status_uc,
)
from support_desk.infrastructure.api.serializers import report_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tickets/auto-assign", tags=["auto-assign"])


def get_cron_secret() -> str:
    return settings.cron_secret


@router.post("")
async def trigger_auto_assign(
    x_cron_secret: str | None = Header(default=None),
    actor: Actor | None = Depends(get_optional_actor),
    expected_secret: str = Depends(get_cron_secret),
    uc: AutoAssignUseCase = Depends(get_auto_assign_uc),
):
    """Assign every unowned new/open ticket (scheduler secret or admin)."""
    source = authorize_trigger(x_cron_secret, expected_secret, actor)
    logger.info("Auto-assign triggered via %s", source.value)
    report = await uc.execute()
    return {"status": "ok", "trigger": source.value, **report_to_dict(report)}


@router.get("")
async def unassigned_status(
    actor: Actor = Depends(get_current_actor),
    uc: UnassignedStatusUseCase = Depends(get_unassigned_status_uc),
):
    """Unowned new/open tickets grouped by region (admin only)."""
    if not actor.is_admin():
        raise TriggerAuthError("Admin role required", status_code=403)
    status = await uc.execute()
    return {
        "totalUnassigned": status.total_unassigned,
        "byRegion": status.by_region,
        "tickets": status.tickets,
    }
