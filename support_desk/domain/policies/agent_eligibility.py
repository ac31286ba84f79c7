"""AgentEligibilityPolicy — which agents may receive an auto-assigned ticket."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from support_desk.domain.entities.agent import Agent

# System / dispatcher mailboxes that must never own tickets
DEFAULT_EXCLUDED_EMAILS: tuple[str, ...] = (
    "support@howentech.com",
    "howensupport@howentech.com",
)


def is_excluded(agent: Agent, excluded_emails: Iterable[str] = DEFAULT_EXCLUDED_EMAILS) -> bool:
    """Case-insensitive match of the agent's email against the exclusion list."""
    if not agent.email:
        return False
    email = agent.email.strip().lower()
    return any(email == e.strip().lower() for e in excluded_emails)


def is_eligible(
    agent: Agent,
    group_id: int | None,
    now: datetime,
    excluded_emails: Iterable[str] = DEFAULT_EXCLUDED_EMAILS,
) -> bool:
    if is_excluded(agent, excluded_emails):
        return False
    if agent.is_admin():
        return False
    if agent.is_on_vacation(now):
        return False
    return agent.services_group(group_id)


def eligible_agents(
    agents: list[Agent],
    group_id: int | None,
    now: datetime,
    excluded_emails: Iterable[str] = DEFAULT_EXCLUDED_EMAILS,
) -> list[Agent]:
    """Agents servicing *group_id* who are not excluded, admin, or on vacation.

    Roster order is preserved.
    """
    excluded = tuple(excluded_emails)
    return [a for a in agents if is_eligible(a, group_id, now, excluded)]
