"""Tests for AgentEligibilityPolicy."""

from datetime import datetime, timedelta, timezone

from support_desk.domain.entities.agent import Agent
from support_desk.domain.policies.agent_eligibility import (
    eligible_agents,
    is_eligible,
    is_excluded,
)
from support_desk.domain.value_objects.vacation import VacationWindow

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)
DAY = timedelta(days=1)


def _agent(aid: int, groups=(4,), email=None, roles=(2,), **kw) -> Agent:
    return Agent(
        id=aid,
        email=email or f"agent{aid}@example.com",
        role_ids=frozenset(roles),
        group_ids=frozenset(groups),
        **kw,
    )


def test_agent_in_group_is_eligible():
    assert is_eligible(_agent(1), 4, NOW)


def test_agent_outside_group_is_not_eligible():
    assert not is_eligible(_agent(1, groups=(2,)), 4, NOW)


def test_ticket_without_group_has_no_eligible_agents():
    assert eligible_agents([_agent(1), _agent(2)], None, NOW) == []


def test_system_mailboxes_excluded_case_insensitively():
    assert is_excluded(_agent(1, email="Support@HowenTech.com"))
    assert is_excluded(_agent(1, email="howensupport@howentech.com "))
    assert not is_excluded(_agent(1, email="someone@howentech.com"))
    assert not is_excluded(Agent(id=1, email=None))


def test_custom_exclusion_list():
    agent = _agent(1, email="dispatch@example.com")
    assert is_excluded(agent, ["DISPATCH@example.com"])
    assert not is_eligible(agent, 4, NOW, ["dispatch@example.com"])
    assert is_eligible(agent, 4, NOW)


def test_admin_agents_excluded():
    assert not is_eligible(_agent(1, roles=(1, 2)), 4, NOW)


def test_open_ended_vacation_excluded():
    agent = _agent(1, out_of_office=True, vacation=VacationWindow(start=NOW - DAY))
    assert not is_eligible(agent, 4, NOW)


def test_future_vacation_still_eligible():
    agent = _agent(
        1, out_of_office=True,
        vacation=VacationWindow(start=NOW + DAY, end=NOW + 5 * DAY),
    )
    assert is_eligible(agent, 4, NOW)


def test_finished_vacation_still_eligible():
    agent = _agent(1, out_of_office=True, vacation=VacationWindow(end=NOW - DAY))
    assert is_eligible(agent, 4, NOW)


def test_eligible_agents_preserves_roster_order():
    roster = [
        _agent(5),
        _agent(3, groups=(2,)),
        _agent(9),
        _agent(1, roles=(1, 2)),
        _agent(2),
    ]
    assert [a.id for a in eligible_agents(roster, 4, NOW)] == [5, 9, 2]
