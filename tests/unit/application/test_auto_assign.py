"""Tests for AutoAssignUseCase with in-memory fakes."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from support_desk.application.ports.agent_repo import AgentRepository
from support_desk.application.ports.notification_repo import NotificationRepository
from support_desk.application.ports.ticket_repo import TicketRepository
from support_desk.application.use_cases.auto_assign import AutoAssignUseCase
from support_desk.domain.entities.agent import Agent
from support_desk.domain.entities.ticket import Ticket
from support_desk.domain.exceptions import BackendError
from support_desk.domain.value_objects.enums import NotificationType
from support_desk.domain.value_objects.vacation import VacationWindow

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)

# ─── In-memory fakes ────────────────────────────────────────────────


class FakeTicketRepo(TicketRepository):
    def __init__(self, tickets=(), fail_writes_for=(), fail_reads=False):
        self.tickets: dict[int, Ticket] = {t.id: t for t in tickets}
        self.writes: list[tuple[int, int, int | None]] = []
        self._fail_writes_for = set(fail_writes_for)
        self._fail_reads = fail_reads

    async def get_all(self):
        if self._fail_reads:
            raise BackendError("Zammad unreachable: connection refused")
        return list(self.tickets.values())

    async def get_by_id(self, ticket_id):
        return self.tickets.get(ticket_id)

    async def assign_owner(self, ticket_id, owner_id, state_id=None):
        if ticket_id in self._fail_writes_for:
            raise BackendError("Ticket is locked", status_code=422)
        self.writes.append((ticket_id, owner_id, state_id))
        self.tickets[ticket_id].owner_id = owner_id
        if state_id is not None:
            self.tickets[ticket_id].state_id = int(state_id)

    async def update_state(self, ticket_id, state_id):
        self.tickets[ticket_id].state_id = int(state_id)

    async def delete(self, ticket_id):
        self.tickets.pop(ticket_id, None)


class FakeAgentRepo(AgentRepository):
    def __init__(self, agents=(), admins=(), fail_roster=False):
        self.agents = list(agents)
        self.admins = list(admins)
        self.roster_reads = 0
        self._fail_roster = fail_roster

    async def get_active_agents(self):
        self.roster_reads += 1
        if self._fail_roster:
            raise BackendError("HTTP 503: Service Unavailable", status_code=503)
        return list(self.agents)

    async def get_admins(self):
        return list(self.admins)


class FakeNotificationRepo(NotificationRepository):
    def __init__(self, fail=False):
        self.saved = []
        self._fail = fail

    async def save(self, notification):
        if self._fail:
            raise RuntimeError("database is down")
        notification.id = len(self.saved) + 1
        self.saved.append(notification)
        return notification


def _agent(aid, groups=(4,), **kw) -> Agent:
    kw.setdefault("email", f"agent{aid}@example.com")
    kw.setdefault("role_ids", frozenset({2}))
    return Agent(id=aid, group_ids=frozenset(groups), **kw)


def _admin(aid, email) -> Agent:
    return Agent(id=aid, email=email, role_ids=frozenset({1}))


def _unassigned(tid, group_id=4, state_id=1, owner_id=None) -> Ticket:
    return Ticket(id=tid, number=str(10000 + tid), owner_id=owner_id, group_id=group_id, state_id=state_id)


def _make_uc(tickets, agents, admins=(), notifications=None, **kw):
    return AutoAssignUseCase(
        ticket_repo=tickets,
        agent_repo=FakeAgentRepo(agents, admins) if not isinstance(agents, FakeAgentRepo) else agents,
        notification_repo=notifications or FakeNotificationRepo(),
        clock=lambda: NOW,
        **kw,
    )


# ─── Run ─────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_no_candidates_returns_empty_report_without_writes():
    tickets = FakeTicketRepo([
        Ticket(id=1, owner_id=5, group_id=4, state_id=2),
        Ticket(id=2, owner_id=None, group_id=4, state_id=4),
    ])
    agents = FakeAgentRepo([_agent(5)])
    uc = _make_uc(tickets, agents)

    report = await uc.execute()

    assert (report.processed, report.succeeded, report.failed) == (0, 0, 0)
    assert report.results == []
    assert report.message == "No unassigned tickets found"
    assert tickets.writes == []
    assert agents.roster_reads == 0


@pytest.mark.asyncio
async def test_single_agent_receives_every_ticket_in_group():
    tickets = FakeTicketRepo([_unassigned(1), _unassigned(2, owner_id=1), _unassigned(3, state_id=2)])
    uc = _make_uc(tickets, [_agent(10)])

    report = await uc.execute()

    assert (report.processed, report.succeeded, report.failed) == (3, 3, 0)
    assert [w[1] for w in tickets.writes] == [10, 10, 10]
    assert all(r.assigned_to.id == 10 for r in report.results)
    assert report.message == "Auto-assignment completed: 3 assigned, 0 failed"


@pytest.mark.asyncio
async def test_candidates_processed_in_backend_order():
    tickets = FakeTicketRepo([_unassigned(7), _unassigned(3), _unassigned(5)])
    uc = _make_uc(tickets, [_agent(10)])

    report = await uc.execute()

    assert [r.ticket_id for r in report.results] == [7, 3, 5]


@pytest.mark.asyncio
async def test_pending_and_closed_tickets_are_not_candidates():
    tickets = FakeTicketRepo([
        _unassigned(1, state_id=3),
        _unassigned(2, state_id=4),
        _unassigned(3, state_id=7),
        _unassigned(4, state_id=2),
    ])
    uc = _make_uc(tickets, [_agent(10)])

    report = await uc.execute()

    assert report.processed == 1
    assert tickets.writes == [(4, 10, None)]


@pytest.mark.asyncio
async def test_least_loaded_agent_chosen_and_load_updates_within_run():
    existing = [
        Ticket(id=100, owner_id=10, group_id=4, state_id=2),
        Ticket(id=101, owner_id=10, group_id=4, state_id=3),
        Ticket(id=102, owner_id=11, group_id=4, state_id=4),  # closed, not load
    ]
    tickets = FakeTicketRepo(existing + [_unassigned(1), _unassigned(2), _unassigned(3)])
    uc = _make_uc(tickets, [_agent(10), _agent(11)])

    await uc.execute()

    # 10 starts at 2 and 11 at 0; the final tie goes to roster order
    assert [w[1] for w in tickets.writes] == [11, 11, 10]


@pytest.mark.asyncio
async def test_ties_resolved_by_roster_order():
    tickets = FakeTicketRepo([_unassigned(1), _unassigned(2)])
    uc = _make_uc(tickets, [_agent(12), _agent(3)])

    await uc.execute()

    assert [w[1] for w in tickets.writes] == [12, 3]


@pytest.mark.asyncio
async def test_agent_on_open_ended_vacation_never_assigned():
    away = _agent(10, out_of_office=True, vacation=VacationWindow(start=NOW - timedelta(days=3)))
    tickets = FakeTicketRepo([_unassigned(1)])
    uc = _make_uc(tickets, [away], admins=[_admin(2, "boss@example.com")])

    report = await uc.execute()

    assert tickets.writes == []
    assert report.failed == 1
    assert report.results[0].error == "No available agents for group 4 (region: asia-pacific)"


@pytest.mark.asyncio
async def test_out_of_office_flag_without_window_keeps_agent_eligible():
    agent = _agent(10, out_of_office=True)
    tickets = FakeTicketRepo([_unassigned(1)])
    uc = _make_uc(tickets, [agent])

    report = await uc.execute()

    assert report.succeeded == 1


@pytest.mark.asyncio
async def test_admins_and_system_mailboxes_never_assigned():
    roster = [
        _agent(10, email="support@howentech.com"),
        _agent(11, role_ids=frozenset({1, 2})),
        _agent(12, email="HowenSupport@howentech.com"),
        _agent(13),
    ]
    tickets = FakeTicketRepo([_unassigned(1), _unassigned(2)])
    uc = _make_uc(tickets, roster)

    await uc.execute()

    assert {w[1] for w in tickets.writes} == {13}


@pytest.mark.asyncio
async def test_custom_exclusion_list_replaces_defaults():
    roster = [_agent(10, email="support@howentech.com"), _agent(11, email="bot@example.com")]
    tickets = FakeTicketRepo([_unassigned(1)])
    uc = _make_uc(tickets, roster, excluded_emails=["bot@example.com"])

    await uc.execute()

    assert tickets.writes == [(1, 10, None)]


@pytest.mark.asyncio
async def test_ticket_without_group_fails_with_unknown_region():
    tickets = FakeTicketRepo([_unassigned(1, group_id=None)])
    uc = _make_uc(tickets, [_agent(10)])

    report = await uc.execute()

    assert report.results[0].error == "No available agents for group None (region: unknown)"


@pytest.mark.asyncio
async def test_write_failure_is_recorded_and_run_continues():
    tickets = FakeTicketRepo([_unassigned(1), _unassigned(2), _unassigned(3)], fail_writes_for={2})
    uc = _make_uc(tickets, [_agent(10), _agent(11)])

    report = await uc.execute()

    assert (report.processed, report.succeeded, report.failed) == (3, 2, 1)
    failed = report.failures[0]
    assert failed.ticket_id == 2
    assert failed.error == "Ticket is locked"
    # the failed write leaves 11 at zero load, so ticket 3 still goes to 11
    assert [w[:2] for w in tickets.writes] == [(1, 10), (3, 11)]


@pytest.mark.asyncio
async def test_report_counts_add_up():
    tickets = FakeTicketRepo(
        [_unassigned(i, group_id=4 if i % 2 else 6) for i in range(1, 9)],
        fail_writes_for={3},
    )
    uc = _make_uc(tickets, [_agent(10)])

    report = await uc.execute()

    assert report.processed == len(report.results) == 8
    assert report.succeeded + report.failed == report.processed
    assert report.succeeded == sum(1 for r in report.results if r.succeeded)
    for r in report.results:
        assert (r.assigned_to is None) != (r.error is None)


# ─── Fatal reads ─────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_ticket_read_failure_propagates():
    uc = _make_uc(FakeTicketRepo(fail_reads=True), [_agent(10)])
    with pytest.raises(BackendError):
        await uc.execute()


@pytest.mark.asyncio
async def test_roster_read_failure_propagates_without_writes():
    tickets = FakeTicketRepo([_unassigned(1)])
    uc = _make_uc(tickets, FakeAgentRepo([_agent(10)], fail_roster=True))
    with pytest.raises(BackendError):
        await uc.execute()
    assert tickets.writes == []


# ─── Admin alerts ────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_no_alert_when_everything_succeeds():
    notifications = FakeNotificationRepo()
    uc = _make_uc(
        FakeTicketRepo([_unassigned(1)]), [_agent(10)],
        admins=[_admin(2, "boss@example.com")], notifications=notifications,
    )
    await uc.execute()
    assert notifications.saved == []


@pytest.mark.asyncio
async def test_alert_sent_to_every_admin_with_at_most_five_samples():
    notifications = FakeNotificationRepo()
    tickets = FakeTicketRepo([_unassigned(i, group_id=6) for i in range(1, 8)] + [_unassigned(8)])
    uc = _make_uc(
        tickets, [_agent(10)],
        admins=[_admin(2, "b@example.com"), _admin(3, "a@example.com"), _admin(4, None)],
        notifications=notifications,
    )

    report = await uc.execute()

    assert report.failed == 7
    assert [n.user_id for n in notifications.saved] == ["4", "a@example.com", "b@example.com"]
    alert = notifications.saved[0]
    assert alert.type == NotificationType.SYSTEM_ALERT
    assert alert.title == "Auto-assignment failed for 7 ticket(s)"
    assert alert.data["processed"] == 8
    assert alert.data["failed"] == 7
    assert len(alert.data["samples"]) == 5
    assert alert.data["samples"][0]["ticket_id"] == 1
    assert "... and 2 more" in alert.body


@pytest.mark.asyncio
async def test_alert_failure_does_not_change_report():
    tickets = FakeTicketRepo([_unassigned(1, group_id=6), _unassigned(2)])
    uc = _make_uc(
        tickets, [_agent(10)],
        admins=[_admin(2, "boss@example.com")],
        notifications=FakeNotificationRepo(fail=True),
    )

    report = await uc.execute()

    assert (report.processed, report.succeeded, report.failed) == (2, 1, 1)


@pytest.mark.asyncio
async def test_failures_without_admins_still_complete():
    uc = _make_uc(FakeTicketRepo([_unassigned(1, group_id=6)]), [_agent(10)], admins=[])
    report = await uc.execute()
    assert report.failed == 1


# ─── Single ticket ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_assign_single_moves_ticket_to_open():
    tickets = FakeTicketRepo([
        Ticket(id=100, owner_id=10, group_id=4, state_id=2),
        _unassigned(1),
    ])
    uc = _make_uc(tickets, [_agent(10), _agent(11, firstname="Ana", lastname="Lee")])

    result = await uc.assign_single(1)

    assert result.succeeded
    assert result.assigned_to.id == 11
    assert result.assigned_to.name == "Ana Lee"
    assert tickets.writes == [(1, 11, 2)]
    assert tickets.tickets[1].state_id == 2


@pytest.mark.asyncio
async def test_assign_single_missing_ticket():
    uc = _make_uc(FakeTicketRepo(), [_agent(10)])
    result = await uc.assign_single(42)
    assert not result.succeeded
    assert result.error == "Ticket not found"


@pytest.mark.asyncio
async def test_assign_single_already_owned():
    tickets = FakeTicketRepo([Ticket(id=1, owner_id=10, group_id=4, state_id=2)])
    uc = _make_uc(tickets, [_agent(11)])

    result = await uc.assign_single(1)

    assert result.error == "Ticket already assigned to agent 10"
    assert tickets.writes == []


@pytest.mark.asyncio
@pytest.mark.parametrize("state_id", [3, 4, 5, 7])
async def test_assign_single_leaves_non_open_ticket_untouched(state_id):
    tickets = FakeTicketRepo([_unassigned(1, state_id=state_id)])
    notifications = FakeNotificationRepo()
    uc = _make_uc(
        tickets, [_agent(10)],
        admins=[_admin(2, "boss@example.com")], notifications=notifications,
    )

    result = await uc.assign_single(1)

    assert not result.succeeded
    assert result.error.startswith("Ticket is not new/open")
    assert tickets.writes == []
    assert tickets.tickets[1].state_id == state_id
    assert notifications.saved == []


@pytest.mark.asyncio
async def test_assign_single_placeholder_owner_is_reassigned():
    tickets = FakeTicketRepo([_unassigned(1, owner_id=1)])
    uc = _make_uc(tickets, [_agent(10)])

    result = await uc.assign_single(1)

    assert result.succeeded
    assert tickets.tickets[1].owner_id == 10


@pytest.mark.asyncio
async def test_assign_single_failure_alerts_admins():
    notifications = FakeNotificationRepo()
    uc = _make_uc(
        FakeTicketRepo([_unassigned(1, group_id=6)]), [_agent(10)],
        admins=[_admin(2, "boss@example.com")], notifications=notifications,
    )

    result = await uc.assign_single(1)

    assert not result.succeeded
    assert len(notifications.saved) == 1
    assert notifications.saved[0].data["processed"] == 1
