"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone

import pytest

from support_desk.domain.entities.actor import Actor


@pytest.fixture
def now():
    return datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def admin():
    return Actor(id="u-admin", role="admin", backend_id=3, email="admin@example.com")


@pytest.fixture
def staff():
    return Actor(id="u-staff", role="staff", backend_id=200, group_ids=frozenset({2}))


@pytest.fixture
def customer():
    return Actor(id="u-cust", role="customer", backend_id=300)
