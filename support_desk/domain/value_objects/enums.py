"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"
    CUSTOMER = "customer"


class TicketAction(str, Enum):
    VIEW = "view"
    EDIT = "edit"
    DELETE = "delete"
    CLOSE = "close"
    ASSIGN = "assign"


class TicketState(int, Enum):
    """Backend ticket state ids (Zammad /api/v1/ticket_states)."""

    NEW = 1
    OPEN = 2
    PENDING_REMINDER = 3
    CLOSED = 4
    MERGED = 5
    PENDING_CLOSE = 6
    PENDING_CLOSE_ALT = 7  # some backend versions use 7 for pending close


class BackendRole(int, Enum):
    """Backend role ids carried in an agent's role_ids."""

    ADMIN = 1
    AGENT = 2
    CUSTOMER = 3


class NotificationType(str, Enum):
    SYSTEM_ALERT = "system_alert"


class TriggerSource(str, Enum):
    CRON = "cron"
    ADMIN = "admin"


# Tickets that may be auto-assigned
ASSIGNABLE_STATE_IDS: frozenset[int] = frozenset({TicketState.NEW, TicketState.OPEN})

# Tickets that count towards an agent's current workload
LOAD_STATE_IDS: frozenset[int] = frozenset(
    {
        TicketState.NEW,
        TicketState.OPEN,
        TicketState.PENDING_REMINDER,
        TicketState.PENDING_CLOSE_ALT,
    }
)

STATE_NAMES: dict[int, str] = {
    TicketState.NEW: "new",
    TicketState.OPEN: "open",
    TicketState.PENDING_REMINDER: "pending reminder",
    TicketState.CLOSED: "closed",
    TicketState.MERGED: "merged",
    TicketState.PENDING_CLOSE: "pending close",
    TicketState.PENDING_CLOSE_ALT: "pending close",
}


def state_name(state_id: int | None) -> str:
    """Human-readable state; unknown ids read as closed."""
    if state_id is None:
        return "closed"
    return STATE_NAMES.get(state_id, "closed")
