"""TriggerAuthPolicy — who may start an auto-assignment run."""

from __future__ import annotations

import hmac

from support_desk.domain.entities.actor import Actor
from support_desk.domain.exceptions import TriggerAuthError
from support_desk.domain.value_objects.enums import TriggerSource


def authorize_trigger(
    provided_secret: str | None,
    expected_secret: str | None,
    actor: Actor | None,
) -> TriggerSource:
    """Authorize a run either by scheduler secret or by an admin session.

    A supplied secret is authoritative: it must match the configured one
    exactly, and session auth is never consulted in its place.

    Raises:
        TriggerAuthError: 403 for a bad secret or a non-admin actor,
            401 when there is neither a secret nor an actor.
    """
    if provided_secret is not None:
        if not expected_secret:
            raise TriggerAuthError("Cron secret is not configured", status_code=403)
        if not hmac.compare_digest(provided_secret.encode(), expected_secret.encode()):
            raise TriggerAuthError("Invalid cron secret", status_code=403)
        return TriggerSource.CRON

    if actor is None:
        raise TriggerAuthError("Authentication required", status_code=401)
    if not actor.is_admin():
        raise TriggerAuthError("Admin role required", status_code=403)
    return TriggerSource.ADMIN
