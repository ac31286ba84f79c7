"""VacationWindow value object — an agent's optional out-of-office period."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


def _aware(value: datetime) -> datetime:
    # Backend timestamps without an offset are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class VacationWindow:
    start: datetime | None = None
    end: datetime | None = None

    def covers(self, now: datetime) -> bool:
        """Whether *now* falls inside the window.

        - start only: open-ended, on vacation once ``now >= start``
        - end only: already started, on vacation while ``now <= end``
        - both: ``start <= now <= end``
        - neither: never
        """
        now = _aware(now)
        start = _aware(self.start) if self.start else None
        end = _aware(self.end) if self.end else None

        if start and end:
            return start <= now <= end
        if start:
            return now >= start
        if end:
            return now <= end
        return False
