"""Assignment records — the transient outcome of an auto-assignment run."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AssignedAgent:
    id: int
    name: str
    email: str | None


@dataclass
class AssignmentResult:
    """One candidate ticket's outcome: an agent, or an error reason."""

    ticket_id: int
    ticket_number: str | None
    assigned_to: AssignedAgent | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.assigned_to is not None


@dataclass
class AutoAssignReport:
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    results: list[AssignmentResult] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.processed == 0:
            return "No unassigned tickets found"
        return (
            f"Auto-assignment completed: {self.succeeded} assigned, "
            f"{self.failed} failed"
        )

    @property
    def failures(self) -> list[AssignmentResult]:
        return [r for r in self.results if not r.succeeded]


@dataclass
class UnassignedStatus:
    total_unassigned: int
    by_region: dict[str, int]
    tickets: list[dict]
