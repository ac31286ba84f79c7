"""Response shaping for assignment results."""

from __future__ import annotations

from support_desk.domain.entities.assignment import AssignmentResult, AutoAssignReport


def assignment_result_to_dict(r: AssignmentResult) -> dict:
    return {
        "ticket_id": r.ticket_id,
        "ticket_number": r.ticket_number,
        "assigned_to": (
            {"id": r.assigned_to.id, "name": r.assigned_to.name, "email": r.assigned_to.email}
            if r.assigned_to
            else None
        ),
        "error": r.error,
    }


def report_to_dict(report: AutoAssignReport) -> dict:
    return {
        "message": report.message,
        "processed": report.processed,
        "succeeded": report.succeeded,
        "failed": report.failed,
        "results": [assignment_result_to_dict(r) for r in report.results],
    }
