"""Utility functions for ordering shared assignments."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import AggregatedAssignment, FriendAssignments


def parse_due_date(value: Any) -> datetime | None:
    """Parse an ISO-8601 due date, returning None if it is not one.

    A trailing ``Z`` is accepted and timestamps without an offset are read
    as UTC.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def due_date_sort_key(assignment: dict[str, Any]) -> tuple[int, float]:
    """Sort key placing unparsable due dates after every parsable one."""
    parsed = parse_due_date(assignment.get("dueDate"))
    if parsed is None:
        return (1, 0.0)
    return (0, parsed.timestamp())


def flatten_assignments(
    entries: list[FriendAssignments],
) -> list[AggregatedAssignment]:
    """Tag each assignment with its owner and order everything by due date.

    The sort is stable: equal or unparsable dates keep the order in which
    the entries were aggregated.
    """
    flattened: list[AggregatedAssignment] = []
    for entry in entries:
        for assignment in entry.get("assignments") or []:
            if not isinstance(assignment, dict):
                continue
            flattened.append(
                {
                    **assignment,
                    "ownerId": entry["ownerId"],
                    "ownerName": entry["ownerName"],
                }
            )
    flattened.sort(key=due_date_sort_key)
    return flattened
