"""Data models for shared assignments."""

from __future__ import annotations

import math
from typing import Any, TypedDict, Union

from canvasfriends.constants import DEFAULT_ASSIGNMENT_TITLE, DEFAULT_COURSE_NAME
from canvasfriends.errors import ValidationError


class Assignment(TypedDict):
    """A sanitized assignment as stored on a user document."""

    title: str
    dueDate: str
    courseName: str
    id: Union[str, int, float]


class AggregatedAssignment(Assignment):
    """An assignment tagged with the member who owns it. Never persisted."""

    ownerId: str
    ownerName: str


class FriendAssignments(TypedDict):
    """All assignments contributed by one group member."""

    ownerId: str
    ownerName: str
    assignments: list[Assignment]


def clean_assignment(record: dict[str, Any]) -> Assignment:
    """Reduce a record to the four persisted fields.

    ``dueDate`` and ``id`` are required. Missing titles and course names get
    their display defaults, and every other key is dropped. Integral float
    ids, as some JSON encoders emit them, are stored as ints.
    """
    if not isinstance(record, dict):
        raise ValidationError("Assignment must be an object.")
    due_date = record.get("dueDate")
    if not due_date or not isinstance(due_date, str):
        raise ValidationError("Assignment is missing a due date.")
    assignment_id = record.get("id")
    if assignment_id is None or assignment_id == "":
        raise ValidationError("Assignment is missing an id.")
    if isinstance(assignment_id, bool):
        raise ValidationError("Assignment id must be a string or a number.")
    if isinstance(assignment_id, float):
        if not math.isfinite(assignment_id):
            raise ValidationError("Assignment id must be a finite number.")
        if assignment_id.is_integer():
            assignment_id = int(assignment_id)
    elif not isinstance(assignment_id, (str, int)):
        raise ValidationError("Assignment id must be a string or a number.")

    return {
        "title": record.get("title") or DEFAULT_ASSIGNMENT_TITLE,
        "dueDate": due_date,
        "courseName": record.get("courseName") or DEFAULT_COURSE_NAME,
        "id": assignment_id,
    }
