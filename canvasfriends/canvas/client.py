"""Client for the Canvas planner API."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import requests

from canvasfriends.assignments.models import Assignment
from canvasfriends.constants import (
    CANVAS_LOOKAHEAD_DAYS,
    CANVAS_PLANNER_PATH,
    CANVAS_SELF_PATH,
    CANVAS_TIMEOUT,
    DEFAULT_ASSIGNMENT_TITLE,
    DEFAULT_COURSE_NAME,
)


class CanvasAPIError(Exception):
    """Raised when Canvas cannot be reached or answers with an error."""

    pass


def sanitize_assignments(planner_items: list[dict[str, Any]]) -> list[Assignment]:
    """Strip planner items down to the fields that may be shared.

    Only dated assignments carrying an id are kept. Grades, descriptions,
    submission state and every other Canvas field are dropped here.
    """
    sanitized: list[Assignment] = []
    for item in planner_items or []:
        if not isinstance(item, dict):
            continue
        if item.get("plannable_type") != "assignment" or not item.get(
            "plannable_date"
        ):
            continue
        if item.get("plannable_id") in (None, ""):
            continue
        plannable = item.get("plannable") or {}
        sanitized.append(
            {
                "title": plannable.get("title") or DEFAULT_ASSIGNMENT_TITLE,
                "dueDate": item["plannable_date"],
                "courseName": item.get("context_name") or DEFAULT_COURSE_NAME,
                "id": item["plannable_id"],
            }
        )
    return sanitized


class CanvasClient:
    """Thin wrapper around the Canvas REST API for one access token."""

    def __init__(self, base_url: str, token: str, timeout: float = CANVAS_TIMEOUT):
        """Initialize the client."""
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Issue an authenticated GET and decode the JSON body."""
        try:
            response = requests.get(
                f"{self.base_url}{path}",
                params=params,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/json",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "unknown"
            raise CanvasAPIError(f"Canvas API error: {status}") from e
        except (requests.RequestException, ValueError) as e:
            raise CanvasAPIError(f"Could not reach Canvas: {e}") from e

    def fetch_planner_items(
        self, start_date: str | None = None, end_date: str | None = None
    ) -> list[dict[str, Any]]:
        """Fetch raw planner items between two ISO-8601 dates."""
        params = {}
        if start_date:
            params["start_date"] = start_date
        if end_date:
            params["end_date"] = end_date
        items = self._get(CANVAS_PLANNER_PATH, params)
        if not isinstance(items, list):
            raise CanvasAPIError("Unexpected planner response from Canvas.")
        return items

    def fetch_upcoming_assignments(
        self, days: int = CANVAS_LOOKAHEAD_DAYS
    ) -> list[Assignment]:
        """Fetch and sanitize the assignments due within ``days``."""
        now = datetime.now(timezone.utc)
        items = self.fetch_planner_items(
            now.isoformat(), (now + timedelta(days=days)).isoformat()
        )
        return sanitize_assignments(items)

    def test_connection(self) -> dict[str, Any]:
        """Check the token by fetching the current Canvas user."""
        try:
            return {"success": True, "user": self._get(CANVAS_SELF_PATH)}
        except CanvasAPIError as e:
            return {"success": False, "error": str(e)}
