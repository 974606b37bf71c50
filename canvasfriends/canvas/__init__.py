"""Canvas LMS planner client and the sanitizer for its items."""

from .client import CanvasAPIError, CanvasClient, sanitize_assignments

__all__ = ["CanvasAPIError", "CanvasClient", "sanitize_assignments"]
