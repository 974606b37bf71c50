"""Utility functions for groups."""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING, Any

from canvasfriends.constants import (
    GROUP_CODE_ALPHABET,
    GROUP_CODE_LENGTH,
    GROUPS_COLLECTION,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from .models import Group


def generate_group_code() -> str:
    """Draw a random group code such as ``A1B2C3``."""
    return "".join(
        secrets.choice(GROUP_CODE_ALPHABET) for _ in range(GROUP_CODE_LENGTH)
    )


def normalize_group_code(code: Any) -> str:
    """Trim and uppercase a user supplied group code."""
    if not isinstance(code, str):
        return ""
    return code.strip().upper()


def is_valid_group_code(code: str) -> bool:
    """Return True if ``code`` has the shape of a group code."""
    return len(code) == GROUP_CODE_LENGTH and all(
        ch in GROUP_CODE_ALPHABET for ch in code
    )


def resolve_group_codes(db: Client, codes: list[str]) -> tuple[list[Group], list[str]]:
    """Look up group documents for ``codes``, keeping their order.

    Returns the groups that exist and the codes that no longer resolve.
    Duplicated codes are only looked up once.
    """
    groups: list[Group] = []
    dangling: list[str] = []
    seen: set[str] = set()
    for code in codes:
        if not code or code in seen:
            continue
        seen.add(code)
        group_doc = db.collection(GROUPS_COLLECTION).document(code).get()
        if not group_doc.exists:
            dangling.append(code)
            continue
        group_data = group_doc.to_dict() or {}
        group_data["code"] = code
        groups.append(group_data)
    return groups, dangling
