from .reconcile import reconcile_user_memberships
from .registry import (
    GroupRegistry,
    create_group,
    get_group,
    join_group,
    leave_group,
)

__all__ = [
    "GroupRegistry",
    "create_group",
    "get_group",
    "join_group",
    "leave_group",
    "reconcile_user_memberships",
]
