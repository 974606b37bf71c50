from .aggregator import (
    AssignmentAggregator,
    collect_member_ids,
    get_friend_assignments,
    get_friend_timeline,
)
from .notifier import ChangeNotifier, Subscription

__all__ = [
    "AssignmentAggregator",
    "ChangeNotifier",
    "Subscription",
    "collect_member_ids",
    "get_friend_assignments",
    "get_friend_timeline",
]
