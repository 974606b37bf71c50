from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock

from google.api_core.exceptions import DeadlineExceeded

from canvasfriends.user.services import (
    UserDirectory,
    display_name,
    ensure_user,
    get_groups,
    get_user,
    sync_assignments,
)
from tests.helpers import BaseTestCase

ASSIGNMENTS = [
    {"title": "Essay", "dueDate": "2024-12-22T23:59:00Z", "courseName": "ENG", "id": 1},
    {"title": "Lab", "dueDate": "2024-12-20T12:00:00Z", "courseName": "CHEM", "id": "2"},
]


class TestEnsureUser(BaseTestCase):
    def test_first_sign_in_creates_document(self) -> None:
        created = ensure_user(self.mock_db, "alice", "alice@example.com", "Alice")

        self.assertTrue(created)
        user = self.user_data("alice")
        self.assertEqual(user["uid"], "alice")
        self.assertEqual(user["email"], "alice@example.com")
        self.assertEqual(user["displayName"], "Alice")
        self.assertEqual(user["groups"], [])
        self.assertIn("createdAt", user)

    def test_existing_document_is_untouched(self) -> None:
        self.create_user("alice", display_name="Original", groups=["ABC123"])

        created = ensure_user(self.mock_db, "alice", "new@example.com", "Renamed")

        self.assertFalse(created)
        user = self.user_data("alice")
        self.assertEqual(user["displayName"], "Original")
        self.assertEqual(user["groups"], ["ABC123"])

    def test_missing_profile_fields_default_to_empty(self) -> None:
        ensure_user(self.mock_db, "anon", None, None)
        user = self.user_data("anon")
        self.assertEqual(user["email"], "")
        self.assertEqual(user["displayName"], "")


class TestSyncAssignments(BaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.create_user("alice")

    def test_snapshot_round_trips_in_order(self) -> None:
        before = datetime.now(timezone.utc)

        result = sync_assignments(self.mock_db, "alice", ASSIGNMENTS)

        self.assertTrue(result["success"])
        self.assertEqual(result["count"], 2)
        user = self.user_data("alice")
        self.assertEqual(user["assignments"], ASSIGNMENTS)
        self.assertGreaterEqual(datetime.fromisoformat(user["lastSync"]), before)
        self.assertEqual(result["lastSync"], user["lastSync"])

    def test_sync_replaces_previous_snapshot(self) -> None:
        sync_assignments(self.mock_db, "alice", ASSIGNMENTS)
        sync_assignments(self.mock_db, "alice", ASSIGNMENTS[1:])
        self.assertEqual(self.user_data("alice")["assignments"], ASSIGNMENTS[1:])

    def test_empty_list_clears_assignments(self) -> None:
        sync_assignments(self.mock_db, "alice", ASSIGNMENTS)
        result = sync_assignments(self.mock_db, "alice", [])
        self.assertEqual(result["count"], 0)
        self.assertEqual(self.user_data("alice")["assignments"], [])

    def test_extra_fields_are_dropped_and_defaults_applied(self) -> None:
        record = {"dueDate": "2024-12-20", "id": 9, "grade": "A", "points": 10}

        sync_assignments(self.mock_db, "alice", [record])

        self.assertEqual(
            self.user_data("alice")["assignments"],
            [
                {
                    "title": "Untitled Assignment",
                    "dueDate": "2024-12-20",
                    "courseName": "Unknown Course",
                    "id": 9,
                }
            ],
        )

    def test_record_without_due_date_is_rejected(self) -> None:
        result = sync_assignments(self.mock_db, "alice", [{"id": 1, "title": "x"}])

        self.assertEqual(result["code"], "invalid_input")
        self.assertNotIn("assignments", self.user_data("alice"))

    def test_non_list_is_rejected(self) -> None:
        result = sync_assignments(self.mock_db, "alice", {"id": 1})
        self.assertEqual(result["code"], "invalid_input")

    def test_unknown_user(self) -> None:
        result = sync_assignments(self.mock_db, "ghost", ASSIGNMENTS)
        self.assertEqual(result["code"], "not_found")

    def test_requires_identity(self) -> None:
        result = UserDirectory.sync_assignments(self.mock_db, None, ASSIGNMENTS)
        self.assertEqual(result["code"], "not_authenticated")


class TestUserReads(BaseTestCase):
    def test_get_user(self) -> None:
        self.create_user("alice", display_name="Alice")
        user = get_user(self.mock_db, "alice")
        self.assertIsNotNone(user)
        self.assertEqual(user["displayName"], "Alice")

    def test_get_user_not_found(self) -> None:
        self.assertIsNone(get_user(self.mock_db, "ghost"))

    def test_get_groups_skips_dangling_codes(self) -> None:
        self.create_user("alice", groups=["GONE01"])
        self.create_group("ABC123", ["alice"], name="Physics")

        groups = get_groups(self.mock_db, "alice")

        self.assertEqual([g["code"] for g in groups], ["ABC123"])
        self.assertEqual(groups[0]["name"], "Physics")

    def test_get_groups_without_identity(self) -> None:
        self.assertEqual(get_groups(self.mock_db, None), [])

    def test_get_groups_on_remote_failure(self) -> None:
        db = MagicMock()
        db.collection.return_value.document.return_value.get.side_effect = (
            DeadlineExceeded("timeout")
        )
        self.assertEqual(get_groups(db, "alice"), [])

    def test_display_name_fallbacks(self) -> None:
        self.assertEqual(display_name({"displayName": "Al", "email": "a@x"}), "Al")
        self.assertEqual(display_name({"displayName": "", "email": "a@x"}), "a@x")
        self.assertEqual(display_name({}, "uid-1"), "uid-1")
