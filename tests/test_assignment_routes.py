"""Tests for the assignments blueprint."""

from tests.helpers import MOCK_USER_ID, BaseTestCase

PLANNER_ITEM = {
    "plannable_type": "assignment",
    "plannable_date": "2024-12-20T23:59:00Z",
    "plannable_id": 7,
    "context_name": "History",
    "plannable": {"title": "Reading notes", "description": "private"},
}


class AssignmentRoutesTestCase(BaseTestCase):
    def setUp(self):
        super().setUp()
        self.create_user(MOCK_USER_ID)
        self.create_user("friend", display_name="Friend")
        self.create_group("GRP001", [MOCK_USER_ID, "friend"])

    def test_sync_assignments(self):
        assignments = [
            {"title": "Essay", "dueDate": "2024-12-22", "courseName": "ENG", "id": 1}
        ]

        response = self.client.post(
            "/assignments/sync",
            headers=self.login(),
            json={"assignments": assignments},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["count"], 1)
        self.assertEqual(self.user_data(MOCK_USER_ID)["assignments"], assignments)

    def test_sync_planner_items_are_sanitized(self):
        response = self.client.post(
            "/assignments/sync",
            headers=self.login(),
            json={"planner_items": [PLANNER_ITEM, {"plannable_type": "quiz"}]},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            self.user_data(MOCK_USER_ID)["assignments"],
            [
                {
                    "title": "Reading notes",
                    "dueDate": "2024-12-20T23:59:00Z",
                    "courseName": "History",
                    "id": 7,
                }
            ],
        )

    def test_sync_rejects_bad_payload(self):
        response = self.client.post(
            "/assignments/sync", headers=self.login(), json={"assignments": "nope"}
        )
        self.assertEqual(response.status_code, 400)

        response = self.client.post(
            "/assignments/sync", headers=self.login(), json=[1, 2]
        )
        self.assertEqual(response.status_code, 400)

    def test_sync_rejects_incomplete_record(self):
        response = self.client.post(
            "/assignments/sync",
            headers=self.login(),
            json={"assignments": [{"title": "No due date", "id": 1}]},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["code"], "invalid_input")

    def test_friends(self):
        self.mock_db.collection("users").document("friend").update(
            {
                "assignments": [
                    {"title": "Lab", "dueDate": "2024-12-21", "courseName": "C", "id": 2}
                ]
            }
        )

        response = self.client.get("/assignments/friends", headers=self.login())

        self.assertEqual(response.status_code, 200)
        friends = response.get_json()["friends"]
        self.assertEqual([f["ownerName"] for f in friends], ["Friend"])

    def test_timeline(self):
        self.mock_db.collection("users").document("friend").update(
            {
                "assignments": [
                    {"title": "B", "dueDate": "2024-12-21", "courseName": "C", "id": 2},
                    {"title": "A", "dueDate": "2024-12-20", "courseName": "C", "id": 3},
                ]
            }
        )

        response = self.client.get(
            "/assignments/friends/timeline", headers=self.login()
        )

        assignments = response.get_json()["assignments"]
        self.assertEqual([a["title"] for a in assignments], ["A", "B"])
        self.assertEqual(assignments[0]["ownerId"], "friend")

    def test_friends_requires_login(self):
        response = self.client.get("/assignments/friends")
        self.assertEqual(response.status_code, 401)
