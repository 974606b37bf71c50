import unittest
from unittest.mock import patch

from canvasfriends import create_app
from tests.mock_utils import make_firestore_module, make_mock_db

MOCK_USER_ID = "user1"
MOCK_USER_PAYLOAD = {"uid": MOCK_USER_ID, "email": "user1@example.com"}

# Every module that reaches for firebase_admin.firestore directly.
FIRESTORE_PATCH_TARGETS = (
    "canvasfriends.auth.routes.firestore",
    "canvasfriends.group.routes.firestore",
    "canvasfriends.group.services.registry.firestore",
    "canvasfriends.group.services.reconcile.firestore",
    "canvasfriends.assignments.routes.firestore",
    "canvasfriends.assignments.services.notifier.firestore",
)


class BaseTestCase(unittest.TestCase):
    """Runs each test against a fresh in-memory Firestore inside an app context."""

    def setUp(self):
        self.mock_db = make_mock_db()
        self.mock_firestore_module = make_firestore_module(self.mock_db)

        patchers = {
            target: patch(target, new=self.mock_firestore_module)
            for target in FIRESTORE_PATCH_TARGETS
        }
        patchers["init_app"] = patch("firebase_admin.initialize_app")
        patchers["verify_id_token"] = patch("firebase_admin.auth.verify_id_token")

        self.mocks = {name: p.start() for name, p in patchers.items()}
        for p in patchers.values():
            self.addCleanup(p.stop)

        self.app = create_app(
            {"TESTING": True, "WTF_CSRF_ENABLED": False, "SERVER_NAME": "localhost"}
        )
        self.client = self.app.test_client()
        self.app_context = self.app.app_context()
        self.app_context.push()
        self.addCleanup(self.app_context.pop)

    def create_user(self, uid, email=None, display_name=None, **fields):
        """Creates a user document and returns its reference."""
        data = {
            "uid": uid,
            "email": email or f"{uid}@example.com",
            "displayName": display_name or "",
            "groups": [],
            "createdAt": "2024-01-01T00:00:00+00:00",
        }
        data.update(fields)
        user_ref = self.mock_db.collection("users").document(uid)
        user_ref.set(data)
        return user_ref

    def create_group(self, code, members, name="Study Group"):
        """Creates a group document and lists it on each member's user document."""
        self.mock_db.collection("groups").document(code).set(
            {
                "code": code,
                "name": name,
                "createdBy": members[0] if members else "",
                "members": list(members),
                "createdAt": "2024-01-01T00:00:00+00:00",
            }
        )
        for uid in members:
            user_ref = self.mock_db.collection("users").document(uid)
            if not user_ref.get().exists:
                continue
            groups = user_ref.get().to_dict().get("groups") or []
            if code not in groups:
                user_ref.update({"groups": groups + [code]})

    def user_data(self, uid):
        return self.mock_db.collection("users").document(uid).get().to_dict()

    def group_data(self, code):
        return self.mock_db.collection("groups").document(code).get().to_dict()

    def login(self, uid=MOCK_USER_ID, email=None):
        """Makes the next requests carry a verified token for ``uid``."""
        self.mocks["verify_id_token"].return_value = {
            "uid": uid,
            "email": email or f"{uid}@example.com",
        }
        return {"Authorization": "Bearer mock-token"}
