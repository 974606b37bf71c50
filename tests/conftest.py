"""Common utilities for tests."""

from tests.mock_utils import (
    MockArrayRemove,
    MockArrayUnion,
    MockBatch,
    MockFieldFilter,
    make_firestore_module,
    make_mock_db,
    patch_mockfirestore,
)

__all__ = [
    "MockArrayRemove",
    "MockArrayUnion",
    "MockBatch",
    "MockFieldFilter",
    "make_firestore_module",
    "make_mock_db",
    "patch_mockfirestore",
]
