"""Tests for group utility functions."""

import unittest
from unittest.mock import patch

from canvasfriends.group.utils import (
    generate_group_code,
    is_valid_group_code,
    normalize_group_code,
    resolve_group_codes,
)
from tests.mock_utils import make_mock_db


class TestGroupCodes(unittest.TestCase):
    def test_generated_code_shape(self):
        for _ in range(50):
            code = generate_group_code()
            self.assertEqual(len(code), 6)
            self.assertTrue(is_valid_group_code(code))

    @patch("canvasfriends.group.utils.secrets.choice", return_value="Q")
    def test_generated_code_uses_secure_choice(self, mock_choice):
        self.assertEqual(generate_group_code(), "QQQQQQ")
        self.assertEqual(mock_choice.call_count, 6)

    def test_normalize_group_code(self):
        self.assertEqual(normalize_group_code("  ab12cd "), "AB12CD")
        self.assertEqual(normalize_group_code(None), "")
        self.assertEqual(normalize_group_code(123456), "")

    def test_is_valid_group_code(self):
        self.assertTrue(is_valid_group_code("A1B2C3"))
        self.assertFalse(is_valid_group_code("A1B2C"))
        self.assertFalse(is_valid_group_code("a1b2c3"))
        self.assertFalse(is_valid_group_code("A1-2C3"))


class TestResolveGroupCodes(unittest.TestCase):
    def setUp(self):
        self.db = make_mock_db()
        self.db.collection("groups").document("AAAAAA").set(
            {"name": "A", "members": ["u1"]}
        )
        self.db.collection("groups").document("BBBBBB").set(
            {"name": "B", "members": ["u2"]}
        )

    def test_keeps_order_and_reports_dangling(self):
        groups, dangling = resolve_group_codes(
            self.db, ["BBBBBB", "GONE01", "AAAAAA", "BBBBBB", ""]
        )

        self.assertEqual([g["code"] for g in groups], ["BBBBBB", "AAAAAA"])
        self.assertEqual(dangling, ["GONE01"])

    def test_empty_list(self):
        self.assertEqual(resolve_group_codes(self.db, []), ([], []))
