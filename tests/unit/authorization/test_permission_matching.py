"""
Unit tests for permission string matching.
"""

import pytest

from rail_authz.authorization import is_permission_match
from rail_authz.authorization.matching import matches_any, split_permission

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "required,held",
    [
        ("users.update.self", "users.update.self"),
        ("users.*.self", "users.delete.self"),
        ("users.update", "users.update.self.driver"),
        ("users.create.self", "users.delete.self"),
        ("*", "anything.at.all"),
        ("a.b.c", "a.x.c"),
    ],
)
def test_match_is_symmetric(required, held):
    assert is_permission_match(required, held) == is_permission_match(held, required)


def test_match_is_case_insensitive():
    assert is_permission_match("A.B", "a.b") is True
    assert is_permission_match("Users.Update.SELF", "users.*.self") is True


def test_wildcard_matches_single_segment():
    assert is_permission_match("users.*.self", "users.delete.self") is True
    assert is_permission_match("users.delete.self", "users.*.self") is True


def test_literal_mismatch_fails():
    assert is_permission_match("users.create.self", "users.delete.self") is False


def test_shorter_permission_matches_longer_with_same_prefix():
    assert is_permission_match("users.update", "users.update.self.driver") is True
    assert is_permission_match("users.update.self.driver", "users.update") is True
    assert is_permission_match("users.*", "users.update.self.driver") is True


def test_trailing_segments_are_not_inspected():
    assert is_permission_match("users", "users.anything.else") is True
    assert is_permission_match("trips", "users.anything") is False


def test_matches_any_checks_every_held_permission():
    held = ["trips.view.self", "users.*.others"]
    assert matches_any("users.update.others", held) is True
    assert matches_any("users.update.self", held) is False
    assert matches_any("users.update.self", []) is False


def test_split_permission_lowercases():
    assert split_permission("Users.Update") == ["users", "update"]
