"""Cache key builders and action id generation."""

import re

import pytest

from whiteboard.infrastructure.cache import (
    assignment_key,
    course_key,
    courses_key,
    events_key,
    user_key,
)
from whiteboard.shared.utils import generate_action_id, generate_cuid


def test_list_and_item_keys() -> None:
    assert courses_key() == "courses"
    assert events_key() == "events"
    assert course_key("42") == "course_42"
    assert assignment_key("a1") == "assignment_a1"
    assert user_key("u9") == "user_u9"


@pytest.mark.parametrize("bad", ["", "a_b"])
def test_key_component_validation(bad: str) -> None:
    with pytest.raises(ValueError):
        course_key(bad)


def test_action_id_format() -> None:
    action_id = generate_action_id(1_700_000_000_000)
    assert re.fullmatch(r"action_1700000000000_[a-z0-9]{9}", action_id)


def test_cuids_are_unique() -> None:
    assert len({generate_cuid() for _ in range(50)}) == 50


def test_list_keys_are_canonical_per_params() -> None:
    assert courses_key({}) == "courses"
    assert courses_key({"page": None}) == "courses"
    assert courses_key({"status": "active", "page": 2}) == courses_key(
        {"page": 2, "status": "active", "q": None}
    )
    assert courses_key({"status": "active"}) != courses_key({"status": "archived"})
    assert events_key({"mine": True}) == "events_mine=true"


def test_list_key_query_never_contains_separator() -> None:
    assert courses_key({"course_id": "a_b"}) == "courses_course%5Fid=a%5Fb"
