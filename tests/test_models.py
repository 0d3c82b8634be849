"""Tests for src.data.models — table locations and TodoItem."""

from dataclasses import asdict

import pytest

from src.data.models import FixedOffset, HeaderSearch, Identity, TodoItem


def test_fixed_offset_rejects_row_zero():
    with pytest.raises(ValueError):
        FixedOffset(start_row=0)


def test_header_search_rejects_inverted_range():
    with pytest.raises(ValueError):
        HeaderSearch(start=20, end=5)


def test_header_search_single_row_range_is_valid():
    assert HeaderSearch(start=7, end=7).end == 7


def test_identity_defaults_to_no_aliases():
    identity = Identity(username="carol", location=FixedOffset(start_row=3))
    assert identity.aliases == ()


def test_identity_is_immutable():
    identity = Identity(username="carol", location=FixedOffset(start_row=3))
    with pytest.raises(Exception):
        identity.username = "dave"


def test_todo_item_defaults():
    item = TodoItem(purpose="Buy milk")
    assert item.goal == ""
    assert item.status == ""
    assert item.row_number is None
    assert item.is_done is False


@pytest.mark.parametrize("status", ["done", "DONE", "  Done  "])
def test_todo_item_is_done(status):
    assert TodoItem(purpose="x", status=status).is_done


@pytest.mark.parametrize("status", ["", "pending", "done!", "not done"])
def test_todo_item_not_done(status):
    assert not TodoItem(purpose="x", status=status).is_done


def test_todo_item_serializable():
    item = TodoItem(purpose="Buy milk", goal="by Friday", row_number=6)
    assert asdict(item) == {
        "purpose": "Buy milk",
        "goal": "by Friday",
        "status": "",
        "row_number": 6,
    }
