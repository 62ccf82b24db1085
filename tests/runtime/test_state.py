from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from turnstream.runtime.state import (
    StreamAccumulator,
    StreamResult,
    StreamState,
    append_message,
    merge_result_text,
)


@pytest.mark.parametrize(
    ("accumulated", "content", "expected"),
    [
        ("", "Hello", "Hello"),
        ("Hello", "World", "Hello World"),
        ("Line 1\n", "Line 2", "Line 1\nLine 2"),
        ("trailing ", "space", "trailing  space"),
    ],
)
def test_append_message(accumulated: str, content: str, expected: str) -> None:
    assert append_message(accumulated, content) == expected


@pytest.mark.parametrize(
    ("accumulated", "text", "expected"),
    [
        ("", "Result", "Result"),
        ("Intro", "Result", "Intro\nResult"),
        ("Intro\n", "Result", "Intro\nResult"),
        ("Intro Result tail", "Result", "Intro Result tail"),
    ],
)
def test_merge_result_text(accumulated: str, text: str, expected: str) -> None:
    assert merge_result_text(accumulated, text) == expected


def test_accumulator_is_an_immutable_fold_value() -> None:
    start = StreamAccumulator()
    after = start.with_message("Hello").with_message("World")

    assert start.content == ""
    assert after.content == "Hello World"
    with pytest.raises(FrozenInstanceError):
        after.content = "rewritten"  # type: ignore[misc]


def test_result_text_merge_returns_same_instance_when_unchanged() -> None:
    accumulator = StreamAccumulator(content="Same text")

    assert accumulator.with_result_text("Same text") is accumulator


def test_session_id_is_write_once() -> None:
    accumulator = StreamAccumulator().with_session_id("first").with_session_id("second")

    assert accumulator.claude_session_id == "first"


def test_cost_is_last_write_wins_and_never_unset() -> None:
    accumulator = StreamAccumulator().with_cost(0.1).with_cost(0.2).with_cost(None)

    assert accumulator.cost == 0.2


def test_to_result_carries_summary_fields() -> None:
    accumulator = StreamAccumulator(content="text", claude_session_id="claude-1", cost=1.5)

    result = accumulator.to_result(was_aborted=True)

    assert result == StreamResult(content="text", was_aborted=True, claude_session_id="claude-1", cost=1.5)
    assert result.to_dict() == {
        "content": "text",
        "was_aborted": True,
        "claude_session_id": "claude-1",
        "cost": 1.5,
    }


def test_only_streaming_state_is_non_terminal() -> None:
    assert not StreamState.STREAMING.terminal
    assert all(state.terminal for state in StreamState if state is not StreamState.STREAMING)
