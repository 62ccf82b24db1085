from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

import pytest

from turnstream.cli import _positive_float, build_parser, main


def _write_events(path: Path, events: list[dict[str, Any]]) -> Path:
    path.write_text("\n".join(json.dumps(event) for event in events) + "\n", encoding="utf-8")
    return path


def test_positive_float_validation() -> None:
    assert _positive_float("1.5") == 1.5
    with pytest.raises(argparse.ArgumentTypeError):
        _positive_float("0")
    with pytest.raises(argparse.ArgumentTypeError):
        _positive_float("soon")


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_replay_prints_summary(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    recording = _write_events(
        tmp_path / "events.jsonl",
        [
            {"type": "session_init", "data": {"claudeSessionId": "claude-123"}},
            {"type": "message", "content": "Hello"},
            {"type": "message", "content": "World"},
            {"type": "result", "data": {"cost": 0.01, "result": "Summary"}},
            {"type": "complete"},
        ],
    )

    exit_code = main(["replay", str(recording)])

    assert exit_code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary == {
        "claude_session_id": "claude-123",
        "content": "Hello World\nSummary",
        "cost": 0.01,
        "was_aborted": False,
    }


def test_replay_without_result_text(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    recording = _write_events(
        tmp_path / "events.jsonl",
        [{"type": "result", "data": {"result": "Summary"}}, {"type": "complete"}],
    )

    exit_code = main(["replay", str(recording), "--no-result-text", "--idle-timeout", "5"])

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out)["content"] == ""


def test_replay_reports_stream_errors(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    recording = _write_events(tmp_path / "events.jsonl", [{"type": "error", "content": "rate limited"}])

    exit_code = main(["replay", str(recording)])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "error: rate limited" in captured.err


def test_replay_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["replay", str(tmp_path / "absent.jsonl")])

    assert exit_code == 1
    assert "no such file" in capsys.readouterr().err


def test_replay_writes_segments(tmp_path: Path) -> None:
    recording = _write_events(
        tmp_path / "events.jsonl",
        [
            {"type": "message", "content": "Looking"},
            {"type": "tool_use", "data": {"toolUseId": "tool-1", "toolName": "Grep"}},
            {"type": "message", "content": "Found it"},
            {"type": "complete"},
        ],
    )
    segments_path = tmp_path / "out" / "segments.jsonl"

    exit_code = main(
        ["replay", str(recording), "--segments", str(segments_path), "--message-id", "msg-a"]
    )

    assert exit_code == 0
    segments = [json.loads(line) for line in segments_path.read_text(encoding="utf-8").splitlines()]
    finalized = [segment for segment in segments if not segment["streaming"]]
    assert [segment["content"] for segment in finalized] == ["Looking", "Found it"]
    assert finalized[0]["message_id"] == "msg-a"
    assert finalized[1]["message_id"] != "msg-a"


def test_replay_overwrites_previous_segments(tmp_path: Path) -> None:
    recording = _write_events(
        tmp_path / "events.jsonl",
        [{"type": "message", "content": "Hello"}, {"type": "complete"}],
    )
    segments_path = tmp_path / "segments.jsonl"
    argv = ["replay", str(recording), "--segments", str(segments_path), "--message-id", "msg-a"]

    assert main(argv) == 0
    assert main(argv) == 0

    segments = [json.loads(line) for line in segments_path.read_text(encoding="utf-8").splitlines()]
    assert [(segment["content"], segment["streaming"]) for segment in segments] == [
        ("Hello", True),
        ("Hello", False),
    ]
