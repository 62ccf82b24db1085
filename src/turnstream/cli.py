"""Command line interface for replaying recorded agent streams."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from .config import StreamProcessorConfig
from .core.errors import StreamError
from .io.adapters.jsonl import JsonlSegmentSink, iter_jsonl_events
from .runtime.hooks import StreamEventHooks
from .runtime.loop import process_stream
from .runtime.segments import SegmentingHooks
from .runtime.timeout import process_with_idle_timeout


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number '{value}'") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError("value must be positive")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="turnstream",
        description="Process recorded agent event streams",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every processed event",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    replay_parser = subparsers.add_parser(
        "replay", help="run a JSONL event recording through the stream processor"
    )
    replay_parser.add_argument("events", type=Path, help="Path to a JSONL file of events")
    replay_parser.add_argument("--session-id", default="replay", help="Session identifier")
    replay_parser.add_argument("--message-id", help="Assistant message identifier")
    replay_parser.add_argument(
        "--no-result-text",
        dest="capture_result_text",
        action="store_false",
        help="Do not fold result text into the accumulated content",
    )
    replay_parser.add_argument(
        "--idle-timeout",
        type=_positive_float,
        metavar="SECONDS",
        help="Fail when no event arrives for this long",
    )
    replay_parser.add_argument(
        "--segments",
        type=Path,
        metavar="PATH",
        help="Write message segments split on tool use to this JSONL file",
    )

    return parser


def _handle_replay(args: argparse.Namespace) -> int:
    if not args.events.is_file():
        sys.stderr.write(f"error: no such file: {args.events}\n")
        return 1

    config = StreamProcessorConfig.create(
        args.session_id,
        message_id=args.message_id,
        capture_result_text=args.capture_result_text,
    )
    hooks: StreamEventHooks | None = None
    if args.segments:
        segmenter = SegmentingHooks.from_config(JsonlSegmentSink(args.segments), config)
        hooks = segmenter.as_hooks()

    events = iter_jsonl_events(args.events)
    if args.idle_timeout:
        runner = process_with_idle_timeout(events, config, hooks, idle_timeout=args.idle_timeout)
    else:
        runner = process_stream(events, config, hooks)

    try:
        result = asyncio.run(runner)
    except StreamError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1

    sys.stdout.write(json.dumps(result.to_dict(), sort_keys=True))
    sys.stdout.write("\n")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.command == "replay":
        return _handle_replay(args)
    parser.error("no command provided")
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
