"""Deadline helpers protecting against upstream streams that stall.

Two flavours exist. :func:`with_timeout` enforces an absolute deadline.
:class:`IdleTimeout` only fires when nothing happens for a whole window, which
suits long-running agent runs whose tools keep producing progress events well
past any sensible absolute limit. Durations are expressed in seconds.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterable, Awaitable
from typing import Any, Optional, TypeVar

from turnstream.config import StreamProcessorConfig
from turnstream.core.errors import StreamTimeoutError

from .hooks import StreamEventHooks
from .loop import process_stream
from .state import StreamResult


LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


async def with_timeout(
    awaitable: Awaitable[T],
    timeout: float,
    message: str | None = None,
) -> T:
    """Await ``awaitable``, raising :class:`StreamTimeoutError` past ``timeout``."""

    try:
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError as exc:
        text = message or f"Operation timed out after {timeout:g}s"
        LOGGER.warning("Timeout triggered timeout=%s message=%s", timeout, text)
        raise StreamTimeoutError(text) from exc


class IdleTimeout:
    """Deadline that is pushed back every time :meth:`reset` is called.

    ``reset`` accepts and ignores positional arguments so it can be passed
    directly as an ``on_stream_activity`` callback.
    """

    def __init__(self, timeout: float, message: str | None = None) -> None:
        if timeout <= 0:
            raise ValueError("idle timeout must be positive")
        self._timeout = timeout
        self._message = message or f"Idle timeout after {timeout:g}s - no activity detected"
        self._handle: Optional[asyncio.TimerHandle] = None
        self._expiry: Optional[asyncio.Future[None]] = None

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def expired(self) -> bool:
        return self._expiry is not None and self._expiry.done()

    def start(self) -> asyncio.Future[None]:
        """Arm the timer and return the future resolved on expiry.

        Must be called from a running event loop.
        """

        loop = asyncio.get_running_loop()
        if self._expiry is None:
            self._expiry = loop.create_future()
        self._schedule(loop)
        return self._expiry

    def reset(self, *_: Any) -> None:
        if self._expiry is None or self._expiry.done():
            return
        self._schedule(asyncio.get_running_loop())

    def cancel(self) -> None:
        """Release the pending timer without marking the deadline expired."""

        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the idle deadline passes first."""

        expiry = self._expiry if self._expiry is not None else self.start()

        task = asyncio.ensure_future(awaitable)
        try:
            done, _ = await asyncio.wait(
                {task, expiry},
                return_when=asyncio.FIRST_COMPLETED,
            )
            if task in done:
                return task.result()

            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            raise StreamTimeoutError(self._message)
        finally:
            self.cancel()
            if not task.done():
                task.cancel()

    async def __aenter__(self) -> IdleTimeout:
        self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.cancel()

    def _schedule(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self._timeout, self._expire)

    def _expire(self) -> None:
        self._handle = None
        if self._expiry is None or self._expiry.done():
            return
        LOGGER.warning("Idle timeout triggered timeout=%s message=%s", self._timeout, self._message)
        self._expiry.set_result(None)


async def process_with_idle_timeout(
    events: AsyncIterable[Any],
    config: StreamProcessorConfig,
    hooks: StreamEventHooks | None = None,
    *,
    idle_timeout: float,
    message: str | None = None,
) -> StreamResult:
    """Run :func:`process_stream`, failing if the stream goes quiet.

    Every consumed event resets the idle deadline through the config's
    activity listener chain.
    """

    async with IdleTimeout(idle_timeout, message) as idle:
        watched = config.with_activity_listener(idle.reset)
        return await idle.run(process_stream(events, watched, hooks))


def stream_timeout_message(timeout: float, context: str | None = None) -> str:
    """Format the error text used when a stream exceeds ``timeout`` seconds."""

    minutes = timeout / 60
    suffix = f" ({context})" if context else ""
    return f"Stream timeout after {minutes:g} minutes{suffix} - upstream agent may be hung"


__all__ = [
    "IdleTimeout",
    "process_with_idle_timeout",
    "stream_timeout_message",
    "with_timeout",
]
