"""Poll-based cancellation tokens."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class AbortSignal(Protocol):
    """Read-only handle reporting whether an operation should stop."""

    @property
    def aborted(self) -> bool:
        """``True`` once cancellation has been requested."""


class _ControllerSignal:
    __slots__ = ("_controller",)

    def __init__(self, controller: AbortController) -> None:
        self._controller = controller

    @property
    def aborted(self) -> bool:
        return self._controller.aborted

    @property
    def reason(self) -> Any:
        return self._controller.reason

    def __repr__(self) -> str:
        return f"AbortSignal(aborted={self.aborted})"


class AbortController:
    """Owner side of an :class:`AbortSignal`.

    Consumers receive :attr:`signal`, which exposes ``aborted`` but cannot
    trigger cancellation itself. Aborting is idempotent and the first reason
    is kept.
    """

    def __init__(self) -> None:
        self._aborted = False
        self._reason: Any = None
        self._signal = _ControllerSignal(self)

    @property
    def signal(self) -> AbortSignal:
        return self._signal

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def reason(self) -> Any:
        return self._reason

    def abort(self, reason: Any = None) -> None:
        """Request cancellation of every operation polling :attr:`signal`."""

        if self._aborted:
            return
        self._aborted = True
        self._reason = reason


__all__ = ["AbortController", "AbortSignal"]
