from __future__ import annotations


class PomodoroError(Exception):
    """Base class for contract violations raised by the timer core."""


class InvalidArgumentError(PomodoroError, ValueError):
    """An argument is outside the accepted range (e.g. a non-positive duration)."""


class InvalidStateError(PomodoroError, RuntimeError):
    """The operation is not allowed in the current timer state."""
