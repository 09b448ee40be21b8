"""Centralized internal error hierarchy.

Wire data never raises: malformed lines are reported and skipped. These
exceptions cover programming errors at the package boundary.

Classes:
  InternalError        – Base for all internal errors.
  UnknownCommandError  – An event was built with a command outside CommandKind.
  SessionStateError    – Session state lacks what a synthetic event needs.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class UnknownCommandError(InternalError):
    """Raised when an event is constructed with a command outside CommandKind.

    This is the only construction-time failure of the event model and always
    indicates a bug in the caller, never bad wire data.
    """

    def __init__(self, command: object) -> None:
        super().__init__(
            f"Command {command!r} is not enumerated in CommandKind",
            data={"command": command},
        )
        self.command = command


class SessionStateError(InternalError):
    """Raised when session state cannot describe the channel being written to."""


__all__ = [
    "InternalError",
    "UnknownCommandError",
    "SessionStateError",
]
