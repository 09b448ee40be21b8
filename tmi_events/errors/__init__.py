"""Internal exception hierarchy."""

from .internal import (  # noqa: F401
    InternalError,
    SessionStateError,
    UnknownCommandError,
)

__all__ = [
    "InternalError",
    "SessionStateError",
    "UnknownCommandError",
]
