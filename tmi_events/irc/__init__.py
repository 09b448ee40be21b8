"""TMI line parsing, event classification and synthetic chat events."""

from .dispatcher import FrameDispatcher  # noqa: F401
from .events import ChatEvent, SubEvent, TwitchEvent, events_for, lifecycle_event  # noqa: F401
from .models import (  # noqa: F401
    BadgeEntry,
    ChannelLocator,
    CommandKind,
    EmoteSpan,
    ParsedMessage,
    ParseFailure,
    SubKind,
)
from .parser import route, route_frame, split_frame  # noqa: F401
from .synthetic import ChannelUserState, SessionState, build_chat_event  # noqa: F401

__all__ = [
    "BadgeEntry",
    "ChannelLocator",
    "ChannelUserState",
    "ChatEvent",
    "CommandKind",
    "EmoteSpan",
    "FrameDispatcher",
    "ParsedMessage",
    "ParseFailure",
    "SessionState",
    "SubEvent",
    "SubKind",
    "TwitchEvent",
    "build_chat_event",
    "events_for",
    "lifecycle_event",
    "route",
    "route_frame",
    "split_frame",
]
