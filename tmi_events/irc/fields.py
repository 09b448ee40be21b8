"""Interpreters for the recurring sub-grammars of TMI lines.

Everything downstream of the router sees values produced here: bare logins,
ChannelLocator instances, BadgeEntry and EmoteSpan tuples. Raw tokens are
never passed further.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from ..constants import TMI_HOST
from ..logs.logger import logger
from .metrics import MetricsSink
from .models import GLOBAL_CHANNEL, BadgeEntry, ChannelLocator, EmoteSpan, UserRef

_CREDENTIAL_PATTERNS = (
    ("oauth:", re.compile(r"oauth:\w+")),
    ("OAuth ", re.compile(r"OAuth \w+")),
)


def parse_user(token: str) -> UserRef:
    """Extract the login from a ``[:]nick!user@host`` token."""
    return token.removeprefix(":").split("!", 1)[0]


def format_user(login: str, host: str = TMI_HOST) -> str:
    """Build the ``:nick!nick@nick.<host>`` prefix for a login."""
    login = login.lower()
    return f":{login}!{login}@{login}.{host}"


def parse_channel(token: str, metrics: MetricsSink | None = None) -> ChannelLocator:
    """Parse ``#name`` or ``#name:room:room_id`` into a ChannelLocator.

    ``*`` (and the ``GLOBAL`` sentinel itself) map to the global channel. Any
    other number of colon separated parts is logged, reported to ``metrics``
    as ``malformed_channel`` and the first part is used as the name.
    """
    if token in ("*", GLOBAL_CHANNEL):
        return ChannelLocator(GLOBAL_CHANNEL)
    parts = token.split(":")
    room = room_id = None
    if len(parts) == 3:
        name, room, room_id = parts
    else:
        name = parts[0]
        if len(parts) != 1:
            logger.log_event(
                "irc",
                "malformed_channel",
                level=logging.WARNING,
                token=token,
                name=name,
            )
            if metrics is not None:
                metrics.record_failure("malformed_channel", token)
    if not name.startswith("#"):
        name = f"#{name}"
    return ChannelLocator(name, room or None, room_id or None)


def format_channel(
    channel: ChannelLocator | str, room: str | None = None, room_id: str | None = None
) -> str:
    """Format a ChannelLocator (or name, room, room id) back to wire form."""
    if isinstance(channel, ChannelLocator):
        channel, room, room_id = channel.name, channel.room, channel.room_id
    if channel in ("*", GLOBAL_CHANNEL):
        return GLOBAL_CHANNEL
    result = channel.lower()
    if room is not None:
        result += f":{room}"
    if room_id is not None:
        result += f":{room_id}"
    return result


def is_room(channel: ChannelLocator) -> bool:
    return channel.room is not None and channel.room_id is not None


def parse_badges(value: str) -> tuple[BadgeEntry, ...]:
    """Parse ``name/revision[,name/revision...]`` preserving wire order."""
    badges = []
    for badge in value.split(","):
        if not badge:
            continue
        name, _, revision = badge.partition("/")
        badges.append(BadgeEntry(name, revision))
    return tuple(badges)


def format_badges(badges: Iterable[BadgeEntry | tuple[str, object]]) -> str:
    specs = []
    for badge in badges:
        name, revision = (
            (badge.name, badge.revision) if isinstance(badge, BadgeEntry) else badge
        )
        specs.append(f"{name}/{revision}")
    return ",".join(specs)


def parse_emote_tag(value: str) -> tuple[EmoteSpan, ...]:
    """Parse ``id:start-end[,start-end...][/id:...]`` into EmoteSpans.

    Ranges that are not two integers are skipped.
    """
    spans = []
    for emote_def in value.split("/"):
        emote_id, sep, ranges = emote_def.partition(":")
        if not sep or not emote_id:
            continue
        for span in ranges.split(","):
            start, _, end = span.partition("-")
            if not (start.isdigit() and end.isdigit()):
                continue
            spans.append(EmoteSpan(emote_id, int(start), int(end)))
    return tuple(spans)


def format_emote_tag(spans: Iterable[EmoteSpan]) -> str:
    """Inverse of parse_emote_tag; spans without an id are dropped."""
    groups: dict[str, list[str]] = {}
    for span in spans:
        if span.emote_id is None:
            continue
        groups.setdefault(str(span.emote_id), []).append(f"{span.start}-{span.end}")
    return "/".join(f"{eid}:{','.join(ranges)}" for eid, ranges in groups.items())


def parse_emote_sets(value: str) -> tuple[int, ...]:
    return tuple(int(s) for s in value.split(",") if s.strip().isdigit())


def format_emote_sets(emote_sets: Iterable[int]) -> str:
    return ",".join(str(s) for s in emote_sets)


def emote_to_regex(emote: str) -> re.Pattern[str]:
    # Emote codes from the server are already patterns; they are not escaped.
    return re.compile(rf"(?:\b|\s|^)({emote})(?:\b|\s|$)")


def scan_emotes(
    message: str, emotes: Iterable[tuple[object, str]]
) -> tuple[EmoteSpan, ...]:
    """Locate known emotes in ``message``.

    Args:
        message: Outgoing chat text.
        emotes: ``(emote_id, emote_name)`` pairs.

    Returns:
        One EmoteSpan per non-overlapping match with an inclusive end offset.
    """
    results = []
    for emote_id, name in emotes:
        try:
            pattern = emote_to_regex(name)
        except re.error as e:
            logger.log_event(
                "irc",
                "invalid_emote_pattern",
                level=logging.DEBUG,
                emote=name,
                error=str(e),
            )
            continue
        for match in pattern.finditer(message):
            start = match.start(1)
            end = start + len(match.group(1)) - 1
            if end < start:
                continue
            results.append(EmoteSpan(str(emote_id), start, end))
    return tuple(results)


def strip_credentials(text: str) -> str:
    """Mask OAuth tokens so a line can be logged safely."""
    for placeholder, pattern in _CREDENTIAL_PATTERNS:
        text = pattern.sub(f"{placeholder}<removed>", text)
    return text
