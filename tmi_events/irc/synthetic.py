"""Synthetic chat events for the client's own outgoing messages.

The server does not echo our PRIVMSGs back, so a ChatEvent is built locally
from session state. The event is serialized to a wire line and its tags are
decoded from that line, so it has exactly the shape a server delivery has.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import SYNTHETIC_TAG
from ..errors.internal import SessionStateError
from ..logs.logger import logger
from .events import ChatEvent
from .fields import (
    format_channel,
    format_user,
    parse_badges,
    parse_channel,
    parse_user,
    scan_emotes,
)
from .flags import apply_badge_flags, decode_tags, encode_tags
from .models import BadgeEntry, ChannelLocator, CommandKind, ParsedMessage, TagValue

ACTION_COMMAND = "/me "


def _coerce_badges(value: Any) -> tuple[tuple[str, str], ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = parse_badges(value)
    pairs = []
    for badge in value:
        if isinstance(badge, BadgeEntry):
            pairs.append((badge.name, badge.revision))
        else:
            name, revision = badge
            pairs.append((str(name), str(revision)))
    return tuple(pairs)


class ChannelUserState(BaseModel):
    """Our own state in one channel, as last reported by USERSTATE/ROOMSTATE.

    Attributes:
        badges: Badge list in wire order.
        badge_info: Badge metadata (e.g. subscriber months).
        color: Chat color.
        display_name: Display name in this channel.
        mod, subscriber, vip, broadcaster: Status flags.
        room_id: Numeric room id of the channel.
    """

    model_config = ConfigDict(frozen=True)

    badges: tuple[tuple[str, str], ...] = ()
    badge_info: tuple[tuple[str, str], ...] = ()
    color: str | None = None
    display_name: str | None = None
    mod: bool = False
    subscriber: bool = False
    vip: bool = False
    broadcaster: bool = False
    room_id: str | None = None

    @field_validator("badges", "badge_info", mode="before")
    @classmethod
    def validate_badges(cls, v: Any) -> tuple[tuple[str, str], ...]:
        return _coerce_badges(v)

    @field_validator("room_id", mode="before")
    @classmethod
    def validate_room_id(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @classmethod
    def from_tags(
        cls, tags: Mapping[str, TagValue], room_id: object = None
    ) -> ChannelUserState:
        """Build from the tag map of a parsed USERSTATE line."""
        badges = _coerce_badges(tags.get("badges"))
        names = {name for name, _ in badges}
        return cls(
            badges=badges,
            badge_info=_coerce_badges(tags.get("badge-info")),
            color=None if tags.get("color") is None else str(tags.get("color")),
            display_name=(
                None if tags.get("display-name") is None else str(tags.get("display-name"))
            ),
            mod=bool(tags.get("mod")),
            subscriber=bool(tags.get("subscriber")),
            vip="vip" in names,
            broadcaster="broadcaster" in names,
            room_id=room_id if room_id is not None else tags.get("room-id"),
        )

    def layered_badges(self) -> tuple[BadgeEntry, ...]:
        """Badge list with the status flags represented as badges."""
        badges = [BadgeEntry(name, revision) for name, revision in self.badges]
        names = {b.name for b in badges}
        if self.broadcaster and "broadcaster" not in names:
            badges.insert(0, BadgeEntry("broadcaster", "1"))
        elif self.mod and not ({"moderator", "broadcaster"} & names):
            badges.insert(0, BadgeEntry("moderator", "1"))
        if self.vip and "vip" not in names:
            badges.append(BadgeEntry("vip", "1"))
        if self.subscriber and "subscriber" not in names:
            badges.append(BadgeEntry("subscriber", "0"))
        return tuple(badges)


class SessionState(BaseModel):
    """Read-only view of the session state owned by the connection layer.

    Attributes:
        login: Our login name.
        display_name: Global display name (GLOBALUSERSTATE).
        user_id: Our numeric user id.
        channels: Per-channel state keyed by formatted channel string.
        emotes: Emotes we may use, ``{emote_id: emote_name}``.
    """

    model_config = ConfigDict(frozen=True)

    login: str | None = None
    display_name: str | None = None
    user_id: str | None = None
    channels: dict[str, ChannelUserState] = Field(default_factory=dict)
    emotes: dict[str, str] = Field(default_factory=dict)

    @field_validator("user_id", mode="before")
    @classmethod
    def validate_user_id(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @field_validator("channels", mode="before")
    @classmethod
    def validate_channels(cls, v: Any) -> dict[str, Any]:
        if not isinstance(v, Mapping):
            raise ValueError("channels must be a mapping")
        return {
            format_channel(parse_channel(k) if isinstance(k, str) else k): state
            for k, state in v.items()
        }

    @field_validator("emotes", mode="before")
    @classmethod
    def validate_emotes(cls, v: Any) -> dict[str, str]:
        if not isinstance(v, Mapping):
            raise ValueError("emotes must be a mapping")
        return {str(k): str(name) for k, name in v.items()}

    def channel_state(self, channel: ChannelLocator) -> ChannelUserState:
        key = format_channel(channel)
        state = self.channels.get(key)
        if state is None:
            raise SessionStateError(
                f"No user state known for channel {key}", data={"channel": key}
            )
        return state


def build_chat_event(
    channel: ChannelLocator | str,
    message: str,
    session_state: SessionState,
    *,
    now: float | None = None,
    message_id: str | None = None,
) -> ChatEvent:
    """Build the ChatEvent the server would have delivered for ``message``.

    Args:
        channel: Target channel.
        message: Outgoing text; a leading ``/me `` becomes a CTCP ACTION.
        session_state: Our current state; never modified.
        now: Send time in epoch seconds (defaults to the current time).
        message_id: Message id to use instead of a random UUID.

    Raises:
        SessionStateError: The session has no state for ``channel`` or no
            display name to send as.
    """
    # Normalized the way the server echoes it back
    channel = parse_channel(format_channel(channel))
    state = session_state.channel_state(channel)
    display_name = state.display_name or session_state.display_name or session_state.login
    if not display_name:
        raise SessionStateError(
            "Session state has no display name", data={"channel": channel.name}
        )

    action = message.startswith(ACTION_COMMAND)
    body = message.removeprefix(ACTION_COMMAND) if action else message
    wire_message = f"\x01ACTION {body}\x01" if action else body

    badges = state.layered_badges()
    names = {b.name for b in badges}
    sent_ts = now if now is not None else time.time()
    tags: dict[str, object] = {
        "badge-info": tuple(BadgeEntry(n, r) for n, r in state.badge_info),
        "badges": badges,
        "color": state.color,
        "display-name": display_name,
        "emotes": scan_emotes(body, session_state.emotes.items()),
        "id": message_id or str(uuid.uuid4()),
        "mod": 1 if ({"moderator", "broadcaster"} & names) else 0,
        "subscriber": 1 if "subscriber" in names else 0,
    }
    if "vip" in names:
        tags["vip"] = 1
    if "broadcaster" in names:
        tags["broadcaster"] = 1
    tags.update(
        {
            "room-id": state.room_id,
            "tmi-sent-ts": int(sent_ts * 1000),
            "turbo": 0,
            "user-id": session_state.user_id,
            "user-type": None,
            SYNTHETIC_TAG: 1,
        }
    )

    tag_block = encode_tags(tags)
    useruri = format_user(display_name)
    raw_line = f"{tag_block} {useruri} PRIVMSG {format_channel(channel)} :{wire_message}"

    # Decode what was encoded so values have exactly the wire-derived types
    decoded = apply_badge_flags(decode_tags(tag_block))
    parsed = ParsedMessage(
        command=CommandKind.PRIVMSG,
        tags=decoded,
        channel=channel,
        user=parse_user(useruri),
        message=body,
        fields={"action": action},
    )
    event = ChatEvent(raw_line, parsed)
    logger.log_event(
        "irc",
        "synthesized",
        level=logging.DEBUG,
        event_id=event.id,
        channel=channel.name,
    )
    return event
