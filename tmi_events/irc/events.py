"""Typed, immutable events built from parsed lines."""

from __future__ import annotations

from ..constants import SYNTHETIC_TAG
from ..errors.internal import UnknownCommandError
from .classifier import SubDetails, classify_usernotice, extract_sub_details
from .fields import format_channel
from .models import (
    BadgeEntry,
    ChannelLocator,
    CommandKind,
    EmoteSpan,
    ParsedMessage,
    SubKind,
    TagValue,
)


def _coerce_command(command: object) -> CommandKind:
    if isinstance(command, CommandKind):
        return command
    if isinstance(command, str):
        try:
            return CommandKind[command.upper()]
        except KeyError:
            raise UnknownCommandError(command) from None
    raise UnknownCommandError(command)


class TwitchEvent:
    """Base event: a command, the raw line it came from, and the parse result."""

    __slots__ = ("_command", "_raw_line", "_parsed")

    def __init__(
        self,
        command: CommandKind | str,
        raw_line: str | None = None,
        parsed: ParsedMessage | None = None,
    ) -> None:
        kind = _coerce_command(command)
        object.__setattr__(self, "_command", kind)
        object.__setattr__(self, "_raw_line", raw_line or "")
        object.__setattr__(self, "_parsed", parsed or ParsedMessage(kind))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (self._command, self._raw_line, self._parsed) == (
            other._command,  # type: ignore[attr-defined]
            other._raw_line,  # type: ignore[attr-defined]
            other._parsed,  # type: ignore[attr-defined]
        )

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._command, self._raw_line))

    def __repr__(self) -> str:
        return f"{type(self).__name__}<{self._command.value}>({self._raw_line!r})"

    @property
    def command(self) -> CommandKind:
        return self._command

    @property
    def raw_line(self) -> str:
        return self._raw_line

    @property
    def parsed(self) -> ParsedMessage:
        return self._parsed

    @property
    def values(self):
        return self._parsed.fields

    def field(self, key: str, default: object = None) -> object:
        return self._parsed.field(key, default)

    @property
    def channel(self) -> ChannelLocator | None:
        return self._parsed.channel

    @property
    def channel_string(self) -> str | None:
        if self._parsed.channel is None:
            return None
        return format_channel(self._parsed.channel)

    @property
    def message(self) -> str | None:
        return self._parsed.message

    @property
    def user(self) -> str | None:
        return self._parsed.user

    @property
    def tags(self):
        return self._parsed.tags

    def tag(self, key: str, default: TagValue = None) -> TagValue:
        return self._parsed.tags.get(key, default)

    def has_tag(self, key: str) -> bool:
        return key in self._parsed.tags

    @property
    def name(self) -> str | None:
        """Display name, falling back to the login."""
        display = self.tag("display-name")
        return str(display) if display is not None else self.user

    @property
    def notice_msgid(self) -> str | None:
        msg_id = self.tag("msg-id")
        return None if msg_id is None else str(msg_id)

    @property
    def notice_class(self) -> str | None:
        """Leading word of the msg-id (``msg_banned`` -> ``msg``)."""
        msg_id = self.notice_msgid
        return None if msg_id is None else msg_id.split("_", 1)[0]

    @property
    def is_synthesized(self) -> bool:
        return bool(self.tag(SYNTHETIC_TAG))


class ChatEvent(TwitchEvent):
    """A chat message (PRIVMSG), either received or built locally."""

    __slots__ = ()

    def __init__(self, raw_line: str, parsed: ParsedMessage) -> None:
        super().__init__(CommandKind.CHAT, raw_line, parsed)

    @property
    def id(self) -> str | None:
        msg_id = self.tag("id")
        return None if msg_id is None else str(msg_id)

    @property
    def badges(self) -> tuple[BadgeEntry, ...]:
        return self.tag("badges") or ()  # type: ignore[return-value]

    @property
    def badge_info(self) -> tuple[BadgeEntry, ...]:
        return self.tag("badge-info") or ()  # type: ignore[return-value]

    def has_badge(self, badge: str, rev: object = None) -> bool:
        """First badge named ``badge`` wins; ``rev`` must match when given."""
        for entry in self.badges:
            if entry.name == badge:
                return rev is None or entry.revision == str(rev)
        return False

    @property
    def is_caster(self) -> bool:
        return self.has_badge("broadcaster")

    @property
    def is_mod(self) -> bool:
        return bool(self.tag("mod")) or self.has_badge("moderator") or self.is_caster

    @property
    def is_sub(self) -> bool:
        return bool(self.tag("subscriber")) or self.has_badge("subscriber")

    @property
    def is_vip(self) -> bool:
        return self.has_badge("vip")

    @property
    def is_staff(self) -> bool:
        return self.has_badge("staff")

    @property
    def sub_months(self) -> int:
        for entry in self.badge_info:
            if entry.name == "subscriber":
                return int(entry.revision) if entry.revision.isdigit() else 0
        return 0

    @property
    def bits(self) -> int:
        bits = self.tag("bits")
        return bits if isinstance(bits, int) else 0

    @property
    def is_action(self) -> bool:
        return bool(self.field("action", False))

    @property
    def color(self) -> str | None:
        color = self.tag("color")
        return None if color is None else str(color)

    @property
    def user_id(self) -> str | None:
        user_id = self.tag("user-id")
        return None if user_id is None else str(user_id)

    @property
    def emotes(self) -> tuple[EmoteSpan, ...]:
        return self.tag("emotes") or ()  # type: ignore[return-value]


class SubEvent(TwitchEvent):
    """A classified USERNOTICE: subscriptions, gifts, upgrades, raids, rituals."""

    __slots__ = ("_details",)

    def __init__(self, kind: SubKind, raw_line: str, parsed: ParsedMessage) -> None:
        super().__init__(kind.command, raw_line, parsed)
        object.__setattr__(self, "_details", extract_sub_details(kind, parsed.tags))

    @classmethod
    def from_parsed(cls, raw_line: str, parsed: ParsedMessage) -> SubEvent | None:
        kind = parsed.field("sub_kind") or classify_usernotice(parsed.tags)
        if not isinstance(kind, SubKind):
            return None
        return cls(kind, raw_line, parsed)

    @property
    def details(self) -> SubDetails:
        return self._details

    @property
    def kind(self) -> SubKind:
        return self._details.kind

    @property
    def user(self) -> str | None:
        return self._details.user

    @property
    def gifting_user(self) -> str | None:
        return self._details.gifting_user

    @property
    def plan_id(self) -> str | None:
        return self._details.plan_id

    @property
    def plan(self) -> str | None:
        return self._details.plan

    @property
    def plan_name(self) -> str | None:
        return self._details.plan_name

    @property
    def months(self) -> int:
        return self._details.months or 0

    @property
    def cumulative_months(self) -> int:
        return self._details.cumulative_months or 0

    @property
    def streak_months(self) -> int:
        return self._details.streak_months or 0

    @property
    def share_streak(self) -> bool:
        return self._details.share_streak

    @property
    def anonymous(self) -> bool:
        return self._details.anonymous

    @property
    def recipient(self) -> str | None:
        return self._details.recipient

    @property
    def recipient_id(self) -> str | None:
        return self._details.recipient_id

    @property
    def recipient_name(self) -> str | None:
        return self._details.recipient_name

    @property
    def gift_count(self) -> int:
        return self._details.gift_count or 0

    @property
    def viewer_count(self) -> int:
        return self._details.viewer_count or 0

    @property
    def raider(self) -> str | None:
        return self._details.raider

    @property
    def ritual_name(self) -> str | None:
        return self._details.ritual_name

    @property
    def is_new_chatter(self) -> bool:
        return self._details.is_new_chatter


def events_for(raw_line: str, parsed: ParsedMessage) -> list[TwitchEvent]:
    """Events fired for one parsed line, in dispatch order.

    The command event and a MESSAGE event always come first, followed by a
    ChatEvent for PRIVMSG or a SubEvent for a recognized USERNOTICE kind.
    """
    events: list[TwitchEvent] = [
        TwitchEvent(parsed.command, raw_line, parsed),
        TwitchEvent(CommandKind.MESSAGE, raw_line, parsed),
    ]
    if parsed.command is CommandKind.PRIVMSG:
        events.append(ChatEvent(raw_line, parsed))
    elif parsed.command is CommandKind.USERNOTICE:
        kind = parsed.field("sub_kind")
        if isinstance(kind, SubKind) and kind is not SubKind.OTHERUSERNOTICE:
            events.append(SubEvent(kind, raw_line, parsed))
    return events


def lifecycle_event(command: CommandKind | str, **values: object) -> TwitchEvent:
    """OPEN / CLOSE / ERROR style events that have no raw line."""
    kind = _coerce_command(command)
    return TwitchEvent(kind, None, ParsedMessage(kind, fields=values))
