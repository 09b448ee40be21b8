"""Shared IRC data models (packaged)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from enum import Enum
from types import MappingProxyType
from typing import Union


class CommandKind(Enum):
    # Protocol commands
    PING = "PING"
    ACK = "ACK"
    TOPIC = "TOPIC"
    NAMES = "NAMES"
    JOIN = "JOIN"
    PART = "PART"
    MODE = "MODE"
    PRIVMSG = "PRIVMSG"
    WHISPER = "WHISPER"
    USERSTATE = "USERSTATE"
    ROOMSTATE = "ROOMSTATE"
    USERNOTICE = "USERNOTICE"
    GLOBALUSERSTATE = "GLOBALUSERSTATE"
    CLEARCHAT = "CLEARCHAT"
    CLEARMSG = "CLEARMSG"
    HOSTTARGET = "HOSTTARGET"
    NOTICE = "NOTICE"
    RECONNECT = "RECONNECT"
    # Derived event kinds
    CHAT = "CHAT"
    SUB = "SUB"
    RESUB = "RESUB"
    GIFTSUB = "GIFTSUB"
    ANONGIFTSUB = "ANONGIFTSUB"
    MYSTERYGIFT = "MYSTERYGIFT"
    REWARDGIFT = "REWARDGIFT"
    GIFTUPGRADE = "GIFTUPGRADE"
    PRIMEUPGRADE = "PRIMEUPGRADE"
    ANONGIFTUPGRADE = "ANONGIFTUPGRADE"
    RAID = "RAID"
    RITUAL = "RITUAL"
    OTHERUSERNOTICE = "OTHERUSERNOTICE"
    # Lifecycle and catch-all pseudo-commands
    OPEN = "OPEN"
    CLOSE = "CLOSE"
    MESSAGE = "MESSAGE"
    ERROR = "ERROR"
    OTHER = "OTHER"


class SubKind(Enum):
    SUB = "SUB"
    RESUB = "RESUB"
    GIFTSUB = "GIFTSUB"
    ANONGIFTSUB = "ANONGIFTSUB"
    MYSTERYGIFT = "MYSTERYGIFT"
    REWARDGIFT = "REWARDGIFT"
    GIFTUPGRADE = "GIFTUPGRADE"
    PRIMEUPGRADE = "PRIMEUPGRADE"
    ANONGIFTUPGRADE = "ANONGIFTUPGRADE"
    RAID = "RAID"
    RITUAL = "RITUAL"
    OTHERUSERNOTICE = "OTHERUSERNOTICE"

    @property
    def command(self) -> CommandKind:
        """The event command a SubEvent of this kind is dispatched as."""
        return CommandKind[self.name]

    @property
    def is_gift(self) -> bool:
        return self in (SubKind.GIFTSUB, SubKind.ANONGIFTSUB)

    @property
    def is_subscription(self) -> bool:
        return self in (SubKind.SUB, SubKind.RESUB, SubKind.GIFTSUB, SubKind.ANONGIFTSUB)


GLOBAL_CHANNEL = "GLOBAL"

# Login name taken from a nick!user@host token
UserRef = str


@dataclass(frozen=True, slots=True)
class ChannelLocator:
    name: str
    room: str | None = None
    room_id: str | None = None

    @property
    def is_global(self) -> bool:
        return self.name == GLOBAL_CHANNEL


@dataclass(frozen=True, slots=True)
class BadgeEntry:
    name: str
    revision: str = ""


@dataclass(frozen=True, slots=True)
class EmoteSpan:
    """Emote occurrence; ``end`` is inclusive, as on the wire."""

    emote_id: str | None
    start: int
    end: int


TagValue = Union[
    str, int, None, tuple[BadgeEntry, ...], tuple[EmoteSpan, ...], tuple[int, ...]
]
TagMap = Mapping[str, TagValue]

_EMPTY: Mapping[str, object] = MappingProxyType({})


def _freeze(mapping: Mapping[str, object] | None) -> Mapping[str, object]:
    if not mapping:
        return _EMPTY
    if isinstance(mapping, MappingProxyType):
        return mapping
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True, slots=True)
class ParsedMessage:
    command: CommandKind
    tags: TagMap = dataclass_field(default_factory=lambda: _EMPTY)
    channel: ChannelLocator | None = None
    user: UserRef | None = None
    message: str | None = None
    fields: Mapping[str, object] = dataclass_field(default_factory=lambda: _EMPTY)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", _freeze(self.tags))
        object.__setattr__(self, "fields", _freeze(self.fields))

    def field(self, key: str, default: object = None) -> object:
        return self.fields.get(key, default)


@dataclass(frozen=True, slots=True)
class ParseFailure:
    line: str
    reason: str = "unknown_grammar"
