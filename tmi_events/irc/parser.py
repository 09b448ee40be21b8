"""Line router: matches TMI lines against a table of command grammars.

Each grammar is data: the command it produces, the token(s) it is keyed on
(the command word or numeric reply code, or the first token for PING), a
regex with named captures and an optional post-processing hook. Capture names
carry their meaning:

- ``channel`` is parsed into a ChannelLocator
- ``user`` is reduced to a login and becomes ``ParsedMessage.user``
- ``sender`` / ``recipient`` are reduced to logins and kept as fields
- ``message`` becomes ``ParsedMessage.message``
- every other non-empty capture is kept in ``ParsedMessage.fields``

Wire problems never raise: unmatched lines come back as ParseFailure.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from ..logs.logger import logger
from .classifier import classify_usernotice
from .fields import parse_channel, parse_user, strip_credentials
from .flags import apply_badge_flags, decode_tags
from .metrics import MetricsSink
from .models import ChannelLocator, CommandKind, ParsedMessage, ParseFailure, TagValue

ACTION_PREFIX = "\x01ACTION "

_LOGIN_GROUPS = ("sender", "recipient")
_FRAME_SPLIT_RE = re.compile(r"\r?\n")


@dataclass(slots=True)
class _Draft:
    tags: dict[str, TagValue]
    channel: ChannelLocator | None = None
    user: str | None = None
    message: str | None = None
    fields: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Grammar:
    command: CommandKind
    keys: tuple[str, ...]
    pattern: re.Pattern[str]
    post: Callable[[_Draft], None] | None = None


def _ack(draft: _Draft) -> None:
    draft.fields["operation"] = "CAP"
    draft.fields["flags"] = tuple(str(draft.fields.get("flags", "")).split())


def _names(draft: _Draft) -> None:
    draft.fields["usernames"] = tuple(str(draft.fields.get("usernames", "")).split())


def _privmsg(draft: _Draft) -> None:
    message = draft.message or ""
    if message.startswith(ACTION_PREFIX):
        draft.fields["action"] = True
        draft.message = message.strip("\x01").removeprefix("ACTION ")
    else:
        draft.fields["action"] = False


def _whisper(draft: _Draft) -> None:
    draft.user = draft.fields.get("sender")  # type: ignore[assignment]


def _userstate(draft: _Draft) -> None:
    name = draft.tags.get("display-name")
    draft.fields["username"] = None if name is None else str(name)


def _usernotice(draft: _Draft) -> None:
    draft.fields["sub_kind"] = classify_usernotice(draft.tags)


def _hosttarget(draft: _Draft) -> None:
    target = draft.fields.pop("target", None)
    draft.user = None if target == "-" else str(target)
    viewers = str(draft.fields.get("viewers", ""))
    draft.fields["viewers"] = int(viewers) if viewers.isdigit() else None


def _g(
    command: CommandKind,
    keys: str | tuple[str, ...],
    pattern: str,
    post: Callable[[_Draft], None] | None = None,
) -> Grammar:
    if isinstance(keys, str):
        keys = (keys,)
    return Grammar(command, keys, re.compile(pattern), post)


_TOPIC_CODES = tuple(f"00{n}" for n in range(1, 10)) + ("372",)

# Priority order matters only between grammars sharing a key.
GRAMMARS: tuple[Grammar, ...] = (
    _g(CommandKind.PING, "PING", r"^PING :?(?P<server>\S*)$"),
    _g(CommandKind.ACK, "CAP", r"^:(?P<server>\S+) CAP \* ACK :(?P<flags>.*)$", _ack),
    _g(
        CommandKind.TOPIC,
        _TOPIC_CODES,
        r"^:(?P<server>\S+) (?P<code>00[1-9]|372) (?P<username>\S+) :(?P<message>.*)$",
    ),
    _g(
        CommandKind.OTHER,
        ("375", "376", "366"),
        r"^:(?P<server>\S+) (?P<code>37[56]|366) (?P<username>\S+)(?: :(?P<message>.*))?$",
    ),
    _g(
        CommandKind.NAMES,
        "353",
        r"^:(?P<user>\S+) 353 (?P<username>\S+) (?P<mode>\S+) (?P<channel>#\S+) :(?P<usernames>.*)$",
        _names,
    ),
    _g(CommandKind.JOIN, "JOIN", r"^:(?P<user>\S+) JOIN (?P<channel>#\S+)$"),
    _g(CommandKind.PART, "PART", r"^:(?P<user>\S+) PART (?P<channel>#\S+)$"),
    _g(
        CommandKind.MODE,
        "MODE",
        r"^:(?P<sender>\S+) MODE (?P<channel>#\S+) (?P<modeflag>[+-]\w) (?P<user>\S+)$",
    ),
    _g(
        CommandKind.PRIVMSG,
        "PRIVMSG",
        r"^:(?P<user>\S+) PRIVMSG (?P<channel>#\S+) :(?P<message>.*)$",
        _privmsg,
    ),
    _g(
        CommandKind.WHISPER,
        "WHISPER",
        r"^:(?P<sender>\S+) WHISPER (?P<recipient>\S+) :(?P<message>.*)$",
        _whisper,
    ),
    _g(
        CommandKind.USERSTATE,
        "USERSTATE",
        r"^:(?P<server>\S+) USERSTATE (?P<channel>#\S+)$",
        _userstate,
    ),
    _g(CommandKind.ROOMSTATE, "ROOMSTATE", r"^:(?P<server>\S+) ROOMSTATE (?P<channel>#\S+)$"),
    _g(
        CommandKind.USERNOTICE,
        "USERNOTICE",
        r"^:(?P<server>\S+) USERNOTICE (?P<channel>#\S+)(?: :(?P<message>.*))?$",
        _usernotice,
    ),
    _g(
        CommandKind.GLOBALUSERSTATE,
        "GLOBALUSERSTATE",
        r"^:(?P<server>\S+) GLOBALUSERSTATE\s*$",
        _userstate,
    ),
    _g(
        CommandKind.CLEARCHAT,
        "CLEARCHAT",
        r"^:(?P<server>\S+) CLEARCHAT (?P<channel>#\S+)(?: :(?P<user>.*))?$",
    ),
    _g(
        CommandKind.CLEARMSG,
        "CLEARMSG",
        r"^:(?P<server>\S+) CLEARMSG (?P<channel>#\S+) :(?P<message>.*)$",
    ),
    _g(
        CommandKind.HOSTTARGET,
        "HOSTTARGET",
        r"^:(?P<server>\S+) HOSTTARGET (?P<channel>#\S+) :(?P<target>\S+)(?: (?P<viewers>\S+))?$",
        _hosttarget,
    ),
    _g(
        CommandKind.NOTICE,
        "NOTICE",
        r"^:(?P<server>\S+) NOTICE (?P<channel>\S+) :(?P<message>.*)$",
    ),
    _g(
        CommandKind.ERROR,
        "421",
        r"^:(?P<server>\S+) (?P<code>421) (?P<user>\S+) (?P<command>\S+) :(?P<message>.*)$",
    ),
    _g(CommandKind.RECONNECT, "RECONNECT", r"^:(?P<server>\S+) RECONNECT$"),
)

# List markers carrying a channel token (e.g. end of NAMES) and the server's
# PONG heartbeat reply. The bare 375/376/366 forms are routed as OTHER above.
IGNORE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^:\S+ (?:37[56]|366) \S+ #\S+ :.*$"),
    re.compile(r"^:\S+ PONG \S+(?: :.*)?$"),
)

_BY_KEY: dict[str, tuple[Grammar, ...]] = {}
for _grammar in GRAMMARS:
    for _key in _grammar.keys:
        _BY_KEY[_key] = _BY_KEY.get(_key, ()) + (_grammar,)


def _dispatch_key(body: str) -> str:
    parts = body.split(" ", 2)
    if parts[0] == "PING" or len(parts) < 2:
        return parts[0]
    return parts[1]


def _build(
    grammar: Grammar,
    match: re.Match[str],
    tags: dict[str, TagValue],
    metrics: MetricsSink | None,
) -> ParsedMessage:
    draft = _Draft(tags=tags)
    for name, value in match.groupdict().items():
        if name == "channel":
            draft.channel = parse_channel(value, metrics)
        elif name == "user":
            draft.user = parse_user(value) if value else None
        elif name == "message":
            draft.message = value
        elif name in _LOGIN_GROUPS:
            draft.fields[name] = parse_user(value)
        elif value is not None:
            draft.fields[name] = value
    if grammar.post is not None:
        grammar.post(draft)
    if draft.tags.get("badges"):
        draft.tags = apply_badge_flags(draft.tags)
    return ParsedMessage(
        command=grammar.command,
        tags=draft.tags,
        channel=draft.channel,
        user=draft.user,
        message=draft.message,
        fields=draft.fields,
    )


def split_tags(line: str) -> tuple[str | None, str]:
    """Split ``@tags rest`` into the tag block (without '@') and the rest."""
    if not line.startswith("@"):
        return None, line
    block, _, rest = line.partition(" ")
    return block[1:], rest


def route(
    line: str, metrics: MetricsSink | None = None
) -> ParsedMessage | ParseFailure | None:
    """Parse one line.

    Returns:
        ParsedMessage on success, None for a known ignorable line, or a
        ParseFailure (already reported) when nothing matched.
    """
    line = line.rstrip("\r\n")
    if not line.strip():
        return None
    block, body = split_tags(line)
    tags = decode_tags(block, metrics) if block is not None else {}

    for grammar in _BY_KEY.get(_dispatch_key(body), ()):
        match = grammar.pattern.match(body)
        if match is None:
            continue
        if metrics is not None:
            metrics.record_command(grammar.command.value)
        return _build(grammar, match, tags, metrics)

    if any(pattern.match(body) for pattern in IGNORE_PATTERNS):
        logger.log_event("irc", "line_ignored", level=logging.DEBUG)
        return None

    safe_line = strip_credentials(line)
    logger.log_event("irc", "parse_failed", level=logging.WARNING, line=safe_line)
    if metrics is not None:
        metrics.record_failure("unknown_grammar", safe_line)
    return ParseFailure(line=line)


def split_frame(data: str) -> list[str]:
    """Split a frame into its non-blank lines, preserving order."""
    return [line for line in _FRAME_SPLIT_RE.split(data) if line.strip()]


def route_frame(
    data: str, metrics: MetricsSink | None = None
) -> Iterator[tuple[str, ParsedMessage | ParseFailure | None]]:
    """Route every line of a frame in arrival order.

    A line that fails to parse is yielded as a ParseFailure and the following
    lines are still processed.
    """
    for line in split_frame(data):
        yield line, route(line, metrics)
