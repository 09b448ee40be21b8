"""Tag ("flag") decoding and encoding.

Tag values use a private escape encoding. A few keys carry structured values
(badge lists, emote ranges, emote set ids); every other value is unescaped and
turned into an int when it is entirely digits. Empty values decode to None.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from .fields import (
    format_badges,
    format_emote_sets,
    format_emote_tag,
    parse_badges,
    parse_emote_sets,
    parse_emote_tag,
)
from .metrics import MetricsSink
from .models import BadgeEntry, EmoteSpan, TagValue

# (escaped, raw) pairs
FLAG_ESCAPES: tuple[tuple[str, str], ...] = (
    ("\\\\", "\\"),
    ("\\s", " "),
    ("\\:", ";"),
    ("\\r", "\r"),
    ("\\n", "\n"),
)

_DECODE_MAP = {escaped[1]: raw for escaped, raw in FLAG_ESCAPES}
_ENCODE_MAP = {raw: escaped for escaped, raw in FLAG_ESCAPES}
_ENCODE_RE = re.compile("|".join(re.escape(raw) for _, raw in FLAG_ESCAPES))
_INTEGER_RE = re.compile(r"^[0-9]+$")

BADGE_KEYS = frozenset({"badges", "badge-info"})


def decode_escapes(value: str) -> str:
    """Replace escape sequences with the raw characters they stand for.

    Unknown escapes lose their backslash and a trailing lone backslash is
    dropped.
    """
    if "\\" not in value:
        return value
    out = []
    chars = iter(value)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, None)
        if nxt is None:
            break
        out.append(_DECODE_MAP.get(nxt, nxt))
    return "".join(out)


def encode_escapes(value: str) -> str:
    return _ENCODE_RE.sub(lambda m: _ENCODE_MAP[m.group(0)], value)


def decode_tag_value(key: str, value: str | None) -> TagValue:
    if not value:
        return None
    if key in BADGE_KEYS:
        return tuple(
            BadgeEntry(badge.name, decode_escapes(badge.revision))
            for badge in parse_badges(value)
        ) or None
    if key == "emotes":
        return parse_emote_tag(value) or None
    if key == "emote-sets":
        return parse_emote_sets(value) or None
    decoded = decode_escapes(value)
    if _INTEGER_RE.match(decoded):
        return int(decoded)
    return decoded


def encode_tag_value(value: object, key: str | None = None) -> str:
    """Encode a decoded tag value back to its escaped wire form."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return encode_escapes(value)
    items = tuple(value)  # type: ignore[arg-type]
    if key in BADGE_KEYS or (items and isinstance(items[0], BadgeEntry)):
        return format_badges(
            BadgeEntry(b.name, encode_escapes(str(b.revision)))
            if isinstance(b, BadgeEntry)
            else (b[0], encode_escapes(str(b[1])))
            for b in items
        )
    if key == "emotes" or (items and isinstance(items[0], EmoteSpan)):
        return format_emote_tag(items)
    return format_emote_sets(items)


def decode_tags(
    raw_tag_block: str, metrics: MetricsSink | None = None
) -> dict[str, TagValue]:
    """Decode ``@key=value;key;...`` (leading ``@`` optional) into a dict."""
    tags: dict[str, TagValue] = {}
    block = raw_tag_block.removeprefix("@")
    if not block:
        return tags
    for item in block.split(";"):
        if not item:
            continue
        key, sep, raw = item.partition("=")
        value = decode_tag_value(key, raw if sep else None)
        tags[key] = value
        if metrics is not None:
            metrics.record_tag(key, value)
    return tags


def encode_tags(tags: Mapping[str, object]) -> str:
    return "@" + ";".join(
        f"{key}={encode_tag_value(value, key)}" for key, value in tags.items()
    )


def apply_badge_flags(tags: Mapping[str, TagValue]) -> dict[str, TagValue]:
    """Return a copy of ``tags`` with flags implied by the badge list.

    A broadcaster badge implies broadcaster=1 and mod=1, a subscriber badge
    implies subscriber=1 and a moderator badge implies mod=1.
    """
    result = dict(tags)
    badges = result.get("badges") or ()
    for badge in badges:  # type: ignore[union-attr]
        if not isinstance(badge, BadgeEntry):
            continue
        if badge.name == "broadcaster":
            result["broadcaster"] = 1
            result["mod"] = 1
        elif badge.name == "subscriber":
            result["subscriber"] = 1
        elif badge.name == "moderator":
            result["mod"] = 1
    return result
