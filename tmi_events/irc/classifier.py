"""USERNOTICE classification.

USERNOTICE carries many distinct events (subs, gifts, raids, rituals, ...).
The kind is inferred from the ``msg-id`` tag, never from the command name.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from ..logs.logger import logger
from .models import SubKind, TagValue

MSG_ID_KINDS: dict[str, SubKind] = {
    "sub": SubKind.SUB,
    "resub": SubKind.RESUB,
    "subgift": SubKind.GIFTSUB,
    "anonsubgift": SubKind.ANONGIFTSUB,
    "raid": SubKind.RAID,
    "ritual": SubKind.RITUAL,
    "submysterygift": SubKind.MYSTERYGIFT,
    "rewardgift": SubKind.REWARDGIFT,
}

# Checked in order; "anongiftpaidupgrade" must not be read as "giftpaidupgrade"
UPGRADE_KINDS: tuple[tuple[str, SubKind], ...] = (
    ("giftpaidupgrade", SubKind.GIFTUPGRADE),
    ("primepaidupgrade", SubKind.PRIMEUPGRADE),
    ("anongiftpaidupgrade", SubKind.ANONGIFTUPGRADE),
)

PLAN_NAMES: dict[str, str] = {
    "Prime": "Twitch Prime",
    "1000": "Tier 1",
    "2000": "Tier 2",
    "3000": "Tier 3",
}

ANONYMOUS_GIFTER = "ananonymousgifter"
NEW_CHATTER_RITUAL = "new_chatter"


def classify_usernotice(tags: Mapping[str, TagValue]) -> SubKind | None:
    """Map the ``msg-id`` tag of a USERNOTICE to its SubKind.

    Returns None only when there is no ``msg-id``; any unrecognized value
    classifies as OTHERUSERNOTICE.
    """
    msg_id = tags.get("msg-id")
    if msg_id is None:
        return None
    msg_id = str(msg_id)
    kind = MSG_ID_KINDS.get(msg_id)
    if kind is not None:
        return kind
    if msg_id.endswith("paidupgrade"):
        for prefix, upgrade_kind in UPGRADE_KINDS:
            if msg_id.startswith(prefix):
                return upgrade_kind
    logger.log_event("irc", "unknown_msgid", level=logging.DEBUG, msg_id=msg_id)
    return SubKind.OTHERUSERNOTICE


def plan_name(plan_id: object) -> str | None:
    """Human readable name of a ``msg-param-sub-plan`` value."""
    if plan_id is None:
        return None
    raw = str(plan_id)
    return PLAN_NAMES.get(raw, f'"{raw}"')


def _str(value: TagValue) -> str | None:
    return None if value is None else str(value)


def _int(value: TagValue) -> int | None:
    return value if isinstance(value, int) else None


@dataclass(frozen=True, slots=True)
class SubDetails:
    kind: SubKind
    user: str | None = None
    gifting_user: str | None = None
    months: int | None = None
    cumulative_months: int | None = None
    streak_months: int | None = None
    share_streak: bool = False
    plan_id: str | None = None
    plan_name: str | None = None
    anonymous: bool = False
    recipient: str | None = None
    recipient_id: str | None = None
    recipient_name: str | None = None
    gift_count: int | None = None
    viewer_count: int | None = None
    raider: str | None = None
    ritual_name: str | None = None

    @property
    def plan(self) -> str | None:
        return plan_name(self.plan_id)

    @property
    def is_new_chatter(self) -> bool:
        return self.kind is SubKind.RITUAL and self.ritual_name == NEW_CHATTER_RITUAL


def extract_sub_details(kind: SubKind, tags: Mapping[str, TagValue]) -> SubDetails:
    """Pull the per-kind fields of a classified USERNOTICE out of its tags."""
    login = _str(tags.get("login"))
    recipient = _str(tags.get("msg-param-recipient-user-name"))
    months = _int(tags.get("msg-param-sub-months"))
    if months is None:
        months = _int(tags.get("msg-param-months"))

    user = login
    gifting_user = None
    if kind.is_gift:
        user = recipient
        gifting_user = login
    elif kind is SubKind.GIFTUPGRADE:
        gifting_user = _str(tags.get("msg-param-sender-login"))
    elif kind is SubKind.RAID:
        user = _str(tags.get("msg-param-login")) or login

    anonymous = kind in (SubKind.ANONGIFTSUB, SubKind.ANONGIFTUPGRADE) or (
        login == ANONYMOUS_GIFTER
    )

    return SubDetails(
        kind=kind,
        user=user,
        gifting_user=gifting_user,
        months=months,
        cumulative_months=_int(tags.get("msg-param-cumulative-months")),
        streak_months=_int(tags.get("msg-param-streak-months")),
        share_streak=bool(tags.get("msg-param-should-share-streak")),
        plan_id=_str(tags.get("msg-param-sub-plan")),
        plan_name=_str(tags.get("msg-param-sub-plan-name")),
        anonymous=anonymous,
        recipient=recipient,
        recipient_id=_str(tags.get("msg-param-recipient-id")),
        recipient_name=_str(tags.get("msg-param-recipient-display-name")),
        gift_count=_int(tags.get("msg-param-mass-gift-count")),
        viewer_count=_int(tags.get("msg-param-viewerCount")),
        raider=_str(tags.get("msg-param-displayName")),
        ritual_name=_str(tags.get("msg-param-ritual-name")),
    )
