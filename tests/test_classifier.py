"""Tests for USERNOTICE classification and sub detail extraction."""

import pytest

from tmi_events.irc.classifier import (
    classify_usernotice,
    extract_sub_details,
    plan_name,
)
from tmi_events.irc.models import CommandKind, SubKind


@pytest.mark.parametrize(
    "msg_id,kind",
    [
        ("sub", SubKind.SUB),
        ("resub", SubKind.RESUB),
        ("subgift", SubKind.GIFTSUB),
        ("anonsubgift", SubKind.ANONGIFTSUB),
        ("submysterygift", SubKind.MYSTERYGIFT),
        ("rewardgift", SubKind.REWARDGIFT),
        ("giftpaidupgrade", SubKind.GIFTUPGRADE),
        ("primepaidupgrade", SubKind.PRIMEUPGRADE),
        ("anongiftpaidupgrade", SubKind.ANONGIFTUPGRADE),
        ("raid", SubKind.RAID),
        ("ritual", SubKind.RITUAL),
        ("bitsbadgetier", SubKind.OTHERUSERNOTICE),
        ("somethingpaidupgrade", SubKind.OTHERUSERNOTICE),
    ],
)
def test_classify_usernotice(msg_id, kind):
    assert classify_usernotice({"msg-id": msg_id}) is kind


def test_classify_without_msg_id():
    assert classify_usernotice({"login": "ronni"}) is None


def test_sub_kind_maps_to_command():
    assert SubKind.GIFTSUB.command is CommandKind.GIFTSUB
    assert SubKind.ANONGIFTSUB.is_gift
    assert not SubKind.RAID.is_subscription


@pytest.mark.parametrize(
    "plan,name",
    [("Prime", "Twitch Prime"), ("1000", "Tier 1"), (2000, "Tier 2"), ("3000", "Tier 3"), ("9", '"9"')],
)
def test_plan_name(plan, name):
    assert plan_name(plan) == name


def test_plan_name_missing():
    assert plan_name(None) is None


def test_resub_details():
    details = extract_sub_details(
        SubKind.RESUB,
        {
            "login": "ronni",
            "msg-param-cumulative-months": 12,
            "msg-param-streak-months": 3,
            "msg-param-should-share-streak": 1,
            "msg-param-sub-plan": 1000,
            "msg-param-sub-plan-name": "Channel Subscription (dallas)",
        },
    )
    assert details.user == "ronni"
    assert details.gifting_user is None
    assert details.cumulative_months == 12
    assert details.months is None
    assert details.streak_months == 3
    assert details.share_streak is True
    assert details.plan_id == "1000"
    assert details.plan == "Tier 1"
    assert details.plan_name == "Channel Subscription (dallas)"
    assert details.anonymous is False


def test_months_falls_back_to_legacy_tag():
    details = extract_sub_details(SubKind.SUB, {"login": "ronni", "msg-param-months": 4})
    assert details.months == 4


def test_gift_details_swap_user_and_gifter():
    details = extract_sub_details(
        SubKind.GIFTSUB,
        {
            "login": "tww2",
            "msg-param-recipient-user-name": "mr_woodchuck",
            "msg-param-recipient-display-name": "Mr_Woodchuck",
            "msg-param-recipient-id": 55554444,
            "msg-param-months": 1,
        },
    )
    assert details.user == "mr_woodchuck"
    assert details.gifting_user == "tww2"
    assert details.recipient == "mr_woodchuck"
    assert details.recipient_name == "Mr_Woodchuck"
    assert details.recipient_id == "55554444"
    assert details.months == 1
    assert details.anonymous is False


def test_anonymous_gift():
    anon = extract_sub_details(SubKind.ANONGIFTSUB, {"msg-param-recipient-user-name": "fred"})
    assert anon.anonymous is True
    assert anon.user == "fred"
    via_login = extract_sub_details(
        SubKind.GIFTSUB,
        {"login": "ananonymousgifter", "msg-param-recipient-user-name": "fred"},
    )
    assert via_login.anonymous is True


def test_gift_upgrade_sender():
    details = extract_sub_details(
        SubKind.GIFTUPGRADE, {"login": "ronni", "msg-param-sender-login": "fred"}
    )
    assert details.user == "ronni"
    assert details.gifting_user == "fred"


def test_mystery_gift_count():
    details = extract_sub_details(
        SubKind.MYSTERYGIFT, {"login": "ronni", "msg-param-mass-gift-count": 5}
    )
    assert details.gift_count == 5


def test_raid_details():
    details = extract_sub_details(
        SubKind.RAID,
        {
            "login": "testchannel",
            "msg-param-login": "testchannel",
            "msg-param-displayName": "TestChannel",
            "msg-param-viewerCount": 15,
        },
    )
    assert details.user == "testchannel"
    assert details.raider == "TestChannel"
    assert details.viewer_count == 15


def test_new_chatter_ritual():
    details = extract_sub_details(
        SubKind.RITUAL, {"login": "seventoes", "msg-param-ritual-name": "new_chatter"}
    )
    assert details.ritual_name == "new_chatter"
    assert details.is_new_chatter
    other = extract_sub_details(SubKind.RITUAL, {"msg-param-ritual-name": "something"})
    assert not other.is_new_chatter
