"""Tests for the field interpreters (users, channels, badges, emotes)."""

import logging

import pytest

from tmi_events.irc.fields import (
    emote_to_regex,
    format_badges,
    format_channel,
    format_emote_sets,
    format_emote_tag,
    format_user,
    is_room,
    parse_badges,
    parse_channel,
    parse_emote_sets,
    parse_emote_tag,
    parse_user,
    scan_emotes,
    strip_credentials,
)
from tmi_events.irc.metrics import TagFrequencyCounter
from tmi_events.irc.models import GLOBAL_CHANNEL, BadgeEntry, ChannelLocator, EmoteSpan


class TestUsers:
    def test_parse_user_from_prefix(self):
        assert parse_user(":ronni!ronni@ronni.tmi.twitch.tv") == "ronni"

    def test_parse_user_without_colon_or_bang(self):
        assert parse_user("ronni") == "ronni"
        assert parse_user("ronni!x@y") == "ronni"

    def test_format_user_lowercases(self):
        assert format_user("Ronni") == ":ronni!ronni@ronni.tmi.twitch.tv"

    def test_format_user_parse_user_roundtrip(self):
        assert parse_user(format_user("someone")) == "someone"


class TestChannels:
    def test_simple_channel(self):
        assert parse_channel("#dallas") == ChannelLocator("#dallas")

    def test_missing_hash_is_prepended(self):
        assert parse_channel("dallas") == ChannelLocator("#dallas")

    def test_global_channel(self):
        assert parse_channel("*") == ChannelLocator(GLOBAL_CHANNEL)
        assert parse_channel("*").is_global
        assert format_channel(parse_channel("*")) == GLOBAL_CHANNEL

    def test_room_channel(self):
        loc = parse_channel("#chatrooms:44322889:04e762ec-ce8f-4cbc-b6a3-ffc871ab53da")
        assert loc.name == "#chatrooms"
        assert loc.room == "44322889"
        assert loc.room_id == "04e762ec-ce8f-4cbc-b6a3-ffc871ab53da"
        assert is_room(loc)
        assert not is_room(ChannelLocator("#dallas"))

    def test_malformed_channel_uses_first_part(self, caplog):
        counter = TagFrequencyCounter()
        with caplog.at_level(logging.WARNING):
            loc = parse_channel("#dallas:extra", counter)
        assert loc == ChannelLocator("#dallas")
        assert "not in expected format" in caplog.text
        assert len(caplog.records) == 1
        assert counter.failures["malformed_channel"] == 1
        assert counter.failed_lines == ["#dallas:extra"]

    @pytest.mark.parametrize(
        "token", ["#dallas", "#chatrooms:1:abc", "#under_score"]
    )
    def test_channel_roundtrip(self, token):
        assert format_channel(parse_channel(token)) == token

    def test_format_channel_lowercases_name(self):
        assert format_channel("#Dallas") == "#dallas"
        assert format_channel("#Chatrooms", "1", "abc") == "#chatrooms:1:abc"


def test_badges_roundtrip():
    value = "broadcaster/1,subscriber/3012,premium/1"
    badges = parse_badges(value)
    assert badges[0] == BadgeEntry("broadcaster", "1")
    assert [b.name for b in badges] == ["broadcaster", "subscriber", "premium"]
    assert format_badges(badges) == value


def test_format_badges_accepts_pairs():
    assert format_badges([("vip", 1), ("moderator", "1")]) == "vip/1,moderator/1"


def test_emote_tag_roundtrip():
    value = "25:0-4,12-16/1902:6-10"
    spans = parse_emote_tag(value)
    assert spans == (
        EmoteSpan("25", 0, 4),
        EmoteSpan("25", 12, 16),
        EmoteSpan("1902", 6, 10),
    )
    assert format_emote_tag(spans) == value


def test_emote_tag_skips_malformed_ranges():
    assert parse_emote_tag("25:a-b") == ()
    assert parse_emote_tag("nocolon") == ()
    assert parse_emote_tag("25:0-4,x/30:1-2") == (EmoteSpan("25", 0, 4), EmoteSpan("30", 1, 2))


def test_format_emote_tag_groups_by_id_and_drops_missing_ids():
    spans = [
        EmoteSpan("25", 0, 4),
        EmoteSpan(None, 5, 6),
        EmoteSpan("30", 8, 9),
        EmoteSpan("25", 11, 15),
    ]
    assert format_emote_tag(spans) == "25:0-4,11-15/30:8-9"


def test_emote_sets():
    assert parse_emote_sets("0,33,50,237") == (0, 33, 50, 237)
    assert format_emote_sets((0, 33)) == "0,33"


def test_scan_emotes_offsets():
    spans = scan_emotes("Kappa hello Kappa", [("25", "Kappa")])
    assert spans == (EmoteSpan("25", 0, 4), EmoteSpan("25", 12, 16))


def test_scan_emotes_requires_boundaries():
    assert scan_emotes("NotKappaHere", [("25", "Kappa")]) == ()


def test_scan_emotes_multiple_emotes():
    message = "hi Kappa PogChamp"
    spans = scan_emotes(message, [("25", "Kappa"), ("88", "PogChamp")])
    assert spans == (EmoteSpan("25", 3, 7), EmoteSpan("88", 9, 16))
    for span in spans:
        assert message[span.start : span.end + 1] in ("Kappa", "PogChamp")


def test_scan_emotes_skips_invalid_pattern():
    assert scan_emotes("hello (", [("1", "(")]) == ()


def test_emote_to_regex_boundaries():
    pattern = emote_to_regex("Kappa")
    assert pattern.search("a Kappa b")
    assert not pattern.search("aKappab")


def test_strip_credentials():
    assert strip_credentials("PASS oauth:abc123") == "PASS oauth:<removed>"
    assert (
        strip_credentials("Authorization: OAuth deadbeef")
        == "Authorization: OAuth <removed>"
    )
    assert strip_credentials("nothing secret") == "nothing secret"
