"""Tests for event catalog loading and basic integrity."""

from __future__ import annotations

from tmi_events.logs import event_templates, template_for


def test_event_templates_loads() -> None:
    templates = event_templates()
    assert templates, "event templates should not be empty"
    assert ("irc", "parse_failed") in templates
    assert all(isinstance(text, str) and text for text in templates.values())


def test_event_templates_is_cached() -> None:
    assert event_templates() is event_templates()


def test_template_for_hit_and_miss() -> None:
    assert template_for("irc", "frame_processed") == (
        "Processed {lines} line(s) with {failures} failure(s)"
    )
    assert template_for("irc", "no_such_event") is None
    assert template_for("nowhere", "parse_failed") is None


def test_every_logged_irc_event_has_a_template() -> None:
    for action in (
        "raw",
        "parse_failed",
        "line_ignored",
        "malformed_channel",
        "invalid_emote_pattern",
        "unknown_msgid",
        "frame_processed",
        "handler_error",
        "synthesized",
    ):
        assert template_for("irc", action) is not None, action
