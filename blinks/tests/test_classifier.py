"""Tests for quick capture type detection."""

import pytest

from blinks.capture.classifier import detect_blink_type, remove_prefix
from blinks.common.schemas import BlinkType


class TestDetectBlinkType:
    def test_plain_text_is_thought(self):
        detected = detect_blink_type("Buy milk")
        assert detected.type == BlinkType.THOUGHT
        assert detected.content == "Buy milk"

    def test_text_is_trimmed(self):
        detected = detect_blink_type("   an idea for later  ")
        assert detected.content == "an idea for later"

    def test_empty_text_is_thought(self):
        detected = detect_blink_type("")
        assert detected.type == BlinkType.THOUGHT
        assert detected.content == ""

    @pytest.mark.parametrize("text", ["/r call mom tomorrow at 2pm", "r/ call mom tomorrow at 2pm"])
    def test_reminder_markers(self, text):
        detected = detect_blink_type(text)
        assert detected.type == BlinkType.REMINDER
        assert detected.content == "call mom tomorrow at 2pm"

    def test_reminder_marker_in_middle(self):
        detected = detect_blink_type("call mom /r tomorrow")
        assert detected.type == BlinkType.REMINDER
        assert detected.content == "call mom  tomorrow"

    @pytest.mark.parametrize("text", ["/b https://example.com", "b/ https://example.com"])
    def test_bookmark_markers(self, text):
        detected = detect_blink_type(text)
        assert detected.type == BlinkType.BOOKMARK
        assert detected.content == "https://example.com"

    def test_bookmark_marker_needs_no_space(self):
        detected = detect_blink_type("/bhttps://example.com")
        assert detected.type == BlinkType.BOOKMARK
        assert detected.content == "https://example.com"

    def test_quote_marker(self):
        detected = detect_blink_type("/q Stay hungry, stay foolish")
        assert detected.type == BlinkType.QUOTE
        assert detected.content == "Stay hungry, stay foolish"

    def test_reminder_wins_over_quote(self):
        detected = detect_blink_type("/r /q something")
        assert detected.type == BlinkType.REMINDER

    def test_trailing_reminder_marker_without_space_is_thought(self):
        # "/r " needs the trailing space; after trimming there is none
        detected = detect_blink_type("something /r")
        assert detected.type == BlinkType.THOUGHT

    def test_marker_inside_word_triggers_type(self):
        detected = detect_blink_type("read ab/c notes")
        assert detected.type == BlinkType.BOOKMARK


class TestRemovePrefix:
    def test_removes_slash_form(self):
        assert remove_prefix("/r buy bread", "/r") == "buy bread"

    def test_removes_reversed_form(self):
        assert remove_prefix("r/ buy bread", "/r") == "buy bread"

    def test_only_first_occurrence(self):
        assert remove_prefix("/q a /q b", "/q") == "a /q b"

    def test_no_marker_keeps_letters(self):
        assert remove_prefix("remember bread", "/r") == "remember bread"
