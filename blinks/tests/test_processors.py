"""
Tests for the per-type AI processors

The LLM is a Mock whose ``generate`` returns scripted answers in call order.
"""

import json
from datetime import datetime, timezone

import pytest
from unittest.mock import Mock

from blinks.capture.bookmarks import BookmarkProcessor, get_url_domain, is_valid_url
from blinks.capture.quotes import QuoteProcessor
from blinks.capture.reminders import ReminderProcessor, parse_reminder_date, shorten_title
from blinks.capture.thoughts import ThoughtProcessor
from blinks.common.errors import AIAccessError, ProcessingError, ValidationError
from blinks.common.llm_client import LLMClient


def no_sleep(seconds):
    pass


@pytest.fixture
def llm():
    client = Mock(spec=LLMClient)
    client.is_available = True
    return client


@pytest.fixture
def no_llm():
    return LLMClient(provider="google")


def answers(*items):
    return [json.dumps(i) if isinstance(i, dict) else i for i in items]


class TestThoughtProcessor:
    def test_title_and_summary(self, llm):
        llm.generate.side_effect = answers(
            {"title": "buy milk"},
            {"summary": "Pick up milk on the way home."},
        )
        result = ThoughtProcessor(llm, sleep=no_sleep).process("Buy milk")

        assert result.title == "Buy milk"
        assert result.description == "Pick up milk on the way home."
        assert llm.generate.call_count == 2

    def test_title_truncated_to_60(self, llm):
        llm.generate.side_effect = answers({"title": "x" * 80}, {"summary": "s"})
        result = ThoughtProcessor(llm, sleep=no_sleep).process("long thought")
        assert len(result.title) == 60

    def test_long_title_cut_at_word_boundary(self, llm):
        words = "Remember to compare the three quotes for the kitchen renovation before Friday"
        llm.generate.side_effect = answers({"title": words}, {"summary": "s"})
        result = ThoughtProcessor(llm, sleep=no_sleep).process("renovation quotes")
        assert result.title == "Remember to compare the three quotes for the kitchen"
        assert words.startswith(result.title + " ")

    def test_fenced_json_accepted(self, llm):
        llm.generate.side_effect = ['```json\n{"title": "Idea"}\n```', '{"summary": "An idea"}']
        assert ThoughtProcessor(llm, sleep=no_sleep).process("idea").title == "Idea"

    def test_missing_summary_is_processing_error(self, llm):
        llm.generate.side_effect = answers({"title": "Idea"}, {"text": "wrong key"})
        with pytest.raises(ProcessingError, match="Failed to process thought"):
            ThoughtProcessor(llm, sleep=no_sleep).process("idea")

    def test_non_json_is_processing_error(self, llm):
        llm.generate.side_effect = ["Here is a title: Idea"]
        with pytest.raises(ProcessingError):
            ThoughtProcessor(llm, sleep=no_sleep).process("idea")

    def test_empty_text_rejected(self, llm):
        with pytest.raises(ValidationError, match="Empty thought provided"):
            ThoughtProcessor(llm, sleep=no_sleep).process("   ")
        llm.generate.assert_not_called()

    def test_no_ai_access(self, no_llm):
        with pytest.raises(AIAccessError):
            ThoughtProcessor(no_llm, sleep=no_sleep).process("idea")

    def test_transient_failure_retried(self, llm):
        llm.generate.side_effect = [
            RuntimeError("overloaded"),
            json.dumps({"title": "Idea"}),
            json.dumps({"summary": "An idea"}),
        ]
        result = ThoughtProcessor(llm, sleep=no_sleep).process("idea")
        assert result.title == "Idea"
        assert llm.generate.call_count == 3


class TestReminderProcessor:
    def test_title_and_context(self, llm):
        llm.generate.side_effect = answers(
            {"title": "Call mom"},
            {"description": "Discuss family reunion tomorrow at 2pm"},
        )
        result = ReminderProcessor(llm, sleep=no_sleep).process(
            "Need to call mom tomorrow at 2pm to discuss the family reunion"
        )
        assert result.title == "Call mom"
        assert result.description == "Discuss family reunion tomorrow at 2pm"

    def test_single_word_skips_llm(self, llm):
        result = ReminderProcessor(llm, sleep=no_sleep).process("groceries")
        assert result.title == "Groceries"
        assert result.description == ""
        llm.generate.assert_not_called()

    def test_empty_description_allowed(self, llm):
        llm.generate.side_effect = answers({"title": "Buy groceries"}, {"description": ""})
        result = ReminderProcessor(llm, sleep=no_sleep).process("Remember to buy groceries")
        assert result.description == ""

    def test_long_title_shortened(self, llm):
        long_title = "Submit the quarterly expense report to the finance team"
        llm.generate.side_effect = answers({"title": long_title}, {"description": ""})
        result = ReminderProcessor(llm, sleep=no_sleep).process("submit report please")
        assert len(result.title) <= 40
        assert long_title.startswith(result.title)

    def test_missing_description_key_fails(self, llm):
        llm.generate.side_effect = answers({"title": "Call mom"}, {"context": "x"})
        with pytest.raises(ProcessingError, match="Failed to process reminder"):
            ReminderProcessor(llm, sleep=no_sleep).process("call mom later")

    def test_extract_date(self, llm):
        llm.generate.side_effect = ["2025-03-15T14:00:00"]
        now = datetime(2025, 3, 14, 9, 30)
        result = ReminderProcessor(llm, sleep=no_sleep).extract_date("call mom tomorrow at 2pm", now=now)
        assert result == datetime(2025, 3, 15, 14, 0)
        assert "2025-03-14T09:30" in llm.generate.call_args.args[0]

    def test_extract_date_no_date(self, llm):
        llm.generate.side_effect = ["NO_DATE"]
        assert ReminderProcessor(llm, sleep=no_sleep).extract_date("call mom") is None

    def test_extract_date_swallows_errors(self, llm):
        llm.generate.side_effect = RuntimeError("down")
        assert ReminderProcessor(llm, max_retries=0, sleep=no_sleep).extract_date("call mom") is None

    def test_extract_date_without_ai(self, no_llm):
        assert ReminderProcessor(no_llm, sleep=no_sleep).extract_date("call mom tomorrow") is None


class TestReminderHelpers:
    def test_parse_zulu_date(self):
        assert parse_reminder_date('"2025-03-15T14:00:00Z"') == datetime(2025, 3, 15, 14, 0, tzinfo=timezone.utc)

    def test_parse_garbage(self):
        assert parse_reminder_date("next week sometime") is None

    def test_shorten_title_keeps_short(self):
        assert shorten_title("Call mom") == "Call mom"

    def test_shorten_title_word_boundary(self):
        assert shorten_title("Pick up the dry cleaning downtown", 20) == "Pick up the dry"


class TestQuoteProcessor:
    def test_identified_author_without_attribution(self, llm):
        llm.generate.side_effect = answers(
            {"identifiedAuthor": "Steve Jobs", "description": "From the 2005 Stanford commencement address."},
            {"cleanedQuote": "Stay hungry, stay foolish", "attributedAuthor": None},
        )
        result = QuoteProcessor(llm, sleep=no_sleep).process("Stay hungry, stay foolish")

        assert result.title == "Stay hungry, stay foolish"
        assert result.author == "Steve Jobs"
        assert result.description == "From the 2005 Stanford commencement address."

    def test_attribution_same_person_keeps_identified(self, llm):
        llm.generate.side_effect = answers(
            {"identifiedAuthor": "Mahatma Gandhi", "description": "Often attributed to Gandhi."},
            {"cleanedQuote": "Be the change you wish to see", "attributedAuthor": "Gandhi"},
            {"isSamePerson": True},
        )
        result = QuoteProcessor(llm, sleep=no_sleep).process("Be the change you wish to see - Gandhi")

        assert result.author == "Mahatma Gandhi"
        assert result.description == "Often attributed to Gandhi."
        assert llm.generate.call_count == 3

    def test_attribution_different_person_keeps_attributed(self, llm):
        llm.generate.side_effect = answers(
            {"identifiedAuthor": "Mark Twain", "description": "Humorist."},
            {"cleanedQuote": "Keep going", "attributedAuthor": "My Grandma"},
            {"isSamePerson": False},
        )
        result = QuoteProcessor(llm, sleep=no_sleep).process("Keep going — My Grandma")

        assert result.author == "My Grandma"
        assert result.description is None

    def test_attribution_without_identified_author(self, llm):
        llm.generate.side_effect = answers(
            {"identifiedAuthor": None, "description": None},
            {"cleanedQuote": "Keep going", "attributedAuthor": "My Grandma"},
        )
        result = QuoteProcessor(llm, sleep=no_sleep).process("Keep going by My Grandma")
        assert result.author == "My Grandma"
        assert llm.generate.call_count == 2

    def test_identical_names_skip_compare(self, llm):
        llm.generate.side_effect = answers(
            {"identifiedAuthor": "Seneca", "description": "Stoic."},
            {"cleanedQuote": "Luck is what happens", "attributedAuthor": "seneca"},
        )
        result = QuoteProcessor(llm, sleep=no_sleep).process("Luck is what happens - seneca")
        assert result.author == "Seneca"
        assert llm.generate.call_count == 2

    def test_bad_response_falls_back_to_original(self, llm):
        llm.generate.side_effect = ["no idea", "also not json"]
        result = QuoteProcessor(llm, sleep=no_sleep).process("  Some words  ")
        assert result.title == "Some words"
        assert result.author is None

    def test_no_ai_access_raises(self, no_llm):
        with pytest.raises(AIAccessError):
            QuoteProcessor(no_llm, sleep=no_sleep).process("Some words")


class TestBookmarkProcessor:
    def test_summary(self, llm):
        llm.generate.side_effect = ["Python documentation and tutorials."]
        result = BookmarkProcessor(llm, sleep=no_sleep).process("Python Docs", "https://docs.python.org")
        assert result.title == "Python Docs"
        assert result.description == "Python documentation and tutorials."

    def test_summary_failure_keeps_title(self, llm):
        llm.generate.side_effect = RuntimeError("down")
        result = BookmarkProcessor(llm, max_retries=0, sleep=no_sleep).process("Python Docs", "https://docs.python.org")
        assert result.title == "Python Docs"
        assert result.description == ""

    def test_missing_title_uses_url(self, llm):
        llm.generate.side_effect = ["Docs."]
        result = BookmarkProcessor(llm, sleep=no_sleep).process("", "https://docs.python.org")
        assert result.title == "https://docs.python.org"

    def test_extract_url_by_regex(self, llm):
        url = BookmarkProcessor(llm, sleep=no_sleep).extract_url("read this https://example.com/post.")
        assert url == "https://example.com/post"
        llm.generate.assert_not_called()

    def test_extract_url_by_model(self, llm):
        llm.generate.side_effect = ["https://example.com"]
        assert BookmarkProcessor(llm, sleep=no_sleep).extract_url("example dot com") == "https://example.com"

    def test_extract_url_none(self, llm):
        llm.generate.side_effect = ["NO_URL"]
        assert BookmarkProcessor(llm, sleep=no_sleep).extract_url("just words") is None

    def test_fetch_page_title_falls_back_to_url(self, no_llm):
        processor = BookmarkProcessor(no_llm, sleep=no_sleep)
        assert processor.fetch_page_title("https://example.com") == "https://example.com"

    def test_fetch_page_title(self, llm):
        llm.generate.side_effect = ["Example Domain"]
        assert BookmarkProcessor(llm, sleep=no_sleep).fetch_page_title("https://example.com") == "Example Domain"

    def test_no_ai_access_raises(self, no_llm):
        with pytest.raises(AIAccessError):
            BookmarkProcessor(no_llm, sleep=no_sleep).process("Example", "https://example.com")


class TestUrlHelpers:
    def test_is_valid_url(self):
        assert is_valid_url("https://example.com")
        assert not is_valid_url("example.com")

    def test_get_url_domain(self):
        assert get_url_domain("https://docs.python.org/3/") == "docs.python.org"
