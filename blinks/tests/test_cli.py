"""Tests for the command line front end."""

import pytest
from unittest.mock import Mock, patch

from blinks import cli
from blinks.capture.service import CaptureRequest, CaptureService, EditRequest
from blinks.common.errors import ConfigError, ValidationError
from blinks.common.schemas import Blink, BlinkType


@pytest.fixture
def service():
    return Mock(spec=CaptureService)


class TestParser:
    def test_quick_joins_words(self):
        args = cli.build_parser().parse_args(["quick", "/r", "call", "mom"])
        assert args.command == "quick"
        assert args.text == ["/r", "call", "mom"]

    def test_capture_date(self):
        args = cli.build_parser().parse_args(
            ["capture", "--type", "reminder", "--date", "2025-03-15T14:00", "call", "mom"]
        )
        assert args.reminder_date.hour == 14

    def test_bad_date_rejected(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["capture", "--date", "someday", "x"])

    def test_bad_type_rejected(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["capture", "--type", "recipe", "x"])


class TestMain:
    def test_quick(self, service):
        assert cli.main(["quick", "/r", "call", "mom"], service=service) == 0
        service.quick_capture.assert_called_once_with("/r call mom")

    def test_capture(self, service):
        cli.main(["capture", "--type", "bookmark", "--url", "https://example.com", "Example"], service=service)
        request = service.capture.call_args.args[0]
        assert request == CaptureRequest(type="bookmark", text="Example", source="https://example.com")

    def test_edit(self, service):
        cli.main(["edit", "abc", "--title", "New title"], service=service)
        service.edit.assert_called_once_with("abc", EditRequest(title="New title"))

    def test_list(self, service, capsys):
        service.list_blinks.return_value = [Blink(id="t1", title="Buy milk")]
        cli.main(["list"], service=service)
        out = capsys.readouterr().out
        assert "Thoughts (1)" in out
        assert "Buy milk" in out

    def test_show(self, service, capsys):
        service.get.return_value = Blink(id="q1", type=BlinkType.QUOTE, title="Stay hungry", author="Steve Jobs")
        cli.main(["show", "q1"], service=service)
        assert "- Author: Steve Jobs" in capsys.readouterr().out

    def test_toggle_delete_cleanup(self, service, capsys):
        service.cleanup.return_value = ["r1", "r2"]
        cli.main(["toggle", "r1"], service=service)
        cli.main(["delete", "r1"], service=service)
        cli.main(["cleanup"], service=service)
        service.toggle.assert_called_once_with("r1")
        service.delete.assert_called_once_with("r1")
        assert "Removed 2" in capsys.readouterr().out

    def test_blink_error_exit_code(self, service):
        service.quick_capture.side_effect = ValidationError("Please enter some text")
        assert cli.main(["quick", " "], service=service) == 1

    def test_missing_preferences(self, capsys):
        with patch("blinks.cli.load_config"), \
             patch("blinks.cli.build_service", side_effect=ConfigError("Missing Notion preferences")):
            assert cli.main(["list"]) == 1
        assert "Missing preferences" in capsys.readouterr().err

    def test_tab_flags_build_provider(self):
        with patch("blinks.cli.load_config"), \
             patch("blinks.cli.build_service") as build:
            build.return_value = Mock(spec=CaptureService)
            cli.main(["--tab-url", "https://example.com", "--tab-title", "Example", "quick", "/b", "page"])

        provider = build.call_args.kwargs["tab_provider"]
        tab = provider.get_tabs()[0]
        assert (tab.url, tab.title, tab.active) == ("https://example.com", "Example", True)


class TestConfigure:
    def test_saves_flags(self, capsys):
        from blinks.common.config import BlinksConfig
        config = BlinksConfig()
        with patch("blinks.cli.load_config", return_value=config), \
             patch("blinks.cli.save_config") as save, \
             patch("blinks.cli.build_service") as build:
            code = cli.main(["configure", "--notion-token", "secret_abc", "--database-id", "db", "--backend", "local"])

        assert code == 0
        save.assert_called_once_with(config)
        assert (config.notion.api_token, config.notion.database_id) == ("secret_abc", "db")
        assert config.storage.backend == "local"
        build.assert_not_called()
        assert "Configuration saved" in capsys.readouterr().out

    def test_token_flag_is_persisted_over_env_value(self):
        from blinks.common.config import BlinksConfig
        config = BlinksConfig()
        config.notion.api_token = "secret_env"
        config._env_sourced_keys = {"notion_api_token"}
        with patch("blinks.cli.load_config", return_value=config), \
             patch("blinks.cli.save_config"):
            cli.main(["configure", "--notion-token", "secret_flag"])

        assert "notion_api_token" not in config._env_sourced_keys
