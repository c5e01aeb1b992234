"""Tests for the outlook-md command line."""

import json
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from outlook_md import __version__, cli
from outlook_md.auth import AuthenticationCancelledError, TokenCache, TokenRecord
from outlook_md.calendar import CalendarEvent, GraphAPIError


@pytest.fixture(autouse=True)
def quiet_logging():
    with patch("outlook_md.cli._configure_logging"):
        yield


@pytest.fixture
def cache_path(tmp_path):
    path = tmp_path / "token.json"
    with patch("outlook_md.auth.token_cache.TOKEN_CACHE", path):
        yield path


@pytest.fixture
def graph_client():
    with patch("outlook_md.cli.GraphCalendarClient") as mock_cls:
        client = mock_cls.return_value.__enter__.return_value
        client.get_calendar_view.return_value = []
        yield mock_cls


class TestFetchCommands:
    def test_today_prints_json(self, graph_client, capsys):
        """Should print a version 1 document on stdout."""
        code = cli.main(["today", "--tz", "UTC", "--access-token", "override"])

        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["version"] == 1
        assert data["timezone"] == "UTC"
        assert data["events"] == []
        graph_client.assert_called_once_with("override")

    def test_override_token_from_environment(self, graph_client, capsys):
        with patch.dict("os.environ", {"OUTLOOK_MD_ACCESS_TOKEN": "env-token"}):
            code = cli.main(["week", "--tz", "Europe/London"])

        assert code == 0
        graph_client.assert_called_once_with("env-token")
        client = graph_client.return_value.__enter__.return_value
        start, end, tz_name = client.get_calendar_view.call_args.args
        assert tz_name == "Europe/London"
        assert start.weekday() == 0

    def test_events_in_output(self, graph_client, capsys):
        client = graph_client.return_value.__enter__.return_value
        client.get_calendar_view.return_value = [
            CalendarEvent(
                id="evt-1",
                subject="Review",
                is_all_day=False,
                start=datetime(2026, 1, 7, 9, tzinfo=timezone.utc),
                end=datetime(2026, 1, 7, 10, tzinfo=timezone.utc),
            )
        ]

        cli.main(["tomorrow", "--tz", "UTC", "--access-token", "t"])

        data = json.loads(capsys.readouterr().out)
        assert data["events"][0]["subject"] == "Review"
        assert data["events"][0]["attendees"] == []

    def test_unsupported_format(self, graph_client, capsys):
        code = cli.main(["today", "--format", "markdown", "--access-token", "t"])

        captured = capsys.readouterr()
        assert code == 1
        assert captured.out == ""
        assert "unsupported format" in captured.err
        graph_client.assert_not_called()

    def test_invalid_timezone(self, graph_client, capsys):
        code = cli.main(["today", "--tz", "Nowhere/Land", "--access-token", "t"])

        assert code == 1
        assert "invalid timezone" in capsys.readouterr().err

    def test_graph_error_prints_nothing_on_stdout(self, graph_client, capsys):
        """Should fail without partial output."""
        client = graph_client.return_value.__enter__.return_value
        client.get_calendar_view.side_effect = GraphAPIError(403, "Forbidden")

        code = cli.main(["today", "--tz", "UTC", "--access-token", "t"])

        captured = capsys.readouterr()
        assert code == 1
        assert captured.out == ""
        assert "403" in captured.err

    def test_cancelled_authentication(self, capsys):
        with patch("outlook_md.cli._build_manager") as mock_build:
            mock_build.return_value.get_access_token.side_effect = (
                AuthenticationCancelledError()
            )
            code = cli.main(["today", "--tz", "UTC"])

        assert code == cli.EXIT_CANCELLED


class TestAuthCommands:
    def test_status_without_token(self, cache_path, capsys):
        assert cli.main(["auth", "status"]) == 1
        assert "No token found" in capsys.readouterr().out

    def test_status_with_token(self, cache_path, capsys):
        TokenCache(cache_path).save(TokenRecord(access_token="a", refresh_token="r"))

        assert cli.main(["auth", "status"]) == 0
        out = capsys.readouterr().out
        assert "valid" in out
        assert "Refresh token : yes" in out

    def test_logout(self, cache_path, capsys):
        TokenCache(cache_path).save(TokenRecord(access_token="a"))

        assert cli.main(["auth", "logout"]) == 0
        assert not cache_path.exists()
        assert "cleared" in capsys.readouterr().out

    def test_logout_without_cache(self, cache_path, capsys):
        assert cli.main(["auth", "logout"]) == 0
        assert "No cached token" in capsys.readouterr().out

    def test_corrupt_cache_status(self, cache_path, capsys):
        cache_path.write_text("{not json")

        assert cli.main(["auth", "status"]) == 1
        assert "outlook-md auth logout" in capsys.readouterr().err


class TestMisc:
    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert cli.main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_credentials_status_from_environment(self, capsys):
        env = {"OUTLOOK_MD_CLIENT_ID": "c", "OUTLOOK_MD_TENANT_ID": "t"}
        with patch.dict("os.environ", env), patch("outlook_md.cli.default_store") as mock_store:
            from outlook_md.credentials import default_store

            mock_store.return_value = default_store(platform="linux")
            code = cli.main(["credentials", "status"])

        assert code == 0
        out = capsys.readouterr().out
        assert "[x] client-id" in out
        assert "environment" in out
