"""Unit tests for main CLI entry point (main.py).

Tests the Typer CLI application using CliRunner against a temporary
project. Git and the interpreter are replaced with in-memory fakes.
"""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest
import yaml
from typer.testing import CliRunner

from src.cli.main import _configure_logging, app
from src.cli.models import ExitCode
from src.drafts.draft_cache import FileDraftCache
from tests.helpers.fakes import InMemoryCommitter, ScriptedInterpreter

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Keep .env files and stray handlers out of CLI tests."""
    monkeypatch.delenv("MICROTEXT_CONTENT_ROOT", raising=False)
    monkeypatch.delenv("MICROTEXT_MODEL", raising=False)
    with patch("src.cli.config.load_dotenv"):
        yield
    app_logger = logging.getLogger("src")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)


@pytest.fixture
def project(tmp_path, pages_dir):
    """Config file pointing at the sample pages; returns its path."""
    config_path = tmp_path / ".microtext" / "config.yaml"
    config_path.parent.mkdir()
    config_path.write_text(
        yaml.safe_dump({
            "content_root": str(pages_dir),
            "drafts_file": str(tmp_path / ".microtext" / "drafts.yaml"),
            "repo_root": str(tmp_path),
        }),
        encoding="utf-8",
    )
    return config_path


@pytest.fixture
def committer():
    fake = InMemoryCommitter()
    with patch("src.cli.editor.GitCommitter", return_value=fake):
        yield fake


def invoke(project, *args):
    return runner.invoke(app, ["--config", str(project), *args])


def invoke_json(project, *args):
    result = runner.invoke(app, ["--config", str(project), "--json", *args])
    return result, json.loads(result.stdout)


class TestConfigureLogging:
    """Test cases for _configure_logging function."""

    @pytest.mark.parametrize("verbosity,level", [
        (0, logging.WARNING),
        (1, logging.INFO),
        (2, logging.DEBUG),
        (5, logging.DEBUG),
    ])
    def test_verbosity_sets_level(self, verbosity, level):
        with patch('logging.getLogger') as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            _configure_logging(verbosity)

            mock_get_logger.assert_called_with("src")
            mock_logger.setLevel.assert_called_with(level)

    def test_logdir_creates_log_file(self, tmp_path):
        logdir = tmp_path / "logs"

        _configure_logging(1, str(logdir))

        files = list(logdir.iterdir())
        assert len(files) == 1
        assert files[0].name.startswith("microtext_")


class TestReadCommands:
    """Test cases for pages and read."""

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])

        assert "Usage" in result.output

    def test_pages(self, project):
        result, data = invoke_json(project, "pages")

        assert result.exit_code == ExitCode.SUCCESS
        assert data == {"pages": ["about", "home", "index"]}

    def test_pages_table_output(self, project):
        result = invoke(project, "pages")

        assert result.exit_code == ExitCode.SUCCESS
        assert "home" in result.stdout

    def test_read_flat(self, project):
        result, data = invoke_json(project, "read", "home")

        assert result.exit_code == ExitCode.SUCCESS
        assert data["content"]["hero.headline"] == "A"

    def test_read_tree(self, project):
        result, data = invoke_json(project, "read", "home", "--tree")

        assert data["content"]["features"][0] == {"title": "Fast", "desc": "Loads quickly"}

    def test_read_missing_page_exits_not_found(self, project):
        result = invoke(project, "read", "pricing")

        assert result.exit_code == ExitCode.NOT_FOUND

    def test_invalid_config_exits_general_error(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("bogus_field: 1\n", encoding="utf-8")

        result = runner.invoke(app, ["--config", str(config_path), "pages"])

        assert result.exit_code == ExitCode.GENERAL_ERROR


class TestWriteCommands:
    """Test cases for set and array."""

    def test_set(self, project, pages_dir):
        result, data = invoke_json(project, "set", "home", "hero.headline", "B")

        assert result.exit_code == ExitCode.SUCCESS
        assert data == {
            "pageId": "home",
            "path": "hero.headline",
            "previousValue": "A",
            "newValue": "B",
        }
        assert "headline: B" in (pages_dir / "home.mdx").read_text(encoding="utf-8")

    def test_set_with_markup_like_text(self, project):
        result = invoke(project, "set", "home", "hero.headline", "[bold]Sale[/bold]")

        assert result.exit_code == ExitCode.SUCCESS
        assert "[bold]Sale[/bold]" in result.stdout

    def test_set_with_stale_expectation(self, project):
        result = invoke(project, "set", "home", "hero.headline", "B", "--expect", "Old")

        assert result.exit_code == ExitCode.PARTIAL_FAILURE

    def test_set_invalid_path(self, project):
        result, data = invoke_json(project, "set", "home", "hero", "flat")

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert data["errorType"] == "InvalidPath"

    def test_array_add_with_template(self, project):
        result, data = invoke_json(
            project, "array", "add", "home", "features", "--template", '{"title": "Secure"}'
        )

        assert result.exit_code == ExitCode.SUCCESS
        assert data["index"] == 3
        assert data["item"] == {"title": "Secure"}

    def test_array_add_bad_template(self, project):
        result = invoke(project, "array", "add", "home", "features", "--template", "{nope")

        assert result.exit_code == ExitCode.GENERAL_ERROR

    def test_array_remove_and_show(self, project):
        invoke(project, "array", "remove", "home", "features", "0")

        result, data = invoke_json(project, "array", "show", "home", "features")

        assert data["length"] == 2
        assert data["items"][0]["title"] == "Simple"

    def test_array_remove_out_of_range(self, project):
        result, data = invoke_json(project, "array", "remove", "home", "features", "5")

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert data["errorType"] == "IndexOutOfRange"


class TestDraftCommands:
    """Test cases for draft and sync."""

    def test_save_list_and_sync(self, project, tmp_path, pages_dir):
        invoke(project, "draft", "save", "home", "hero.headline", "C")

        _, listed = invoke_json(project, "draft", "list", "home")
        assert [d["path"] for d in listed["drafts"]] == ["hero.headline"]
        assert "headline: A" in (pages_dir / "home.mdx").read_text(encoding="utf-8")

        result, synced = invoke_json(project, "sync", "home")

        assert result.exit_code == ExitCode.SUCCESS
        assert synced["reports"][0]["synced"] == 1
        assert "headline: C" in (pages_dir / "home.mdx").read_text(encoding="utf-8")
        cache = FileDraftCache(str(tmp_path / ".microtext" / "drafts.yaml"))
        assert cache.enumerate("home") == []

    def test_sync_partial_failure_exit_code(self, project):
        invoke(project, "draft", "save", "home", "features.9.title", "Too far")

        result = invoke(project, "sync", "--all")

        assert result.exit_code == ExitCode.PARTIAL_FAILURE

    def test_sync_requires_page_or_all(self, project):
        result = invoke(project, "sync")

        assert result.exit_code == ExitCode.GENERAL_ERROR

    def test_clear(self, project):
        invoke(project, "draft", "save", "home", "a", "1")
        invoke(project, "draft", "save", "home", "b", "2")

        result, data = invoke_json(project, "draft", "clear", "home", "a")

        assert data == {"pageId": "home", "cleared": 1}


class TestPublishCommands:
    """Test cases for status and publish."""

    def test_status(self, project, committer):
        committer.touch("pages/home.mdx")

        result, data = invoke_json(project, "status")

        assert data == {"unpublishedChanges": 1, "files": ["pages/home.mdx"]}

    def test_publish(self, project, committer):
        committer.touch("pages/home.mdx")

        result, data = invoke_json(project, "publish", "-m", "Refresh copy")

        assert result.exit_code == ExitCode.SUCCESS
        assert data["published"] is True
        assert committer.commits == [(["pages/home.mdx"], "Refresh copy")]

    def test_publish_nothing(self, project, committer):
        result = invoke(project, "publish")

        assert result.exit_code == ExitCode.SUCCESS
        assert "No changes to publish" in result.stdout


class TestAgentCommands:
    """Test cases for interpret, tool and serve-tools."""

    @pytest.fixture
    def interpreter(self):
        fake = ScriptedInterpreter([
            {"path": "hero.headline", "expectedOldValue": "A", "newValue": "Now"},
            {"path": "hero.subhead", "expectedOldValue": "Stale", "newValue": "X"},
        ])
        with patch("src.cli.editor.AnthropicInterpreter.from_env", return_value=fake):
            yield fake

    def test_interpret_reports_skips(self, project, interpreter, pages_dir):
        result, data = invoke_json(project, "interpret", "home", "Make it urgent")

        assert result.exit_code == ExitCode.PARTIAL_FAILURE
        assert data["appliedCount"] == 1
        assert data["skippedCount"] == 1
        assert "headline: Now" in (pages_dir / "home.mdx").read_text(encoding="utf-8")

    def test_interpret_preview(self, project, interpreter, pages_dir):
        before = (pages_dir / "home.mdx").read_text(encoding="utf-8")

        result = invoke(project, "interpret", "home", "Make it urgent", "--preview")

        assert "preview" in result.stdout
        assert (pages_dir / "home.mdx").read_text(encoding="utf-8") == before

    def test_interpret_without_api_key(self, project, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with patch("src.tool_surface.interpreter.load_dotenv"):
            result = invoke(project, "interpret", "home", "Edit")

        assert result.exit_code == ExitCode.GENERAL_ERROR

    def test_tool(self, project):
        result, data = invoke_json(project, "tool", "read-content", "--args", '{"pageId": "about"}')

        assert result.exit_code == ExitCode.SUCCESS
        assert data == {"pageId": "about", "content": {"intro": "We make tools."}}

    def test_tool_error_exit_code(self, project):
        result, data = invoke_json(project, "tool", "read-content", "--args", '{"pageId": "x"}')

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert data["errorType"] == "NotFound"

    def test_serve_tools(self, project, mocker):
        serve = mocker.patch("src.cli.main.serve")

        result = runner.invoke(app, ["--config", str(project), "serve-tools"])

        assert result.exit_code == ExitCode.SUCCESS
        served = serve.call_args[0][0]
        assert served.enumerate_pages() == ["about", "home", "index"]
