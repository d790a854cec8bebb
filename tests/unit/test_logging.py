"""Tests for structured logging configuration."""

import json
import logging
import sys

import pytest

from bitbucket_mcp.observability.logging import (
    HumanReadableFormatter,
    StructuredFormatter,
    clear_log_context,
    configure_logging,
    log_context,
    set_log_context,
)


def _record(message: str = "Tool call: bitbucket_list_issues") -> logging.LogRecord:
    return logging.LogRecord(
        name="bitbucket_mcp.mcp.server",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


@pytest.fixture(autouse=True)
def reset_context():
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLogContext:

    def test_repository_field(self):
        set_log_context(workspace="acme", repo_slug="widgets")

        assert log_context() == {"repo": "acme/widgets"}

    def test_workspace_only(self):
        set_log_context(tool_name="bitbucket_list_repositories", workspace="acme")

        assert log_context() == {"tool": "bitbucket_list_repositories", "repo": "acme"}

    def test_clear(self):
        set_log_context(tool_name="t", workspace="acme", request_id="r")

        clear_log_context()

        assert log_context() == {}


class TestStructuredFormatter:

    def test_basic_fields(self):
        entry = json.loads(StructuredFormatter().format(_record()))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "bitbucket_mcp.mcp.server"
        assert entry["message"] == "Tool call: bitbucket_list_issues"
        assert not {"tool", "repo", "req"} & set(entry)

    def test_context_fields(self):
        set_log_context(
            tool_name="bitbucket_list_issues",
            workspace="acme",
            repo_slug="widgets",
            request_id="abc123",
        )

        entry = json.loads(StructuredFormatter().format(_record()))

        assert entry["tool"] == "bitbucket_list_issues"
        assert entry["repo"] == "acme/widgets"
        assert entry["req"] == "abc123"

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record()
            record.exc_info = sys.exc_info()

        entry = json.loads(StructuredFormatter().format(record))

        assert "RuntimeError: boom" in entry["exception"]


class TestHumanReadableFormatter:

    def test_context_suffix(self):
        set_log_context(tool_name="bitbucket_get_repository", workspace="acme", repo_slug="widgets", request_id="r1")

        line = HumanReadableFormatter().format(_record("hello"))

        assert "hello" in line
        assert line.endswith("[tool=bitbucket_get_repository, repo=acme/widgets, req=r1]")

    def test_no_context(self):
        line = HumanReadableFormatter().format(_record("hello"))

        assert line.endswith("hello")


class TestConfigureLogging:

    def test_production_uses_json_on_stderr(self, restore_root_logger):
        configure_logging(environment="production", log_level="WARNING")

        root = restore_root_logger
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert isinstance(handler.formatter, StructuredFormatter)
        assert handler.stream is sys.stderr

    def test_development_is_human_readable(self, restore_root_logger):
        configure_logging(environment="development", log_level="debug")

        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, HumanReadableFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        configure_logging(log_level="chatty")

        assert restore_root_logger.level == logging.INFO
