"""Logging setup for the Bitbucket MCP server.

Each tool call binds its tool name, target repository and a request id
into contextvars; both formatters append them to every record emitted
during that call. Records go to stderr since stdout carries the MCP
stdio protocol.
"""

import json
import logging
import sys
from contextvars import ContextVar
from typing import Dict, Optional

_tool_name: ContextVar[Optional[str]] = ContextVar("tool_name", default=None)
_repository: ContextVar[Optional[str]] = ContextVar("repository", default=None)
_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

_CONTEXT_VARS = (
    ("tool", _tool_name),
    ("repo", _repository),
    ("req", _request_id),
)


def set_log_context(
    tool_name: Optional[str] = None,
    workspace: Optional[str] = None,
    repo_slug: Optional[str] = None,
    request_id: Optional[str] = None,
):
    """Bind tool call fields for the current async context.

    The repository field reads "workspace/repo_slug", or just the
    workspace for workspace-level tools.
    """
    if tool_name is not None:
        _tool_name.set(tool_name)
    if workspace:
        _repository.set(f"{workspace}/{repo_slug}" if repo_slug else workspace)
    if request_id is not None:
        _request_id.set(request_id)


def clear_log_context():
    for _, var in _CONTEXT_VARS:
        var.set(None)


def log_context() -> Dict[str, str]:
    """Currently bound context fields, unset ones omitted."""
    return {key: value for key, var in _CONTEXT_VARS if (value := var.get())}


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **log_context(),
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


class HumanReadableFormatter(logging.Formatter):
    """Single-line text with the call context as a [key=value] suffix."""

    def format(self, record: logging.LogRecord) -> str:
        msg = (
            f"[{self.formatTime(record, self.datefmt)}] "
            f"{record.levelname:8s} {record.name}: {record.getMessage()}"
        )

        context = log_context()
        if context:
            msg += " [" + ", ".join(f"{k}={v}" for k, v in context.items()) + "]"

        if record.exc_info and record.exc_info[1]:
            msg += "\n" + self.formatException(record.exc_info)

        return msg


def configure_logging(environment: str = "development", log_level: str = "INFO"):
    """Install a stderr handler on the root logger.

    Args:
        environment: "production" for JSON output, anything else for human-readable.
        log_level: Logging level string (DEBUG, INFO, WARNING, ERROR).
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    if environment == "production":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(HumanReadableFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(handler)

    # httpx logs every request at INFO
    for name in ("httpx", "httpcore", "mcp"):
        logging.getLogger(name).setLevel(logging.WARNING)
