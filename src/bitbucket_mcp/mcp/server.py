"""MCP server exposing the Bitbucket tools over stdio."""

import json
import logging
import uuid
from typing import Any, Dict, List, Optional

from mcp import types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server

from ..client import BitbucketClient
from ..config import Settings, get_settings
from ..observability.logging import clear_log_context, set_log_context
from .exceptions import ToolArgumentError, UnknownToolError
from .tools import BITBUCKET_TOOLS, get_tool

logger = logging.getLogger(__name__)


def _text(text: str) -> List[types.TextContent]:
    return [types.TextContent(type="text", text=text)]


class BitbucketMCPServer:
    """Single-client MCP server for Bitbucket Cloud."""

    def __init__(
        self,
        client: Optional[BitbucketClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.client = client or BitbucketClient(self.settings)
        self.server = Server(self.settings.app_name)
        self._setup_handlers()

    def _setup_handlers(self):
        """Set up MCP protocol handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> List[types.Tool]:
            return self.list_tools()

        # Arguments are checked by call_tool so every failure comes back as text.
        @self.server.call_tool(validate_input=False)
        async def handle_call_tool(
            name: str, arguments: Optional[Dict[str, Any]] = None
        ) -> List[types.TextContent]:
            return await self.call_tool(name, arguments)

    def list_tools(self) -> List[types.Tool]:
        """Return the static list of Bitbucket tool descriptors."""
        return [tool.to_tool() for tool in BITBUCKET_TOOLS]

    async def call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> List[types.TextContent]:
        """Run a tool and return its result as a single text content item.

        Never raises: failures come back as "Error: <message>".
        """
        if not arguments:
            arguments = {}

        set_log_context(
            tool_name=name,
            workspace=arguments.get("workspace"),
            repo_slug=arguments.get("repo_slug"),
            request_id=uuid.uuid4().hex[:12],
        )
        try:
            result = await self._execute_tool(name, arguments)
            return _text(json.dumps(result, indent=2, ensure_ascii=False))
        except Exception as e:
            logger.warning("Tool call failed: %s - %s", name, str(e))
            return _text(f"Error: {str(e) or 'Unknown error'}")
        finally:
            clear_log_context()

    async def _execute_tool(self, name: str, arguments: Dict[str, Any]) -> Any:
        tool = get_tool(name)
        if tool is None:
            raise UnknownToolError(name)

        logger.info("Tool call: %s", name)

        if tool.requires_auth:
            self.client.require_auth()

        for field in tool.required:
            if arguments.get(field) is None:
                raise ToolArgumentError(name, field)

        return await tool.handler(self.client, arguments)

    async def run(self):
        """Serve MCP requests on stdin/stdout until the host disconnects."""
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=self.settings.app_name,
                    server_version=self.settings.app_version,
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )
