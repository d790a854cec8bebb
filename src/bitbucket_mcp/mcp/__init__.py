"""MCP protocol layer for the Bitbucket tools."""

from .server import BitbucketMCPServer
from .tools import BITBUCKET_TOOLS, ToolDefinition

__all__ = ["BITBUCKET_TOOLS", "BitbucketMCPServer", "ToolDefinition"]
