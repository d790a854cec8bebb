"""Bitbucket tool table.

Each entry ties a tool name to its MCP descriptor and the handler that
maps the argument object onto one BitbucketClient call.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from mcp import types

from ..client import BitbucketClient, CreatePullRequestRequest, PullRequestState
from ..client.models import DEFAULT_DESTINATION_BRANCH, KNOWN_ISSUE_STATES

ToolHandler = Callable[[BitbucketClient, Dict[str, Any]], Awaitable[Any]]

DEFAULT_PAGE = 1

WORKSPACE = {
    "type": "string",
    "description": "Bitbucket workspace name"
}
REPO_SLUG = {
    "type": "string",
    "description": "Repository slug"
}


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: Dict[str, Any]
    handler: ToolHandler
    requires_auth: bool = False

    @property
    def required(self) -> List[str]:
        return list(self.input_schema.get("required", []))

    def to_tool(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
        )


def _optional(arguments: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Read an optional argument; None and "" count as absent."""
    value = arguments.get(key)
    if value is None or value == "":
        return default
    return value


async def _list_repositories(client: BitbucketClient, arguments: Dict[str, Any]) -> Any:
    return await client.list_repositories(
        arguments["workspace"],
        _optional(arguments, "page", DEFAULT_PAGE),
    )


async def _get_repository(client: BitbucketClient, arguments: Dict[str, Any]) -> Any:
    return await client.get_repository(arguments["workspace"], arguments["repo_slug"])


async def _list_pull_requests(client: BitbucketClient, arguments: Dict[str, Any]) -> Any:
    return await client.list_pull_requests(
        arguments["workspace"],
        arguments["repo_slug"],
        _optional(arguments, "state"),
    )


async def _get_pull_request(client: BitbucketClient, arguments: Dict[str, Any]) -> Any:
    return await client.get_pull_request(
        arguments["workspace"],
        arguments["repo_slug"],
        arguments["pull_request_id"],
    )


async def _list_issues(client: BitbucketClient, arguments: Dict[str, Any]) -> Any:
    return await client.list_issues(
        arguments["workspace"],
        arguments["repo_slug"],
        _optional(arguments, "state"),
    )


async def _create_pull_request(client: BitbucketClient, arguments: Dict[str, Any]) -> Any:
    data = CreatePullRequestRequest(
        title=arguments["title"],
        description=_optional(arguments, "description"),
        source_branch=arguments["source_branch"],
        destination_branch=_optional(arguments, "destination_branch", DEFAULT_DESTINATION_BRANCH),
    )
    return await client.create_pull_request(arguments["workspace"], arguments["repo_slug"], data)


BITBUCKET_TOOLS: List[ToolDefinition] = [
    ToolDefinition(
        name="bitbucket_list_repositories",
        description="List repositories for a workspace",
        input_schema={
            "type": "object",
            "properties": {
                "workspace": WORKSPACE,
                "page": {
                    "type": "integer",
                    "minimum": 1,
                    "default": DEFAULT_PAGE,
                    "description": "Page number (default: 1)"
                }
            },
            "required": ["workspace"]
        },
        handler=_list_repositories,
    ),
    ToolDefinition(
        name="bitbucket_get_repository",
        description="Get details of a specific repository",
        input_schema={
            "type": "object",
            "properties": {
                "workspace": WORKSPACE,
                "repo_slug": REPO_SLUG
            },
            "required": ["workspace", "repo_slug"]
        },
        handler=_get_repository,
    ),
    ToolDefinition(
        name="bitbucket_list_pull_requests",
        description="List pull requests for a repository",
        input_schema={
            "type": "object",
            "properties": {
                "workspace": WORKSPACE,
                "repo_slug": REPO_SLUG,
                "state": {
                    "type": "string",
                    "enum": [state.value for state in PullRequestState],
                    "default": PullRequestState.OPEN.value,
                    "description": "Pull request state (Bitbucket returns open pull requests when omitted)"
                }
            },
            "required": ["workspace", "repo_slug"]
        },
        handler=_list_pull_requests,
    ),
    ToolDefinition(
        name="bitbucket_get_pull_request",
        description="Get details of a specific pull request",
        input_schema={
            "type": "object",
            "properties": {
                "workspace": WORKSPACE,
                "repo_slug": REPO_SLUG,
                "pull_request_id": {
                    "type": "integer",
                    "description": "Pull request ID"
                }
            },
            "required": ["workspace", "repo_slug", "pull_request_id"]
        },
        handler=_get_pull_request,
    ),
    ToolDefinition(
        name="bitbucket_list_issues",
        description="List issues for a repository (requires issue tracker to be enabled)",
        input_schema={
            "type": "object",
            "properties": {
                "workspace": WORKSPACE,
                "repo_slug": REPO_SLUG,
                "state": {
                    "type": "string",
                    "description": "Issue state, e.g. " + ", ".join(f"'{s}'" for s in KNOWN_ISSUE_STATES)
                }
            },
            "required": ["workspace", "repo_slug"]
        },
        handler=_list_issues,
    ),
    ToolDefinition(
        name="bitbucket_create_pull_request",
        description="Create a new pull request",
        input_schema={
            "type": "object",
            "properties": {
                "workspace": WORKSPACE,
                "repo_slug": REPO_SLUG,
                "title": {
                    "type": "string",
                    "description": "Pull request title"
                },
                "description": {
                    "type": "string",
                    "description": "Pull request description"
                },
                "source_branch": {
                    "type": "string",
                    "description": "Source branch name"
                },
                "destination_branch": {
                    "type": "string",
                    "default": DEFAULT_DESTINATION_BRANCH,
                    "description": "Destination branch name"
                }
            },
            "required": ["workspace", "repo_slug", "title", "source_branch"]
        },
        handler=_create_pull_request,
        requires_auth=True,
    ),
]

TOOLS_BY_NAME: Dict[str, ToolDefinition] = {tool.name: tool for tool in BITBUCKET_TOOLS}


def get_tool(name: str) -> Optional[ToolDefinition]:
    return TOOLS_BY_NAME.get(name)
