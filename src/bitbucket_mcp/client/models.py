"""Bitbucket Cloud API types.

Response shapes are TypedDicts: the client hands API bodies back as-is,
so these only describe what the Bitbucket API sends. The request model
is a pydantic model because it is built from caller arguments.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, TypedDict

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DESTINATION_BRANCH = "main"


class PullRequestState(str, Enum):
    """States a Bitbucket pull request can be in."""

    OPEN = "OPEN"
    MERGED = "MERGED"
    DECLINED = "DECLINED"


# Bitbucket accepts other issue states too; these are the common ones.
KNOWN_ISSUE_STATES = [
    "new",
    "open",
    "resolved",
    "on hold",
    "invalid",
    "duplicate",
    "wontfix",
    "closed",
]


class Link(TypedDict):
    href: str


class NamedLink(TypedDict):
    name: str
    href: str


class RepositoryLinks(TypedDict, total=False):
    html: Link
    clone: List[NamedLink]


class Repository(TypedDict, total=False):
    uuid: str
    name: str
    full_name: str
    description: Optional[str]
    is_private: bool
    created_on: str
    updated_on: str
    size: int
    language: Optional[str]
    has_issues: bool
    has_wiki: bool
    links: RepositoryLinks


class Account(TypedDict, total=False):
    display_name: str
    uuid: str


class BranchRef(TypedDict):
    name: str


class RepositoryRef(TypedDict):
    full_name: str


class PullRequestEndpoint(TypedDict, total=False):
    branch: BranchRef
    repository: RepositoryRef


class HtmlLinks(TypedDict):
    html: Link


class PullRequest(TypedDict, total=False):
    id: int
    title: str
    description: Optional[str]
    state: str  # one of PullRequestState
    created_on: str
    updated_on: str
    author: Account
    source: PullRequestEndpoint
    destination: PullRequestEndpoint
    links: HtmlLinks


class IssueContent(TypedDict):
    raw: str
    markup: str
    html: str


class Issue(TypedDict, total=False):
    id: int
    title: str
    content: Optional[IssueContent]
    state: str
    kind: str
    priority: str
    created_on: str
    updated_on: str
    reporter: Account
    assignee: Optional[Account]
    links: HtmlLinks


class Page(TypedDict, total=False):
    """Paginated collection envelope returned by list endpoints."""

    values: List[Dict[str, Any]]
    size: int
    page: int
    pagelen: int
    next: str


class CreatePullRequestRequest(BaseModel):
    """Arguments for opening a pull request."""

    model_config = ConfigDict(frozen=True)

    title: str
    source_branch: str
    destination_branch: str = Field(default=DEFAULT_DESTINATION_BRANCH)
    description: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """Build the request body for POST /pullrequests."""
        payload: Dict[str, Any] = {"title": self.title}

        if self.description is not None:
            payload["description"] = self.description

        payload["source"] = {
            "branch": {
                "name": self.source_branch
            }
        }
        payload["destination"] = {
            "branch": {
                "name": self.destination_branch
            }
        }

        return payload
