"""Bitbucket Cloud REST API client.

Thin async facade over API v2: six operations, one HTTP round trip each,
JSON bodies handed back exactly as Bitbucket returned them.
API base: https://api.bitbucket.org/2.0/
"""

import functools
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

import httpx

from ..config import Settings, get_settings
from .exceptions import BitbucketAPIError, BitbucketAuthConfigError
from .models import CreatePullRequestRequest, Issue, Page, PullRequest, Repository

logger = logging.getLogger(__name__)

PAGE_LENGTH = 10

T = TypeVar("T")


def _error_detail(exc: httpx.HTTPError) -> str:
    """Pull the human-readable message out of a failed request.

    Bitbucket error bodies look like {"type": "error", "error": {"message": "..."}}.
    Other error responses report their status code; transport errors use
    the first line of the httpx error text.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            body = exc.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        return f"Request failed with status code {exc.response.status_code}"

    text = str(exc).strip()
    return text.splitlines()[0] if text else type(exc).__name__


def wrap_errors(operation: str) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Re-raise httpx failures from the wrapped call as BitbucketAPIError.

    The message reads "Failed to <operation>: <detail>". Non-httpx exceptions
    pass through untouched.
    """
    def decorator(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await fn(*args, **kwargs)
            except httpx.HTTPError as exc:
                status_code = None
                if isinstance(exc, httpx.HTTPStatusError):
                    status_code = exc.response.status_code
                detail = _error_detail(exc)
                logger.warning(
                    "Bitbucket request failed: %s (status=%s): %s",
                    operation, status_code, detail,
                )
                raise BitbucketAPIError(
                    f"Failed to {operation}: {detail}",
                    operation=operation,
                    status_code=status_code,
                ) from exc
        return wrapper
    return decorator


class BitbucketClient:
    """Client for the Bitbucket Cloud REST API.

    Credentials are optional. Without them read operations go out
    unauthenticated (public repositories only) and create_pull_request
    refuses to run.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        settings = settings or get_settings()
        self.base_url = settings.bitbucket_api_url
        self._http_client = http_client
        self._auth: Optional[httpx.BasicAuth] = None

        if settings.has_credentials():
            self._auth = httpx.BasicAuth(
                settings.bitbucket_username, settings.bitbucket_app_password
            )
            logger.debug("Bitbucket client configured with basic auth")
        else:
            logger.debug("Bitbucket client configured without credentials")

    @property
    def is_authenticated(self) -> bool:
        return self._auth is not None

    def require_auth(self):
        """Raise BitbucketAuthConfigError unless credentials are configured."""
        if not self.is_authenticated:
            raise BitbucketAuthConfigError()

    def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client

        from .http_client import get_http_client
        return get_http_client()

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        kwargs: Dict[str, Any] = {
            "headers": {
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        }
        if params:
            kwargs["params"] = params
        if json is not None:
            kwargs["json"] = json
        if self._auth is not None:
            kwargs["auth"] = self._auth

        logger.debug("Bitbucket %s %s params=%s", method, path, params)
        response = await self._get_client().request(method, f"{self.base_url}{path}", **kwargs)
        response.raise_for_status()
        return response.json()

    # ── Repositories ─────────────────────────────────────────────────

    @wrap_errors("list repositories")
    async def list_repositories(self, workspace: str, page: int = 1) -> Page:
        return await self._request(
            "GET",
            f"/repositories/{workspace}",
            params={"page": page, "pagelen": PAGE_LENGTH},
        )

    @wrap_errors("get repository")
    async def get_repository(self, workspace: str, repo_slug: str) -> Repository:
        return await self._request("GET", f"/repositories/{workspace}/{repo_slug}")

    # ── Pull requests ────────────────────────────────────────────────

    @wrap_errors("list pull requests")
    async def list_pull_requests(
        self, workspace: str, repo_slug: str, state: Optional[str] = None
    ) -> Page:
        """List pull requests; without a state Bitbucket returns open ones."""
        params: Dict[str, Any] = {"pagelen": PAGE_LENGTH}
        if state:
            params["state"] = state

        return await self._request(
            "GET",
            f"/repositories/{workspace}/{repo_slug}/pullrequests",
            params=params,
        )

    @wrap_errors("get pull request")
    async def get_pull_request(
        self, workspace: str, repo_slug: str, pull_request_id: int
    ) -> PullRequest:
        return await self._request(
            "GET",
            f"/repositories/{workspace}/{repo_slug}/pullrequests/{pull_request_id}",
        )

    async def create_pull_request(
        self, workspace: str, repo_slug: str, data: CreatePullRequestRequest
    ) -> PullRequest:
        """Open a pull request. Requires credentials; checked before any request."""
        self.require_auth()
        return await self._post_pull_request(workspace, repo_slug, data)

    @wrap_errors("create pull request")
    async def _post_pull_request(
        self, workspace: str, repo_slug: str, data: CreatePullRequestRequest
    ) -> PullRequest:
        return await self._request(
            "POST",
            f"/repositories/{workspace}/{repo_slug}/pullrequests",
            json=data.to_payload(),
        )

    # ── Issues ───────────────────────────────────────────────────────

    @wrap_errors("list issues")
    async def list_issues(
        self, workspace: str, repo_slug: str, state: Optional[str] = None
    ) -> Page:
        """List issues. The state is passed through as given.

        Note: returns 404 if the issue tracker is disabled on the repository.
        """
        params: Dict[str, Any] = {"pagelen": PAGE_LENGTH}
        if state:
            params["state"] = state

        return await self._request(
            "GET",
            f"/repositories/{workspace}/{repo_slug}/issues",
            params=params,
        )
