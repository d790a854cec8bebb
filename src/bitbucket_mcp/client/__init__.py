"""Bitbucket Cloud API client."""

from .bitbucket import BitbucketClient
from .exceptions import BitbucketAPIError, BitbucketAuthConfigError, BitbucketError
from .models import CreatePullRequestRequest, PullRequestState

__all__ = [
    "BitbucketAPIError",
    "BitbucketAuthConfigError",
    "BitbucketClient",
    "BitbucketError",
    "CreatePullRequestRequest",
    "PullRequestState",
]
