"""Bitbucket client exception types.

Raised by BitbucketClient and caught generically at the tool dispatch
layer, which turns them into "Error: ..." text results.
"""

from typing import Optional

AUTH_NOT_CONFIGURED_MESSAGE = (
    "Bitbucket authentication not configured. "
    "Set BITBUCKET_USERNAME and BITBUCKET_APP_PASSWORD environment variables."
)


class BitbucketError(Exception):
    """Base exception for all Bitbucket client errors."""

    pass


class BitbucketAuthConfigError(BitbucketError):
    """Credentials are missing for an operation that requires them."""

    def __init__(self, message: str = AUTH_NOT_CONFIGURED_MESSAGE):
        super().__init__(message)


class BitbucketAPIError(BitbucketError):
    """An HTTP call to the Bitbucket API failed (error response or transport failure)."""

    def __init__(
        self,
        message: str,
        operation: str = "",
        status_code: Optional[int] = None,
    ):
        self.operation = operation
        self.status_code = status_code
        super().__init__(message)
