"""Test configuration and fixtures."""

import os
from typing import Any, Callable, List, Optional

import httpx
import pytest
import pytest_asyncio

# Set test environment variables BEFORE importing the package
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("BITBUCKET_USERNAME", None)
os.environ.pop("BITBUCKET_APP_PASSWORD", None)
os.environ.pop("BITBUCKET_API_URL", None)

from bitbucket_mcp.client import BitbucketClient
from bitbucket_mcp.config import Settings, get_settings
from bitbucket_mcp.mcp.server import BitbucketMCPServer


class FakeBitbucket:
    """Records outgoing requests and answers them with a canned response.

    `respond` is either an httpx.Response, a callable taking the request,
    or an exception instance to raise.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.respond: Any = httpx.Response(200, json={})
        self.http_clients: List[httpx.AsyncClient] = []

    def reply(self, status_code: int = 200, json: Any = None, content: Optional[bytes] = None):
        if content is not None:
            self.respond = httpx.Response(status_code, content=content)
        else:
            self.respond = httpx.Response(status_code, json=json)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.respond, Exception):
            raise self.respond
        if callable(self.respond):
            return self.respond(request)
        return self.respond

    def http_client(self) -> httpx.AsyncClient:
        """Create an AsyncClient routed to this fake; closed by aclose()."""
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        self.http_clients.append(http_client)
        return http_client

    async def aclose(self):
        for http_client in self.http_clients:
            await http_client.aclose()
        self.http_clients.clear()

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]


def make_settings(authenticated: bool = True, **overrides) -> Settings:
    values = {
        "bitbucket_username": "alice" if authenticated else None,
        "bitbucket_app_password": "app-secret" if authenticated else None,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def fake_bitbucket():
    fake = FakeBitbucket()
    yield fake
    await fake.aclose()


@pytest.fixture
def client_factory(fake_bitbucket) -> Callable[..., BitbucketClient]:
    """Build a BitbucketClient whose HTTP traffic goes to fake_bitbucket."""

    def _factory(authenticated: bool = True) -> BitbucketClient:
        return BitbucketClient(make_settings(authenticated), http_client=fake_bitbucket.http_client())

    return _factory


@pytest.fixture
def client(client_factory) -> BitbucketClient:
    return client_factory(authenticated=True)


@pytest.fixture
def server(client) -> BitbucketMCPServer:
    return BitbucketMCPServer(client=client, settings=make_settings())


@pytest.fixture
def anonymous_server(client_factory) -> BitbucketMCPServer:
    return BitbucketMCPServer(
        client=client_factory(authenticated=False),
        settings=make_settings(authenticated=False),
    )
