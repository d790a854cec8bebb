"""Entry point for the Bitbucket MCP server."""

import asyncio
import logging

from .client.http_client import close_http_client
from .config import get_settings
from .mcp.server import BitbucketMCPServer
from .observability.logging import configure_logging

logger = logging.getLogger(__name__)


async def serve():
    """Run the server over stdio, closing the HTTP pool on exit."""
    settings = get_settings()

    configure_logging(
        environment=settings.environment,
        log_level=settings.get_log_level(),
    )

    if not settings.has_credentials():
        logger.warning(
            "BITBUCKET_USERNAME/BITBUCKET_APP_PASSWORD not set; "
            "only public read operations will work"
        )

    server = BitbucketMCPServer(settings=settings)
    logger.info("Starting %s v%s on stdio", settings.app_name, settings.app_version)

    try:
        await server.run()
    finally:
        await close_http_client()
        logger.info("Shutdown complete")


def main():
    asyncio.run(serve())


if __name__ == "__main__":
    main()
