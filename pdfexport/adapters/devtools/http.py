"""
HTTP client for the browser's DevTools discovery endpoint.

Provides the readiness check used while the browser is starting. The
protocol connection itself is opened by Playwright once this answers.
"""

import asyncio
import logging
from typing import Any, Dict

import aiohttp

from ...core.domain import DEFAULT_REQUEST_TIMEOUT_MS
from ...core.timing import ms_to_seconds

logger = logging.getLogger(__name__)


class DevToolsHttpClient:
    """HTTP client for the /json/version endpoint of one debugging host/port"""

    def __init__(self, host: str, port: int, timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS):
        """
        Initialize the client.

        Args:
            host: Debugging host
            port: Debugging port
            timeout_ms: Timeout for each HTTP request
        """
        self.host = host
        self.port = port
        self.base_url = f"http://{host}:{port}"
        self.timeout = aiohttp.ClientTimeout(total=ms_to_seconds(timeout_ms))

    async def get_version(self) -> Dict[str, Any]:
        """
        Fetch /json/version.

        Raises:
            aiohttp.ClientError: If the endpoint cannot be reached
        """
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.get(f"{self.base_url}/json/version") as response:
                response.raise_for_status()
                # Some builds serve JSON as text/plain
                return await response.json(content_type=None)

    async def is_ready(self) -> bool:
        """
        Ask the endpoint for its version metadata.

        Returns:
            True once the browser reports a webSocketDebuggerUrl, False otherwise
        """
        try:
            version = await self.get_version()
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError) as e:
            logger.debug("DevTools endpoint %s not ready: %s", self.base_url, e)
            return False

        if not isinstance(version, dict) or not version.get('webSocketDebuggerUrl'):
            logger.debug("DevTools endpoint %s answered without a debugger URL", self.base_url)
            return False
        return True
