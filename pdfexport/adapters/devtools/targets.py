"""
Isolated debugging targets.

Each export gets its own browser context (separate cookie jar and storage)
holding a single blank page, opened through a Playwright connection to the
supervised browser's debugging endpoint. The connection is made lazily and
shared by every export; the browser itself is never closed from here.
"""

import asyncio
import itertools
import logging
from typing import Optional

from playwright.async_api import Browser, Error as PlaywrightError, Playwright, async_playwright

from ...core.domain import DEFAULT_REQUEST_TIMEOUT_MS, DebuggingTarget
from ...core.exceptions import SessionError
from .session import PlaywrightDevToolsSession

logger = logging.getLogger(__name__)


class TargetManager:
    """Creates, connects to and discards debugging targets"""

    def __init__(self, endpoint: str, connect_timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS,
                 ignore_https_errors: bool = True):
        """
        Initialize the manager.

        Args:
            endpoint: HTTP debugging endpoint, e.g. http://localhost:9222
            connect_timeout_ms: Timeout for attaching to the browser
            ignore_https_errors: Let new contexts load pages with invalid certificates
        """
        self.endpoint = endpoint
        self.connect_timeout_ms = connect_timeout_ms
        self.ignore_https_errors = ignore_https_errors
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()
        self._ids = itertools.count(1)

    @property
    def connected(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def create_target(self) -> DebuggingTarget:
        """
        Create a fresh browser context with one blank page in it.

        Raises:
            SessionError: If the browser refuses or cannot be reached
        """
        browser = await self._connected_browser()
        try:
            context = await browser.new_context(ignore_https_errors=self.ignore_https_errors)
        except PlaywrightError as e:
            raise SessionError(f"Cannot create browser context: {e.message}") from e

        try:
            page = await context.new_page()
        except BaseException as e:
            await self._close_context(context)
            if isinstance(e, PlaywrightError):
                raise SessionError(f"Cannot open page: {e.message}") from e
            raise

        target = DebuggingTarget(target_id=f"export-{next(self._ids)}", context=context, page=page)
        logger.debug("Created target %s", target.target_id)
        return target

    async def open_session(self, target: DebuggingTarget) -> PlaywrightDevToolsSession:
        """Open a protocol session bound to the target's page"""
        try:
            cdp = await target.context.new_cdp_session(target.page)
        except PlaywrightError as e:
            raise SessionError(f"Cannot attach to {target.target_id}: {e.message}",
                               target_id=target.target_id) from e
        return PlaywrightDevToolsSession(cdp, target_id=target.target_id)

    async def close_target(self, target: DebuggingTarget) -> None:
        """Close the page together with its browser context"""
        await self._close_context(target.context)
        logger.debug("Closed target %s", target.target_id)

    async def close(self) -> None:
        """Drop the connection to the browser; the browser keeps running"""
        async with self._lock:
            playwright, self._playwright, self._browser = self._playwright, None, None
            if playwright is not None:
                await playwright.stop()
                logger.debug("Disconnected from %s", self.endpoint)

    async def _connected_browser(self) -> Browser:
        async with self._lock:
            if self.connected:
                return self._browser

            if self._playwright is None:
                self._playwright = await async_playwright().start()
            try:
                self._browser = await self._playwright.chromium.connect_over_cdp(
                    self.endpoint, timeout=self.connect_timeout_ms,
                )
            except PlaywrightError as e:
                raise SessionError(f"DevTools endpoint {self.endpoint} unreachable: {e.message}") from e

            logger.info("Connected to browser at %s", self.endpoint)
            return self._browser

    async def _close_context(self, context) -> None:
        if context is None:
            return
        try:
            await context.close()
        except PlaywrightError as e:
            # Already gone (browser restarted or crashed)
            logger.debug("Closing browser context: %s", e.message)
