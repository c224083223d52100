"""
Browser binary discovery.

Resolution order: explicit path, PDF_EXPORT_CHROME_BIN, system Chrome /
Chromium / Edge installs, then Playwright's bundled Chromium.
"""

import logging
import os
import platform
import shutil
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from ...core.exceptions import BrowserNotFoundError

logger = logging.getLogger(__name__)

MACOS_CANDIDATES = [
    "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
    "/Applications/Google Chrome Canary.app/Contents/MacOS/Google Chrome Canary",
    "/Applications/Chromium.app/Contents/MacOS/Chromium",
    "/Applications/Microsoft Edge.app/Contents/MacOS/Microsoft Edge",
]

LINUX_CANDIDATES = [
    "google-chrome",
    "google-chrome-stable",
    "chromium",
    "chromium-browser",
    "microsoft-edge",
    "microsoft-edge-stable",
]


def locate_executable(path_or_name: str) -> Optional[str]:
    """Return an absolute path for a file path or a name on PATH"""
    if os.path.isfile(path_or_name):
        return path_or_name
    return shutil.which(path_or_name)


def find_system_browser() -> Optional[str]:
    """Find an installed Chrome-family browser, or None"""
    system = platform.system()
    if system == "Darwin":
        for candidate in MACOS_CANDIDATES:
            if os.path.isfile(candidate):
                return candidate
    elif system == "Linux":
        for candidate in LINUX_CANDIDATES:
            path = shutil.which(candidate)
            if path:
                return path
    return None


async def find_playwright_chromium() -> Optional[str]:
    """Path of Playwright's downloaded Chromium, if it has been installed"""
    try:
        async with async_playwright() as playwright:
            path = playwright.chromium.executable_path
    except (PlaywrightError, OSError) as e:
        logger.debug("Playwright Chromium unavailable: %s", e)
        return None
    return path if path and os.path.isfile(path) else None


class BrowserBinaryResolver:
    """Resolves which browser executable to launch"""

    def __init__(self, use_playwright: bool = True):
        self.use_playwright = use_playwright

    async def resolve(self, configured: Optional[str] = None) -> str:
        """
        Resolve the browser executable.

        Args:
            configured: Explicit path or command name

        Returns:
            Path of the executable

        Raises:
            BrowserNotFoundError: If nothing usable is found
        """
        if configured:
            path = locate_executable(configured)
            if not path:
                raise BrowserNotFoundError(f"Configured browser binary not found: {configured}")
            return path

        from_env = os.getenv('PDF_EXPORT_CHROME_BIN')
        if from_env:
            path = locate_executable(from_env)
            if path:
                return path
            logger.warning("PDF_EXPORT_CHROME_BIN=%s does not exist, searching elsewhere", from_env)

        path = find_system_browser()
        if path:
            logger.debug("Using system browser %s", path)
            return path

        if self.use_playwright:
            path = await find_playwright_chromium()
            if path:
                logger.debug("Using Playwright Chromium %s", path)
                return path

        raise BrowserNotFoundError(
            "No Chrome/Chromium binary found. Set chrome_bin, PDF_EXPORT_CHROME_BIN, "
            "or run 'playwright install chromium'"
        )
