"""
Browser process launcher.

Spawns the browser as an asyncio subprocess whose stdout/stderr are inherited
from the host process, so browser diagnostics show up in the host's output.
"""

import asyncio
import logging
import os
from typing import List

from ...core.exceptions import BrowserStartupError

logger = logging.getLogger(__name__)


class SubprocessLauncher:
    """Launches the browser binary with asyncio.create_subprocess_exec"""

    async def launch(self, binary: str, args: List[str]) -> asyncio.subprocess.Process:
        """
        Spawn the browser process.

        Raises:
            BrowserStartupError: If the binary cannot be executed
        """
        logger.info("Launching browser: %s %s", os.path.basename(binary), ' '.join(args))
        try:
            # stdout/stderr=None inherits the host's streams
            process = await asyncio.create_subprocess_exec(binary, *args, stdout=None, stderr=None)
        except OSError as e:
            raise BrowserStartupError(f"Cannot execute browser binary {binary}: {e}", binary=binary) from e
        logger.debug("Browser pid %s", process.pid)
        return process
