"""
Browser process supervisor.

Owns the single browser process shared by every export of an exporter (or of
several exporters, when they are given the same supervisor). Startup is lazy,
memoized and bounded; disposal is explicit.
"""

import asyncio
import logging
from typing import Optional

from .domain import BrowserProcess, ExporterConfig
from .exceptions import BrowserStartupError
from .ports import BinaryResolverPort, DevToolsReadinessPort, ProcessLauncherPort
from .timing import delay, ms_to_seconds

logger = logging.getLogger(__name__)


class BrowserSupervisor:
    """
    Starts the browser at most once and hands the running process to callers.

    Concurrent ensure_started() calls all await the same start attempt. The
    attempt is recorded before its first suspension point, so under asyncio no
    lock is needed.
    """

    def __init__(
        self,
        config: ExporterConfig,
        launcher: ProcessLauncherPort,
        resolver: BinaryResolverPort,
        readiness: DevToolsReadinessPort,
    ):
        """
        Initialize supervisor.

        Args:
            config: Exporter configuration (binary, port, startup bounds)
            launcher: Spawns the browser process
            resolver: Locates the browser binary
            readiness: Checks whether the debugging endpoint accepts connections
        """
        self.config = config
        self.launcher = launcher
        self.resolver = resolver
        self.readiness = readiness
        self.spawn_count = 0
        self._start_task: Optional[asyncio.Task] = None
        self._process: Optional[BrowserProcess] = None

    @property
    def is_running(self) -> bool:
        return self._process is not None and self._process.is_alive

    @property
    def started(self) -> bool:
        """True once a start attempt has been made and not yet disposed"""
        return self._start_task is not None

    @property
    def process(self) -> Optional[BrowserProcess]:
        return self._process

    async def ensure_started(self) -> BrowserProcess:
        """
        Return the running browser, starting it if needed.

        Raises:
            BrowserStartupError: If the browser exits or stays unreachable
                past startup_timeout_ms. The failed attempt is forgotten so the
                next call starts over.
        """
        task = self._start_task
        if task is not None and task.done() and not task.cancelled() and task.exception() is None:
            if not task.result().is_alive:
                logger.warning("Browser pid %s exited unexpectedly, starting a new one", task.result().pid)
                self._process = None
                task = None

        if task is None:
            task = asyncio.ensure_future(self._start())
            self._start_task = task

        try:
            return await asyncio.shield(task)
        except Exception:
            if self._start_task is task:
                self._start_task = None
            raise

    async def dispose(self) -> None:
        """
        Kill the browser process.

        Waits for an in-flight start attempt first. Calling dispose() before
        anything was started, or a second time, only logs.
        """
        task = self._start_task
        if task is None:
            logger.warning("dispose() called but no browser was started")
            return
        self._start_task = None

        try:
            process = await task
        except Exception as e:
            # The failed attempt already killed its process
            logger.debug("dispose(): start attempt had failed: %s", e)
            return

        self._process = None
        await self._terminate(process)
        logger.info("Browser pid %s terminated", process.pid)

    async def _start(self) -> BrowserProcess:
        binary = await self.resolver.resolve(self.config.chrome_bin)
        args = self.config.build_launch_args()
        handle = await self.launcher.launch(binary, args)
        self.spawn_count += 1
        process = BrowserProcess(handle=handle, binary=binary, args=args, endpoint=self.config.endpoint)

        try:
            await self._wait_until_ready(process)
        except BaseException:
            await self._terminate(process)
            raise

        self._process = process
        logger.info("Browser pid %s ready at %s", process.pid, process.endpoint)
        return process

    async def _wait_until_ready(self, process: BrowserProcess) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + ms_to_seconds(self.config.startup_timeout_ms)
        attempts = 0

        while True:
            await delay(self.config.poll_interval_ms)
            attempts += 1

            if not process.is_alive:
                raise BrowserStartupError(
                    f"Browser exited during startup (code {process.handle.returncode})",
                    endpoint=process.endpoint,
                )
            if await self.readiness.is_ready():
                logger.debug("Browser answered after %d check(s)", attempts)
                return
            if loop.time() >= deadline:
                raise BrowserStartupError(
                    f"Browser not reachable at {process.endpoint} after "
                    f"{self.config.startup_timeout_ms}ms ({attempts} checks)",
                    endpoint=process.endpoint,
                    attempts=attempts,
                )

    @staticmethod
    async def _terminate(process: BrowserProcess) -> None:
        handle = process.handle
        if handle.returncode is None:
            try:
                handle.kill()
            except ProcessLookupError:
                pass
        await handle.wait()
