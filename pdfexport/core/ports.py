"""
Port interfaces for PDF export.

These interfaces define the contracts between the domain layer and the
browser/DevTools infrastructure. They enable dependency inversion and allow
the supervisor and orchestrator to be tested with in-memory fakes.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol

from .domain import DebuggingTarget


EventCallback = Callable[[Dict[str, Any]], Any]


class ProcessLauncherPort(Protocol):
    """Port for spawning the browser binary"""

    async def launch(self, binary: str, args: List[str]) -> Any:
        """
        Spawn the browser process.

        Args:
            binary: Path to the browser executable
            args: Command-line arguments, in order

        Returns:
            Process handle exposing pid, returncode, kill() and wait()
        """
        ...


class BinaryResolverPort(Protocol):
    """Port for locating the browser executable"""

    async def resolve(self, configured: Optional[str] = None) -> str:
        """
        Resolve the executable path.

        Raises:
            BrowserNotFoundError: If no usable browser is available
        """
        ...


class DevToolsReadinessPort(Protocol):
    """Port for checking whether the debugging endpoint accepts connections"""

    async def is_ready(self) -> bool:
        """
        Ask the debugging endpoint for its version metadata.

        Returns:
            True if the browser answered with a debugger URL, False otherwise
        """
        ...


class DevToolsSessionPort(Protocol):
    """Port for one protocol connection bound to a debugging target"""

    async def send(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Send a protocol command and wait for its result.

        Raises:
            ProtocolError: If the browser answered with an error
            SessionClosedError: If the session is closed
        """
        ...

    def on(self, event: str, callback: EventCallback) -> None:
        """Register a listener called for every occurrence of an event"""
        ...

    def wait_for_event(self, event: str) -> Awaitable[Dict[str, Any]]:
        """Future resolved with the params of the next occurrence of an event"""
        ...

    @property
    def closed(self) -> bool:
        ...

    async def close(self) -> None:
        ...


class TargetPort(Protocol):
    """Port for creating and discarding isolated debugging targets"""

    async def create_target(self) -> DebuggingTarget:
        ...

    async def open_session(self, target: DebuggingTarget) -> DevToolsSessionPort:
        ...

    async def close_target(self, target: DebuggingTarget) -> None:
        ...

    async def close(self) -> None:
        """Drop the client connection to the browser without closing the browser"""
        ...
