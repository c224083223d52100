"""
DevTools protocol session.

Implements DevToolsSessionPort on top of a Playwright CDPSession attached to
one page. Playwright owns the transport; this adapter maps its errors onto the
session error taxonomy and keeps track of listeners and one-shot waiters so
closing the session leaves nothing pending.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Set

from playwright.async_api import CDPSession, Error as PlaywrightError

from ...core.exceptions import ProtocolError, SessionClosedError
from ...core.ports import EventCallback

logger = logging.getLogger(__name__)


class PlaywrightDevToolsSession:
    """A protocol session bound to a single debugging target"""

    def __init__(self, cdp: CDPSession, target_id: Optional[str] = None):
        self.target_id = target_id
        self._cdp = cdp
        self._waiters: List[asyncio.Future] = []
        self._callback_tasks: Set[asyncio.Task] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Send a protocol command and wait for its result.

        Raises:
            ProtocolError: If the browser answered with an error
            SessionClosedError: If the session is closed or the page went away
        """
        if self._closed:
            raise SessionClosedError(f"Session is closed, cannot send {method}", target_id=self.target_id)

        logger.debug("-> %s %s", self.target_id, method)
        try:
            result = await self._cdp.send(method, params or {})
        except PlaywrightError as e:
            if self._closed:
                raise SessionClosedError(f"Session closed before {method} completed",
                                         target_id=self.target_id) from e
            raise ProtocolError(method, e.message, target_id=self.target_id) from e
        return result or {}

    def on(self, event: str, callback: EventCallback) -> None:
        """Register a listener for every occurrence of an event; coroutine results are scheduled"""

        def dispatch(params: Optional[Dict[str, Any]] = None) -> None:
            if self._closed:
                return
            try:
                result = callback(params or {})
            except Exception:
                logger.exception("Listener for %s failed", event)
                return
            if asyncio.iscoroutine(result):
                task = asyncio.ensure_future(result)
                self._callback_tasks.add(task)
                task.add_done_callback(self._on_callback_done)

        self._cdp.on(event, dispatch)

    def wait_for_event(self, event: str) -> asyncio.Future:
        """Future resolved with the params of the next occurrence of an event"""
        future = asyncio.get_running_loop().create_future()
        if self._closed:
            future.set_exception(SessionClosedError(f"Session is closed, cannot wait for {event}",
                                                    target_id=self.target_id))
            return future

        def resolve(params: Optional[Dict[str, Any]] = None) -> None:
            if not future.done():
                future.set_result(params or {})

        self._waiters.append(future)
        future.add_done_callback(self._forget_waiter)
        self._cdp.once(event, resolve)
        return future

    async def close(self) -> None:
        """Detach from the page and cancel anything still waiting on it"""
        if self._closed:
            return
        self._closed = True

        for waiter in list(self._waiters):
            waiter.cancel()
        for task in list(self._callback_tasks):
            task.cancel()

        try:
            await self._cdp.detach()
        except PlaywrightError as e:
            # Page or context already gone
            logger.debug("Detaching session from %s: %s", self.target_id, e.message)
        logger.debug("Closed DevTools session on %s", self.target_id)

    def _forget_waiter(self, future: asyncio.Future) -> None:
        if future in self._waiters:
            self._waiters.remove(future)

    def _on_callback_done(self, task: asyncio.Task) -> None:
        self._callback_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("Event handler on %s failed: %s", self.target_id, error)
