"""
Timer helpers used by the render race and the readiness poll.
"""

import asyncio
from typing import Any, Awaitable, Tuple


def ms_to_seconds(ms: float) -> float:
    return max(ms, 0) / 1000.0


async def delay(ms: float) -> None:
    """Sleep for the given number of milliseconds"""
    await asyncio.sleep(ms_to_seconds(ms))


async def race(primary: Awaitable[Any], timeout_ms: float) -> Tuple[bool, Any]:
    """
    Race an awaitable against a timer.

    Args:
        primary: Awaitable whose result is wanted
        timeout_ms: Time budget in milliseconds

    Returns:
        (True, result) when primary settled first, (False, None) when the
        timer won. The losing branch is cancelled in both cases.

    Raises:
        Whatever primary raised, when it settled first with an exception
    """
    primary_task = asyncio.ensure_future(primary)
    timer_task = asyncio.ensure_future(delay(timeout_ms))

    try:
        await asyncio.wait({primary_task, timer_task}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        primary_task.cancel()
        timer_task.cancel()
        raise

    if primary_task.done():
        timer_task.cancel()
        return True, primary_task.result()

    primary_task.cancel()
    # Let the cancellation land so nothing is left pending on the loop
    await asyncio.gather(primary_task, return_exceptions=True)
    return False, None
