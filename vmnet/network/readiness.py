"""Bounded readiness polling for backend request objects.

Backends provision interfaces asynchronously and flip a Ready condition
once done. The waiter polls a check until it reports ready, the check
raises, the retry timeout elapses, or the caller signals cancellation.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from vmnet.errors import InterfaceWaitCancelledError, NotReadyError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ReadinessResult(Generic[T]):
    """Result of a single readiness check."""

    is_ready: bool
    message: str = ""  # Last observed condition reason when not ready
    value: Optional[T] = None


ReadinessCheck = Callable[[], Awaitable[ReadinessResult[Any]]]


async def wait_until_ready(
    check: ReadinessCheck,
    *,
    timeout: float,
    interval: float,
    description: str,
    cancel_event: asyncio.Event | None = None,
    started: float | None = None,
) -> Any:
    """Poll check until it reports ready and return its value.

    The first poll happens immediately. Exceptions raised by check are
    terminal and propagate unchanged.

    Args:
        check: Coroutine function returning a ReadinessResult
        timeout: Seconds to keep polling before giving up
        interval: Seconds between polls
        description: Name of the thing being waited on (the interface name)
        cancel_event: Optional event; once set, the wait stops after the
            current poll and InterfaceWaitCancelledError is raised
        started: time.monotonic() value the timeout and elapsed time are
            measured from; defaults to now. A deadline already in the past
            still gets one poll.

    Raises:
        NotReadyError: The check never reported ready within timeout
        InterfaceWaitCancelledError: cancel_event was set
    """
    start = time.monotonic() if started is None else started
    deadline = start + timeout
    attempts = 0

    while True:
        result = await check()
        attempts += 1
        if result.is_ready:
            logger.debug(
                f"{description} ready after {attempts} poll(s), "
                f"{time.monotonic() - start:.2f}s"
            )
            return result.value

        logger.debug(f"{description} not ready (attempt {attempts}): {result.message}")

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            elapsed = time.monotonic() - start
            logger.warning(f"Timeout after {elapsed:.1f}s waiting for {description}")
            raise NotReadyError(description, elapsed, result.message)

        if await _sleep_or_cancelled(min(interval, remaining), cancel_event):
            raise InterfaceWaitCancelledError(description, time.monotonic() - start)


async def _sleep_or_cancelled(delay: float, cancel_event: asyncio.Event | None) -> bool:
    """Sleep for delay seconds; return True if cancel_event fired first."""
    if cancel_event is None:
        await asyncio.sleep(delay)
        return False
    if cancel_event.is_set():
        return True
    try:
        await asyncio.wait_for(cancel_event.wait(), timeout=delay)
    except asyncio.TimeoutError:
        return False
    return True
