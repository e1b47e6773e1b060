"""Cancellable delayed callbacks used for the computer's deferred move."""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class Cancellable(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Optional[Cancellable]:
        ...


class AsyncioScheduler:
    """Schedule callbacks on an asyncio event loop.

    The loop is looked up when a callback is scheduled, so the scheduler can
    be built before the server starts its loop. Without a running loop nothing
    is scheduled and ``None`` is returned; the caller then has to drive the
    computer's reply itself.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_later(
        self, delay: float, callback: Callable[[], None]
    ) -> Optional[asyncio.TimerHandle]:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.warning("No running event loop; deferred computer move not scheduled")
                return None
        return loop.call_later(max(0.0, delay), callback)
