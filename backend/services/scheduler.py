"""Cancellable delayed-callback scheduling for chat replies."""
import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class AsyncioScheduler:
    """
    Schedule callbacks on an asyncio event loop.

    Any object with a ``call_later(delay, callback)`` method returning a handle
    with ``cancel()`` can stand in for this class.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        """
        Args:
            loop: Loop to schedule on (defaults to the loop running at call time)
        """
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        """
        Run ``callback`` after ``delay`` seconds.

        Raises:
            RuntimeError: If no loop was given and none is running
        """
        loop = self._loop or asyncio.get_running_loop()
        logger.debug(f"Scheduling callback in {delay:.3f}s")
        return loop.call_later(delay, callback)
