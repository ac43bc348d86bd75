"""Periodic background worker base class."""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class BaseWorker(ABC):
    """
    Runs ``process`` every ``interval_seconds`` on the event loop.

    The first iteration runs as soon as the worker starts. A failing
    iteration is logged and counted; the loop keeps its schedule. Each worker
    keeps a small run history that the health ping reports.
    """

    def __init__(self, name: str, interval_seconds: int = 60):
        self.name = name
        self.interval_seconds = interval_seconds
        self.iterations = 0
        self.failures = 0
        self.last_run_at: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @abstractmethod
    async def process(self) -> None:
        """Do one unit of work."""

    async def run_once(self) -> bool:
        """
        Run a single iteration and record its outcome.

        Returns:
            True if ``process`` completed, False if it raised
        """
        started = time.monotonic()
        self.last_run_at = datetime.now(timezone.utc)
        self.iterations += 1
        try:
            await self.process()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.failures += 1
            self.last_error = str(e)
            logger.error(
                f"{self.name} worker iteration failed",
                exc_info=True,
                extra={"worker": self.name, "failures": self.failures}
            )
            return False

        self.last_error = None
        logger.debug(
            f"{self.name} worker iteration completed",
            extra={"worker": self.name, "duration_seconds": time.monotonic() - started}
        )
        return True

    async def start(self) -> None:
        if self.running:
            logger.warning(f"{self.name} worker is already running")
            return

        self._task = asyncio.create_task(self._loop(), name=f"worker:{self.name}")
        logger.info(f"{self.name} worker started with {self.interval_seconds}s interval")

    async def stop(self) -> None:
        """Cancel the loop and wait for it to exit."""
        if self._task is None:
            logger.warning(f"{self.name} worker is not running")
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

        logger.info(f"{self.name} worker stopped")

    async def _loop(self) -> None:
        while True:
            started = time.monotonic()
            await self.run_once()
            await asyncio.sleep(max(0.0, self.interval_seconds - (time.monotonic() - started)))

    def describe(self) -> Dict[str, Any]:
        return {
            "running": self.running,
            "iterations": self.iterations,
            "failures": self.failures,
            "last_run_at": self.last_run_at,
            "last_error": self.last_error,
        }
