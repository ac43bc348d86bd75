"""Registry of the application's background workers."""

import asyncio
import logging
from typing import Any, Dict

from ..core.config import settings
from ..core.tokens import TokenStore, token_store
from .base import BaseWorker
from .token_sweep_worker import TokenSweepWorker

logger = logging.getLogger(__name__)


class WorkerManager:
    """Starts and stops every worker from the application lifespan."""

    def __init__(self, store: TokenStore = token_store):
        self.workers: Dict[str, BaseWorker] = {
            "token_sweep": TokenSweepWorker(store, interval_seconds=settings.token_sweep_interval_seconds),
        }

    async def start_all(self) -> None:
        for worker in self.workers.values():
            await worker.start()
        logger.info("Background workers running", extra={"workers": list(self.workers)})

    async def stop_all(self) -> None:
        running = [worker for worker in self.workers.values() if worker.running]
        results = await asyncio.gather(*(worker.stop() for worker in running), return_exceptions=True)

        for worker, result in zip(running, results):
            if isinstance(result, Exception):
                logger.error(
                    "Worker did not stop cleanly",
                    extra={"worker": worker.name, "error": str(result)}
                )

    def get_worker(self, name: str) -> BaseWorker:
        """Raises KeyError for an unknown worker name."""
        return self.workers[name]

    def get_worker_status(self) -> Dict[str, bool]:
        return {name: worker.running for name, worker in self.workers.items()}

    def describe(self) -> Dict[str, Dict[str, Any]]:
        """Run history of every worker, keyed by name."""
        return {name: worker.describe() for name, worker in self.workers.items()}


worker_manager = WorkerManager()
