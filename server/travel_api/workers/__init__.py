"""Background workers for the travel booking API."""

from .base import BaseWorker
from .manager import WorkerManager, worker_manager
from .token_sweep_worker import TokenSweepWorker

__all__ = ["BaseWorker", "TokenSweepWorker", "WorkerManager", "worker_manager"]
