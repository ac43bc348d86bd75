"""Background worker that purges expired bearer tokens."""

import logging

from ..core.observability import metrics_collector
from ..core.tokens import TokenStore
from .base import BaseWorker

logger = logging.getLogger(__name__)


class TokenSweepWorker(BaseWorker):
    """
    Periodically removes expired tokens from the token store.

    Tokens are already rejected on read once expired; sweeping keeps the
    store from growing without bound and refreshes the active-token gauge.
    """

    def __init__(self, token_store: TokenStore, interval_seconds: int = 60):
        super().__init__(name="TokenSweep", interval_seconds=interval_seconds)
        self.token_store = token_store

    async def process(self) -> None:
        removed = await self.token_store.sweep()
        active = await self.token_store.count()
        metrics_collector.set_active_tokens(active)

        if removed > 0:
            logger.info(
                f"Swept {removed} expired tokens",
                extra={
                    "removed_count": removed,
                    "active_count": active,
                    "worker": self.name,
                }
            )
