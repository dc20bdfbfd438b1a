"""
Stale-while-revalidate access to the cached node dataset.

Fresh cache is returned as is. Stale cache is returned immediately while a
single background refresh replaces it. With no cache the request waits for
a synchronous fetch.
"""
import asyncio
from datetime import datetime, timedelta, timezone
from typing import Callable, Protocol

from app.exception.exception import FetchError
from app.model.node import CacheEntry, EnrichedNode, NodeDataResult
from app.service.cache_store import CACHE_DURATION, CacheStore, is_cache_valid
from utils import traceroot_wrapper as traceroot

logger = traceroot.get_logger("refresh_coordinator")


class NodeFetcher(Protocol):
    async def fetch(self) -> list[EnrichedNode]: ...


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RefreshCoordinator:
    def __init__(
        self,
        store: CacheStore,
        fetcher: NodeFetcher,
        freshness_window: timedelta = CACHE_DURATION,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.fetcher = fetcher
        self.freshness_window = freshness_window
        self.clock = clock
        # Single background slot; None when no refresh is running
        self._refresh_task: asyncio.Task | None = None

    @property
    def refresh_in_flight(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    async def _fetch_entry(self) -> CacheEntry:
        data = await self.fetcher.fetch()
        return CacheEntry(last_updated=self.clock(), data=data)

    async def _refresh(self) -> None:
        try:
            logger.info("Refreshing node data...")
            entry = await self._fetch_entry()
            if await self.store.write(entry):
                logger.info("Node data refreshed and cached successfully", extra={"node_count": len(entry.data)})
            else:
                logger.warning("Node data refreshed but could not be cached")
        except Exception as e:
            logger.error(f"Error refreshing node data: {e}", exc_info=True)
        finally:
            self._refresh_task = None

    def trigger_refresh(self) -> bool:
        """Start a background refresh unless one is already running."""
        if self.refresh_in_flight:
            logger.debug("Refresh already in flight, not starting another")
            return False
        self._refresh_task = asyncio.create_task(self._refresh())
        return True

    async def get_node_data(self) -> NodeDataResult:
        cache = await self.store.read()

        if cache is not None and cache.data is not None:
            if is_cache_valid(cache, self.clock(), self.freshness_window):
                return NodeDataResult(data=cache.data, last_updated=cache.last_updated, from_cache=True)

            self.trigger_refresh()
            return NodeDataResult(data=cache.data, last_updated=cache.last_updated, from_cache=True, stale=True)

        try:
            entry = await self._fetch_entry()
        except Exception as e:
            logger.error(f"Failed to fetch node data with no cache available: {e}")
            raise FetchError("Failed to fetch node data and no cache available") from e

        if not await self.store.write(entry):
            logger.warning("Returning fresh node data that could not be cached")
        return NodeDataResult(data=entry.data, last_updated=entry.last_updated, from_cache=False)

    async def shutdown(self) -> None:
        task = self._refresh_task
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
