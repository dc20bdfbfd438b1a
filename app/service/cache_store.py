"""
Single-slot persistence for the last fetched node dataset.

Reads fail soft: anything that cannot be loaded is reported as no cache.
Writes replace the whole document and report success as a boolean.
"""
import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Protocol

import aiofiles
import aiofiles.os

from app.model.node import CacheEntry
from utils import traceroot_wrapper as traceroot

logger = traceroot.get_logger("cache_store")

CACHE_DURATION = timedelta(hours=6)


class CacheStore(Protocol):
    async def read(self) -> CacheEntry | None: ...

    async def write(self, entry: CacheEntry) -> bool: ...


def is_cache_valid(entry: CacheEntry | None, now: datetime, freshness_window: timedelta = CACHE_DURATION) -> bool:
    if entry is None or entry.last_updated is None:
        return False
    return now - entry.last_updated < freshness_window


class JsonFileCacheStore:
    """Cache kept in one JSON file, replaced atomically on every write."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    @property
    def tmp_path(self) -> Path:
        return self.path.with_name(f"{self.path.name}.tmp")

    async def read(self) -> CacheEntry | None:
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Error reading cache", extra={"path": str(self.path), "error": str(e)})
            return None

        try:
            return CacheEntry.model_validate(json.loads(raw))
        except ValueError as e:
            # JSONDecodeError and ValidationError are both ValueErrors
            logger.warning("Ignoring unreadable cache file", extra={"path": str(self.path), "error": str(e)})
            return None

    async def write(self, entry: CacheEntry) -> bool:
        payload = json.dumps(entry.model_dump(mode="json", by_alias=True), indent=2)
        try:
            await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
            async with aiofiles.open(self.tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
            await aiofiles.os.replace(self.tmp_path, self.path)
        except OSError as e:
            logger.error(f"Error writing cache: {e}", extra={"path": str(self.path)})
            try:
                if await aiofiles.os.path.exists(self.tmp_path):
                    await aiofiles.os.remove(self.tmp_path)
            except OSError:
                pass
            return False
        logger.debug("Cache written", extra={"path": str(self.path), "node_count": len(entry.data or [])})
        return True


class InMemoryCacheStore:
    """Process-local cache with the same contract as the file store."""

    def __init__(self, entry: CacheEntry | None = None):
        self._entry = entry.model_copy(deep=True) if entry is not None else None

    async def read(self) -> CacheEntry | None:
        return self._entry.model_copy(deep=True) if self._entry is not None else None

    async def write(self, entry: CacheEntry) -> bool:
        self._entry = entry.model_copy(deep=True)
        return True
