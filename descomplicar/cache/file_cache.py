"""JSON file cache with per-key expiration.

Each entry lives in ``<cache_dir>/<key>.json`` as
``{"lastUpdated": <ISO-8601 UTC>, "data": <value>}``. No locking is taken:
concurrent writers to one key race and the last one wins, and a torn or
unreadable file reads as a miss.
"""
from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Optional, Union

from loguru import logger

from descomplicar.cache.keys import FipeCacheKey
from descomplicar.config import get_settings

CacheKey = Union[str, FipeCacheKey]


class CacheStatus(enum.Enum):
    hit = "hit"
    miss = "miss"
    expired = "expired"
    corrupt = "corrupt"


@dataclass(frozen=True)
class CacheLookup:
    status: CacheStatus
    data: Any = None

    @property
    def is_hit(self) -> bool:
        return self.status is CacheStatus.hit


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FileCache:
    def __init__(
        self,
        cache_dir: Union[str, Path],
        default_ttl: timedelta,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.cache_dir = Path(cache_dir)
        self.default_ttl = default_ttl
        self._clock = clock or _utc_now

    def _path_for(self, key: CacheKey) -> Path:
        name = key.as_filename() if isinstance(key, FipeCacheKey) else key
        return self.cache_dir / f"{name}.json"

    def lookup(self, key: CacheKey, ttl: Optional[timedelta] = None) -> CacheLookup:
        """Read an entry, telling apart absent, expired and corrupt entries."""
        path = self._path_for(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return CacheLookup(CacheStatus.miss)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cache read failed for {path.name}: {e}")
            return CacheLookup(CacheStatus.corrupt)

        try:
            entry = json.loads(raw)
            last_updated = datetime.fromisoformat(entry["lastUpdated"])
            data = entry["data"]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Corrupt cache entry {path.name}: {e}")
            return CacheLookup(CacheStatus.corrupt)

        if last_updated.tzinfo is None:
            last_updated = last_updated.replace(tzinfo=timezone.utc)

        age = self._clock() - last_updated
        if age > (ttl if ttl is not None else self.default_ttl):
            return CacheLookup(CacheStatus.expired)

        return CacheLookup(CacheStatus.hit, data)

    def get(self, key: CacheKey, ttl: Optional[timedelta] = None) -> Any:
        """Cached value, or None on miss / expiry / corruption."""
        result = self.lookup(key, ttl)
        if not result.is_hit:
            logger.debug(f"Cache {result.status.value}: {key}")
            return None
        return result.data

    def set(self, key: CacheKey, value: Any) -> None:
        """Overwrite an entry. Failures are logged, never raised."""
        path = self._path_for(key)
        entry = {"lastUpdated": self._clock().isoformat(), "data": value}
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(entry, indent=2, ensure_ascii=False), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error saving cache for {key}: {e}")

    def clear(self, key: Optional[CacheKey] = None) -> None:
        """Remove one entry, or every entry when no key is given."""
        try:
            if key is not None:
                self._path_for(key).unlink(missing_ok=True)
                return
            if not self.cache_dir.exists():
                return
            for path in self.cache_dir.glob("*.json"):
                path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Error clearing cache: {e}")


@lru_cache
def get_file_cache() -> FileCache:
    settings = get_settings()
    return FileCache(settings.cache_dir, timedelta(days=settings.fipe_catalog_ttl_days))


def get_cached_data(key: CacheKey, ttl: Optional[timedelta] = None) -> Any:
    return get_file_cache().get(key, ttl)


def set_cached_data(key: CacheKey, value: Any) -> None:
    get_file_cache().set(key, value)


def clear_cache(key: Optional[CacheKey] = None) -> None:
    get_file_cache().clear(key)
