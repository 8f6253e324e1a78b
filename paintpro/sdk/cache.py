"""
Client-side query cache.

Entries are keyed by request identity (path plus query params). Each key
tracks a generation counter: when two loads for the same key overlap, only
the response of the most recently started one is stored.
"""
import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..logging import structlog
from .api import ApiClient


QueryKey = Tuple[str, Tuple[Tuple[str, Any], ...]]
Listener = Callable[[Any], None]


def query_key(path: str, params: Optional[dict] = None) -> QueryKey:
    items = tuple(sorted((k, v) for k, v in (params or {}).items() if v is not None))
    return (path.rstrip("/") or "/", items)


def _matches(path: str, prefix: str) -> bool:
    prefix = prefix.rstrip("/")
    return path == prefix or path.startswith(prefix + "/")


@dataclass
class CacheEntry:
    data: Any = None
    loaded: bool = False
    stale: bool = False
    error: Optional[Exception] = None


class QueryCache:
    def __init__(self, api: ApiClient):
        self.api = api
        self._entries: Dict[QueryKey, CacheEntry] = {}
        self._generations: Dict[QueryKey, int] = {}
        self._listeners: Dict[QueryKey, List[Listener]] = {}
        self.log = structlog.get_logger().bind(component="query_cache")

    def peek(self, path: str, params: Optional[dict] = None) -> Optional[CacheEntry]:
        return self._entries.get(query_key(path, params))

    async def fetch(self, path: str, params: Optional[dict] = None, force: bool = False) -> Any:
        key = query_key(path, params)
        entry = self._entries.get(key)
        if entry is not None and entry.loaded and not entry.stale and not force:
            return entry.data
        return await self._load(key)

    async def _load(self, key: QueryKey) -> Any:
        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation
        path, params = key
        entry = self._entries.setdefault(key, CacheEntry())
        try:
            data = await self.api.get(path, params=dict(params) or None)
        except Exception as exc:
            if self._generations.get(key) == generation:
                entry.error = exc
            raise
        if self._generations.get(key) != generation:
            # a newer load for this key started while this one was in flight
            self.log.debug("query_response_discarded", path=path, generation=generation)
            return entry.data if entry.loaded else data
        entry.data = data
        entry.loaded = True
        entry.stale = False
        entry.error = None
        self._notify(key, data)
        return data

    def _notify(self, key: QueryKey, data: Any) -> None:
        for listener in list(self._listeners.get(key, [])):
            listener(data)

    def subscribe(self, path: str, params: Optional[dict], listener: Listener) -> Callable[[], None]:
        """Register a view for refreshes of one query. Returns the unsubscribe callable."""
        key = query_key(path, params)
        self._listeners.setdefault(key, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(key, [])
            if listener in listeners:
                listeners.remove(listener)
            if not listeners:
                self._listeners.pop(key, None)

        return unsubscribe

    async def invalidate(self, *prefixes: str) -> List[Any]:
        """
        Mark every entry under the given path prefixes stale and refetch the
        ones a view is subscribed to.

        Refetches run concurrently and independently: a failure is logged,
        leaves that entry's previous data in place and does not cancel the
        others. Returns the refetch outcomes (data or exception) in key order.
        """
        keys = [key for key in self._entries if any(_matches(key[0], prefix) for prefix in prefixes)]
        for key in keys:
            self._entries[key].stale = True
        subscribed = [key for key in keys if self._listeners.get(key)]
        if not subscribed:
            return []
        results = await asyncio.gather(*(self._load(key) for key in subscribed), return_exceptions=True)
        for key, result in zip(subscribed, results):
            if isinstance(result, Exception):
                self.log.warning("query_refetch_failed", path=key[0], error=str(result))
        return list(results)

    def clear(self) -> None:
        self._entries.clear()
        self._generations.clear()
