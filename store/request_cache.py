"""
进程内请求缓存：按请求指纹保存等时圈响应，带有效期和容量上限。
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from .fingerprint import build_request_fingerprint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    created_at: float


class RequestCache:
    """
    TTL 缓存。

    - 条目在 ``now - created_at >= ttl`` 时视为不存在，并在下次查询时惰性删除；
    - ``max_entries > 0`` 时超出容量淘汰最早写入的条目，``0`` 表示不限制；
    - 同一键的并发未命中不加锁，最后写入者生效。
    """

    def __init__(
        self,
        ttl_s: float = 3600,
        max_entries: int = 0,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_s = ttl_s
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def key(transport: str, locations: Sequence[Sequence[float]], ranges: Sequence[float]) -> str:
        return build_request_fingerprint(transport, locations, ranges)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.created_at >= self.ttl_s:
                del self._entries[key]
                logger.debug("缓存已过期: %s", key)
                return None
            return entry.value

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(key=key, value=value, created_at=self._clock())
            while self.max_entries and len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("缓存容量已满，淘汰: %s", evicted)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
