"""带过期时间的缓存模块"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass
class CacheEntry:
    """缓存条目"""

    key: str
    value: Any
    stored_at: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now - self.stored_at < self.ttl

    def remaining(self, now: float) -> float:
        return max(0.0, self.ttl - (now - self.stored_at))


@dataclass
class CacheStats:
    """缓存统计"""

    hits: int = 0
    misses: int = 0
    entries: int = 0
    evictions: int = 0

    @property
    def total_requests(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        if not self.total_requests:
            return 0.0
        return self.hits / self.total_requests

    def to_dict(self) -> dict:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "total_requests": self.total_requests,
            "hit_rate": round(self.hit_rate, 4),
            "entries": self.entries,
            "evictions": self.evictions,
        }


class TTLCache:
    """按 key 存储、按条目过期的内存缓存

    时钟可注入，测试中无需真实等待。同一个 key 的并发未命中只会触发一次计算。
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = 1000,
    ):
        if max_entries <= 0:
            raise ValueError("max_entries 必须大于 0")
        self._clock = clock
        self.max_entries = max_entries
        self._entries: dict[str, CacheEntry] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._stats = CacheStats()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and entry.is_fresh(self._clock())

    def _lookup(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return _MISSING
        if not entry.is_fresh(self._clock()):
            del self._entries[key]
            return _MISSING
        return entry.value

    def get(self, key: str, default: Any = None) -> Any:
        """读取缓存，未命中或已过期返回 default"""
        value = self._lookup(key)
        if value is _MISSING:
            self._stats.misses += 1
            logger.debug(f"缓存未命中: {key}")
            return default
        self._stats.hits += 1
        logger.debug(f"缓存命中: {key}")
        return value

    def set(self, key: str, value: Any, ttl: float) -> None:
        """写入缓存，后写覆盖先写"""
        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self.max_entries:
            self._evict()
        self._entries[key] = CacheEntry(
            key=key, value=value, stored_at=self._clock(), ttl=ttl
        )

    def _evict(self) -> None:
        """先清理过期条目，仍然超限时淘汰最早写入的条目"""
        now = self._clock()
        expired = [k for k, e in self._entries.items() if not e.is_fresh(now)]
        for key in expired:
            del self._entries[key]

        while len(self._entries) >= self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            self._stats.evictions += 1
            logger.debug(f"缓存淘汰: {oldest}")

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def invalidate_prefix(self, prefix: str) -> int:
        """删除所有以 prefix 开头的 key，返回删除数量"""
        keys = [k for k in self._entries if k.startswith(prefix)]
        for key in keys:
            del self._entries[key]
        if keys:
            logger.info(f"已清除缓存 {prefix}*: {len(keys)} 条")
        return len(keys)

    def clear(self) -> None:
        self._entries.clear()

    def ttl_remaining(self, key: str) -> float:
        entry = self._entries.get(key)
        if entry is None:
            return 0.0
        return entry.remaining(self._clock())

    def stats(self) -> CacheStats:
        return CacheStats(
            hits=self._stats.hits,
            misses=self._stats.misses,
            entries=len(self._entries),
            evictions=self._stats.evictions,
        )

    async def get_or_set(
        self,
        key: str,
        ttl: float,
        factory: Callable[[], Awaitable[Any]],
        should_cache: Optional[Callable[[Any], bool]] = None,
    ) -> Any:
        """命中则返回缓存值，否则调用 factory 计算并写入

        should_cache 返回 False 时结果不写入缓存，下次调用会重新计算。
        """
        value = self._lookup(key)
        if value is not _MISSING:
            self._stats.hits += 1
            logger.debug(f"缓存命中: {key}")
            return value

        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                # 等锁期间可能已被其他调用写入
                value = self._lookup(key)
                if value is not _MISSING:
                    self._stats.hits += 1
                    return value

                self._stats.misses += 1
                logger.debug(f"缓存未命中: {key}")
                value = await factory()
                if should_cache is None or should_cache(value):
                    self.set(key, value, ttl)
                return value
        finally:
            # 最后一个等待者离开时回收锁，锁表大小只取决于在途的 key
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                self._locks.pop(key, None)
