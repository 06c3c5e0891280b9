"""
Cache Management Module

Memoizes layout results for the HTTP layer:
- Hash-based keys over the canonical request payload
- Entry-bounded in-memory store with least-recently-used eviction
- Hit/miss statistics

FastAPI runs sync endpoints in a thread pool, so every access to the store
goes through one lock. The engine itself stays pure; only callers that want
memoization use this.
"""

import logging
import threading
from collections import OrderedDict
from datetime import datetime
from typing import Any, Dict, Optional

from ..utils import payload_hash

logger = logging.getLogger(__name__)


class CacheManager:
    """In-memory LRU cache keyed by payload hash"""

    def __init__(self, max_entries: int = 256):
        self.max_entries = max_entries
        self.memory_cache: "OrderedDict[str, Any]" = OrderedDict()
        self.cache_metadata: Dict[str, Dict[str, Any]] = {}
        self.misses = 0
        self.lock = threading.Lock()

    def generate_key(self, namespace: str, payload: Any) -> str:
        """Generate cache key from a namespace and a JSON-serializable payload"""
        return f"{namespace}:{payload_hash(payload)}"

    def _evict_oldest(self):
        """Evict least recently used entries until under the entry limit (caller holds the lock)"""
        while len(self.memory_cache) > self.max_entries:
            key, _ = self.memory_cache.popitem(last=False)
            self.cache_metadata.pop(key, None)
            logger.info(f"Cache evicted: {key[:16]}...")

    def get(self, key: str) -> Optional[Any]:
        """Get cached value"""
        with self.lock:
            if key not in self.memory_cache:
                self.misses += 1
                return None
            self.memory_cache.move_to_end(key)
            self.cache_metadata[key]['last_access'] = datetime.now()
            self.cache_metadata[key]['hits'] += 1
            return self.memory_cache[key]

    def set(self, key: str, value: Any):
        """Set cached value"""
        with self.lock:
            self.memory_cache[key] = value
            self.memory_cache.move_to_end(key)
            self.cache_metadata[key] = {
                'last_access': datetime.now(),
                'hits': 0,
                'created': datetime.now()
            }
            self._evict_oldest()

    def clear(self, pattern: Optional[str] = None) -> int:
        """Clear cache entries, all of them or those whose key contains pattern"""
        with self.lock:
            if pattern is None:
                removed = len(self.memory_cache)
                self.memory_cache.clear()
                self.cache_metadata.clear()
                return removed

            keys_to_remove = [k for k in self.memory_cache.keys() if pattern in k]
            for key in keys_to_remove:
                del self.memory_cache[key]
                self.cache_metadata.pop(key, None)
            return len(keys_to_remove)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        with self.lock:
            total_hits = sum(meta['hits'] for meta in self.cache_metadata.values())

            return {
                'entries_count': len(self.memory_cache),
                'max_entries': self.max_entries,
                'total_hits': total_hits,
                'total_misses': self.misses
            }


# Global cache manager
cache_manager = CacheManager()
