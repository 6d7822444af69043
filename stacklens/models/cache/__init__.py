"""Stack cache models and storage."""

from stacklens.models.cache.stack_cache import CacheEnvelope, StackCacheStore, now_ms

__all__ = ["CacheEnvelope", "StackCacheStore", "now_ms"]
