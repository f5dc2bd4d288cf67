"""
Key-value storage adapters.
"""

from .kv_store import KeyValueStore, RedisStore, MemoryStore, build_store

__all__ = ["KeyValueStore", "RedisStore", "MemoryStore", "build_store"]
