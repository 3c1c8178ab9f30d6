from split_macros.store.macro_adapter import MacroStoreAdapter
from split_macros.store.protocol import KeyValueStore
from split_macros.store.redis_store import RedisKeyValueStore
from split_macros.store.sqlite_store import SqliteKeyValueStore

__all__ = ["KeyValueStore", "MacroStoreAdapter", "RedisKeyValueStore", "SqliteKeyValueStore"]
