from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from split_macros.config import Settings, StoreBackend
from split_macros.macro.rebuilder import MacroRebuilder, StoreRawRecordSource
from split_macros.services.macro_query import MacroQueryService
from split_macros.store.macro_adapter import MacroStoreAdapter
from split_macros.store.redis_store import RedisKeyValueStore
from split_macros.store.sqlite_store import SqliteKeyValueStore


def create_store(settings: Settings) -> SqliteKeyValueStore | RedisKeyValueStore:
    match settings.backend:
        case StoreBackend.REDIS:
            return RedisKeyValueStore.from_url(settings.redis_url)
        case _:
            return SqliteKeyValueStore(settings.sqlite_path)


@dataclass(frozen=True)
class MacroContext:
    store: SqliteKeyValueStore | RedisKeyValueStore
    adapter: MacroStoreAdapter
    rebuilder: MacroRebuilder
    service: MacroQueryService


@contextmanager
def build_macro_context(settings: Settings) -> Iterator[MacroContext]:
    """Composition-root context manager: opens the store, wires the query service, closes the store."""
    store = create_store(settings)
    try:
        adapter = MacroStoreAdapter(store)
        rebuilder = MacroRebuilder(adapter, StoreRawRecordSource(store))
        yield MacroContext(
            store=store,
            adapter=adapter,
            rebuilder=rebuilder,
            service=MacroQueryService(adapter, rebuilder, timeout=settings.rebuild_timeout),
        )
    finally:
        store.close()
