"""Shared pytest fixtures for test modules."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from split_macros.macro.rebuilder import MacroRebuilder, StoreRawRecordSource
from split_macros.store.macro_adapter import MacroStoreAdapter
from tests.fakes.store import InMemoryKeyValueStore

if TYPE_CHECKING:
    from split_macros.store.protocol import KeyValueStore


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def adapter(store: KeyValueStore) -> MacroStoreAdapter:
    return MacroStoreAdapter(store)


@pytest.fixture
def rebuilder(store: KeyValueStore, adapter: MacroStoreAdapter) -> MacroRebuilder:
    return MacroRebuilder(adapter, StoreRawRecordSource(store))
