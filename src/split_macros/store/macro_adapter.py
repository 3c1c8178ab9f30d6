"""Read and write whole macro trees against a key-value store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from split_macros.exceptions import MacroFormatError
from split_macros.store.serialization import MacroTreeSerializer

if TYPE_CHECKING:
    from split_macros.domain.split_tree import MacroTree
    from split_macros.store.protocol import KeyValueStore

logger = logging.getLogger(__name__)


class MacroStoreAdapter:
    def __init__(self, store: KeyValueStore, serializer: MacroTreeSerializer | None = None) -> None:
        self._store = store
        self._serializer = serializer or MacroTreeSerializer()

    def get(self, key: str) -> MacroTree | None:
        """Return the stored tree, or ``None`` on a miss.

        A stored value that cannot be decoded is logged and reported as a miss
        so the next rebuild overwrites it. ``StoreUnavailableError`` from the
        backend propagates.
        """
        raw = self._store.get(key)
        if raw is None:
            logger.debug("Macro miss: %s", key)
            return None
        try:
            tree = self._serializer.deserialize(raw)
        except MacroFormatError:
            logger.warning("Discarding undecodable macro value at %s", key, exc_info=True)
            return None
        logger.debug("Macro hit: %s", key)
        return tree

    def put(self, key: str, tree: MacroTree) -> None:
        self._store.set(key, self._serializer.serialize(tree))
        logger.debug("Stored macro %s (%d games)", key, tree.root.game_count)

    def invalidate(self, key: str) -> None:
        self._store.delete(key)
        logger.info("Invalidated macro %s", key)

    def list_keys(self, pattern: str) -> list[str]:
        return self._store.scan(pattern)
