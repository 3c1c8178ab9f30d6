from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def scan(self, pattern: str) -> list[str]: ...

    def get_many(self, keys: Sequence[str]) -> list[tuple[str, str]]: ...
