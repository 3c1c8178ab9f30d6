import threading
from collections.abc import Sequence
from fnmatch import fnmatchcase

from split_macros.exceptions import StoreUnavailableError


class InMemoryKeyValueStore:
    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data or {})
        self.get_calls: list[str] = []
        self.scan_calls: list[str] = []
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            self.get_calls.append(key)
            return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self.data[key] = value

    def set_many(self, items: Sequence[tuple[str, str]]) -> None:
        with self._lock:
            self.data.update(items)

    def delete(self, key: str) -> None:
        with self._lock:
            self.data.pop(key, None)

    def scan(self, pattern: str) -> list[str]:
        with self._lock:
            self.scan_calls.append(pattern)
            return sorted(key for key in self.data if fnmatchcase(key, pattern))

    def get_many(self, keys: Sequence[str]) -> list[tuple[str, str]]:
        with self._lock:
            return [(key, self.data[key]) for key in keys if key in self.data]

    def close(self) -> None:
        pass

    def macro_keys(self) -> list[str]:
        return sorted(key for key in self.data if key.startswith("splits:"))


class UnavailableKeyValueStore:
    def get(self, key: str) -> str | None:
        raise StoreUnavailableError("store down")

    def set(self, key: str, value: str) -> None:
        raise StoreUnavailableError("store down")

    def delete(self, key: str) -> None:
        raise StoreUnavailableError("store down")

    def scan(self, pattern: str) -> list[str]:
        raise StoreUnavailableError("store down")

    def get_many(self, keys: Sequence[str]) -> list[tuple[str, str]]:
        raise StoreUnavailableError("store down")


class ScanFailingKeyValueStore(InMemoryKeyValueStore):
    """Macro reads succeed; raw scans fail."""

    def scan(self, pattern: str) -> list[str]:
        raise StoreUnavailableError("raw store down")


class GatedScanKeyValueStore(InMemoryKeyValueStore):
    """Blocks every scan until ``gate`` is set."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        super().__init__(data)
        self.gate = threading.Event()

    def scan(self, pattern: str) -> list[str]:
        with self._lock:
            self.scan_calls.append(pattern)
        self.gate.wait(timeout=5)
        with self._lock:
            return sorted(key for key in self.data if fnmatchcase(key, pattern))
