"""Cache-miss rebuild of macro trees from raw per-game records.

On a miss the rebuilder scans raw storage for the subject under each naming
variant the normalizer produces, stops at the first variant with any keys,
folds every decodable record into a fresh tree and stores it. A subject with
no raw records yields an empty tree that is returned but not stored, so later
ingestion is picked up on the next read.
"""

from __future__ import annotations

import json
import logging
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

from split_macros.aggregation.accumulator import fold
from split_macros.domain.game_record import game_record_from_dict
from split_macros.domain.split_tree import MacroTree
from split_macros.exceptions import RebuildTimeoutError, RecordFormatError
from split_macros.macro.single_flight import SingleFlight
from split_macros.store.keys import macro_key, parse_raw_record_key, raw_record_patterns, raw_season_pattern

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from split_macros.domain.subject import Subject, SubjectKind
    from split_macros.store.macro_adapter import MacroStoreAdapter
    from split_macros.store.protocol import KeyValueStore

logger = logging.getLogger(__name__)


class RawRecordSource(Protocol):
    def scan_raw_records(self, pattern: str) -> list[str]: ...

    def fetch_many(self, keys: Sequence[str]) -> list[tuple[str, str]]: ...


class StoreRawRecordSource:
    """Reads raw game records from the same key-value store as the macros."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def scan_raw_records(self, pattern: str) -> list[str]:
        return self._store.scan(pattern)

    def fetch_many(self, keys: Sequence[str]) -> list[tuple[str, str]]:
        return self._store.get_many(keys)


class _Deadline:
    def __init__(self, key: str, timeout: float | None, clock: Callable[[], float]) -> None:
        self._key = key
        self._timeout = timeout
        self._clock = clock
        self._expires_at = None if timeout is None else clock() + timeout

    def check(self) -> None:
        if self._expires_at is not None and self._clock() > self._expires_at:
            raise RebuildTimeoutError(self._key, self._timeout or 0.0)


class MacroRebuilder:
    def __init__(
        self,
        adapter: MacroStoreAdapter,
        raw_source: RawRecordSource,
        *,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = lambda: datetime.now(UTC),
        single_flight: SingleFlight[MacroTree] | None = None,
    ) -> None:
        self._adapter = adapter
        self._raw_source = raw_source
        self._clock = clock
        self._now = now
        self._single_flight: SingleFlight[MacroTree] = single_flight or SingleFlight()

    def get_or_build(
        self,
        subject: Subject,
        season: int,
        *,
        timeout: float | None = None,
        force: bool = False,
    ) -> MacroTree:
        """Return the stored tree for ``subject``, rebuilding it on a miss.

        Args:
            subject: Player or team to build for.
            season: Season year.
            timeout: Seconds the raw scan and fetch may take; ``None`` is unbounded.
            force: Rebuild even when a stored tree exists.

        Raises:
            StoreUnavailableError: If either store cannot be reached.
            RebuildTimeoutError: If the rebuild exceeds ``timeout``. Nothing is stored.
        """
        key = macro_key(subject, season).encode()
        if not force:
            stored = self._adapter.get(key)
            if stored is not None:
                return stored
        return self._single_flight.do(key, lambda: self._rebuild(key, subject, season, timeout), timeout)

    def _rebuild(self, key: str, subject: Subject, season: int, timeout: float | None) -> MacroTree:
        deadline = _Deadline(key, timeout, self._clock)
        started = self._clock()

        raw_keys: list[str] = []
        for pattern in raw_record_patterns(subject, season):
            raw_keys = self._raw_source.scan_raw_records(pattern)
            deadline.check()
            if raw_keys:
                break
            logger.debug("No raw records under %s", pattern)

        tree = MacroTree(key=key, subject=subject, season=season)
        if not raw_keys:
            logger.info("No raw records for %s; returning empty tree", key)
            return tree

        rows = self._raw_source.fetch_many(raw_keys)
        deadline.check()

        skipped = 0
        for raw_key, value in rows:
            try:
                record = game_record_from_dict(json.loads(value))
            except (ValueError, RecordFormatError) as e:
                skipped += 1
                logger.warning("Skipping malformed raw record %s: %s", raw_key, e)
                continue
            fold(tree, record)

        if tree.is_empty:
            logger.info("No usable raw records for %s (%d skipped)", key, skipped)
            return tree

        tree.last_updated = self._now().isoformat()
        self._adapter.put(key, tree)
        logger.info(
            "Rebuilt %s from %d records in %.3fs (%d skipped)",
            key,
            len(rows) - skipped,
            self._clock() - started,
            skipped,
        )
        return tree

    def build_all(self, season: int, kind: SubjectKind) -> list[MacroTree]:
        """Force-rebuild every subject of ``kind`` with raw records in ``season``."""
        subjects: dict[str, Subject] = {}
        for raw_key in self._raw_source.scan_raw_records(raw_season_pattern(season, kind)):
            parsed = parse_raw_record_key(raw_key)
            if parsed is None or parsed.season != season:
                continue
            subject = parsed.subject()
            subjects.setdefault(macro_key(subject, season).encode(), subject)

        logger.info("Building %d %s macros for %d", len(subjects), kind.value, season)
        return [self.get_or_build(subjects[key], season, force=True) for key in sorted(subjects)]
