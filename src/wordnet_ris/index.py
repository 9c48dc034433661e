"""SynonymIndex: the main entry point of the wordnet-ris library."""

from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Callable, Generator, Iterable
from contextlib import contextmanager
from pathlib import Path
from typing import Any, TypeVar

from wordnet_ris import importer as _importer
from wordnet_ris.cache import DEFAULT_CAPACITY, LRUCache
from wordnet_ris.database import Database, build_casefold_index
from wordnet_ris.exceptions import PersistenceError
from wordnet_ris.models import CacheStats, LookupOptions, LookupResult
from wordnet_ris.storage import DatabaseStore

logger = logging.getLogger(__name__)

_F = TypeVar("_F", bound=Callable[..., Any])


class ReadWriteLock:
    """Many concurrent readers or one writer; waiting writers go first."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def shared(self) -> Generator[None, None, None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def exclusive(self) -> Generator[None, None, None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


def _reads_db(method: _F) -> _F:
    """Decorator: run under the shared side of the database lock."""

    @functools.wraps(method)
    def wrapper(self: SynonymIndex, *args: Any, **kwargs: Any) -> Any:
        with self._lock.shared():
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


def _replaces_db(method: _F) -> _F:
    """Decorator: run under the exclusive side of the database lock."""

    @functools.wraps(method)
    def wrapper(self: SynonymIndex, *args: Any, **kwargs: Any) -> Any:
        with self._lock.exclusive():
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class SynonymIndex:
    """Synonym lookups over a lemma/synset database with an LRU cache.

    With a ``db_path`` the database is backed by a gzip JSON file: it is
    loaded at construction when the file exists, and written on every
    import. Without one the index lives in memory only.
    """

    def __init__(
        self,
        db_path: str | Path | None = None,
        *,
        cache_size: int = DEFAULT_CAPACITY,
    ) -> None:
        self._store = DatabaseStore(db_path) if db_path is not None else None
        self._cache = LRUCache(cache_size)
        self._lock = ReadWriteLock()
        self._db = Database()
        self._fold: dict[str, str] = {}
        if self._store is not None and self._store.exists():
            self.load()

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[_importer.RowLike],
        db_path: str | Path | None = None,
        *,
        cache_size: int = DEFAULT_CAPACITY,
    ) -> SynonymIndex:
        index = cls(db_path, cache_size=cache_size)
        index.import_rows(rows)
        return index

    def close(self) -> None:
        """Drop cached lookups."""
        self._cache.clear()

    def __enter__(self) -> SynonymIndex:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"SynonymIndex({self._store!r}, {self._db!r})"

    @property
    def database(self) -> Database:
        """The live database, for reading only.

        Edits made through this object bypass the case-fold rebuild and the
        cache invalidation; replace the database with ``import_rows`` or
        ``load`` instead.
        """
        return self._db

    @property
    def store(self) -> DatabaseStore | None:
        return self._store

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @_reads_db
    def lookup(
        self,
        lemma: str,
        options: LookupOptions | None = None,
        *,
        case_insensitive: bool | None = None,
        use_cache: bool | None = None,
    ) -> LookupResult | None:
        """Synonyms of ``lemma``, or None if the lemma is unknown.

        Keyword switches override the corresponding ``options`` fields.
        Synonyms are sorted lexicographically and never include the lemma.
        """
        options = options or LookupOptions()
        if case_insensitive is None:
            case_insensitive = options.case_insensitive
        if use_cache is None:
            use_cache = options.use_cache

        resolved = self._resolve(lemma) if case_insensitive else lemma
        entry = self._db.entry(resolved)
        if entry is None:
            return None

        if use_cache:
            cached = self._cache.get(resolved)
            if cached is not None:
                return cached

        result = LookupResult(
            lemma=resolved,
            pos=entry.pos,
            syn=tuple(sorted(self._db.synonyms(resolved))),
        )
        if use_cache:
            self._cache.set(resolved, result)
        return result

    def _resolve(self, lemma: str) -> str:
        if lemma in self._db:
            return lemma
        canonical = self._fold.get(lemma.lower())
        if canonical is None:
            return lemma
        logger.debug(f"Resolved {lemma!r} to {canonical!r}")
        return canonical

    @_reads_db
    def manifest(self) -> list[str]:
        return self._db.manifest()

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()

    @_replaces_db
    def clear_cache(self) -> None:
        self._cache.clear()

    # ------------------------------------------------------------------
    # Import / load / save
    # ------------------------------------------------------------------

    @_replaces_db
    def import_rows(self, rows: Iterable[_importer.RowLike]) -> None:
        """Replace the database with one built from ``rows`` and persist it.

        The new database is built completely before anything is replaced;
        on failure the current database and cache are left as they were.
        """
        db = _importer.build_database(rows)
        if self._store is not None:
            self._store.save(db)
        self._install(db)

    def import_lmf(self, source: str | Path) -> None:
        self.import_rows(_importer.rows_from_lmf(source))

    def import_sqlite(self, source: str | Path, *, lexicon: str | None = None) -> None:
        self.import_rows(_importer.rows_from_sqlite(source, lexicon=lexicon))

    def import_wn(self, lexicon: str | None = None) -> None:
        self.import_rows(_importer.rows_from_wn(lexicon))

    @_replaces_db
    def load(self) -> None:
        """Replace the database with the persisted one."""
        self._install(self._require_store().load())

    @_reads_db
    def save(self) -> None:
        self._require_store().save(self._db)

    def _require_store(self) -> DatabaseStore:
        if self._store is None:
            raise PersistenceError("No database file configured")
        return self._store

    def _install(self, db: Database) -> None:
        # caller holds the exclusive lock
        self._db = db
        self._fold = build_casefold_index(db.lemmas)
        self._cache.clear()
        logger.debug("Lookup cache invalidated")
