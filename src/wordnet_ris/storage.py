"""Persistence of the synonym database as gzip-compressed JSON."""

from __future__ import annotations

import gzip
import json
import logging
import os
import tempfile
import zlib
from pathlib import Path

from wordnet_ris.database import Database
from wordnet_ris.exceptions import PersistenceError

logger = logging.getLogger(__name__)

COMPRESS_LEVEL = 9


def serialize(db: Database) -> bytes:
    """Encode a database as compact UTF-8 JSON."""
    return json.dumps(
        db.to_dict(), ensure_ascii=False, separators=(",", ":")
    ).encode("utf-8")


def deserialize(data: bytes) -> Database:
    """Decode JSON bytes produced by :func:`serialize`."""
    try:
        raw = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise PersistenceError(f"Invalid database JSON: {e}") from e
    return Database.from_dict(raw)


def compress(data: bytes) -> bytes:
    return gzip.compress(data, compresslevel=COMPRESS_LEVEL)


def decompress(data: bytes) -> bytes:
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as e:
        raise PersistenceError(f"Failed to decompress database: {e}") from e


class DatabaseStore:
    """A database file on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"DatabaseStore({str(self.path)!r})"

    def exists(self) -> bool:
        return self.path.is_file()

    def read_bytes(self) -> bytes:
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise PersistenceError(f"Cannot read {self.path}: {e}") from e

    def write_bytes(self, data: bytes) -> None:
        """Write atomically: temp file in the same directory, then rename."""
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=directory, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise PersistenceError(f"Cannot write {self.path}: {e}") from e

    def load(self) -> Database:
        db = deserialize(decompress(self.read_bytes()))
        logger.info(f"Loaded {len(db)} lemmas from {self.path}")
        return db

    def save(self, db: Database) -> None:
        self.write_bytes(compress(serialize(db)))
        logger.info(f"Saved {len(db)} lemmas to {self.path}")
