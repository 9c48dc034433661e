"""Import pipeline for wordnet-ris.

Source readers turn a lexical database into grouped rows of
``(writtenForm, partOfSpeech, synsetIds)``; :func:`build_database` turns
those rows into a fresh :class:`Database`.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Union

from wordnet_ris.database import Database
from wordnet_ris.exceptions import ImportSourceError
from wordnet_ris.models import LemmaEntry, PartOfSpeech, SourceRow

logger = logging.getLogger(__name__)

RowLike = Union[SourceRow, Mapping[str, Any], tuple]

_ROW_KEYS = frozenset({"writtenForm", "partOfSpeech", "synsetIdRaw", "synset"})

# Lemma forms have rank 0 in the wn schema. The inner ORDER BY fixes the
# order GROUP_CONCAT sees the senses in.
_GROUPED_LEMMA_SQL = """
SELECT    writtenForm,
          partOfSpeech,
          GROUP_CONCAT(synset, ';') AS synset
FROM (
    SELECT    f.form AS writtenForm,
              e.pos  AS partOfSpeech,
              ss.id  AS synset,
              e.rowid AS entryRowid
    FROM      forms f
    JOIN      entries e   ON e.rowid = f.entry_rowid
    JOIN      lexicons lex ON lex.rowid = e.lexicon_rowid
    LEFT JOIN senses s    ON s.entry_rowid = e.rowid
    LEFT JOIN synsets ss  ON ss.rowid = s.synset_rowid
    WHERE     f.rank = 0 {lexicon_filter}
    ORDER BY  e.rowid, s.entry_rank, s.rowid
)
GROUP BY  writtenForm
ORDER BY  MIN(entryRowid)
"""


# ---------------------------------------------------------------------------
# Database construction
# ---------------------------------------------------------------------------

def to_source_row(row: RowLike) -> SourceRow:
    """Coerce a reader row (dataclass, mapping, or 3-tuple) to a SourceRow.

    Mapping rows carry ``writtenForm``, ``partOfSpeech`` and the synset ids
    under ``synsetIdRaw`` (or ``synset``, the column name of the grouped
    SQL query).
    """
    if isinstance(row, SourceRow):
        return row
    try:
        if isinstance(row, Mapping):
            written_form = row["writtenForm"]
            pos = row.get("partOfSpeech")
            synset_ids = row.get("synsetIdRaw", row.get("synset"))
            unknown = set(row) - _ROW_KEYS
            # a misspelled synset field would otherwise import as "no senses"
            if unknown and "synsetIdRaw" not in row and "synset" not in row:
                raise ImportSourceError(
                    f"Unknown fields {sorted(unknown)} in source row {row!r}"
                )
        elif isinstance(row, (tuple, list)):
            written_form, pos, synset_ids = row
        else:
            raise ImportSourceError(f"Malformed source row {row!r}")
    except (KeyError, TypeError, ValueError) as e:
        raise ImportSourceError(f"Malformed source row {row!r}") from e
    if not written_form or not isinstance(written_form, str):
        raise ImportSourceError(f"Source row without written form: {row!r}")
    return SourceRow(
        written_form=written_form,
        part_of_speech=pos or PartOfSpeech.UNKNOWN.value,
        synset_ids=synset_ids or None,
    )


def build_database(rows: Iterable[RowLike]) -> Database:
    """Build the synset table and lemma index from grouped source rows.

    External synset ids are renumbered densely in first-seen order. A lemma
    is added to each of its synsets at most once. When a written form
    appears in more than one row, the later row's entry replaces the
    earlier one.
    """
    db = Database()
    remap: dict[str, int] = {}

    for raw in rows:
        row = to_source_row(raw)
        refs: list[int] = []
        for synset_id in row.split_synset_ids():
            index = remap.get(synset_id)
            if index is None:
                index = len(db.synsets)
                remap[synset_id] = index
                db.synsets.append([])
            refs.append(index)
            members = db.synsets[index]
            if row.written_form not in members:
                members.append(row.written_form)
        db.lemmas[row.written_form] = LemmaEntry(
            pos=row.part_of_speech, synsets=tuple(refs)
        )

    logger.info(
        f"Built database with {len(db.lemmas)} lemmas "
        f"and {len(db.synsets)} synsets"
    )
    return db


# ---------------------------------------------------------------------------
# Source readers
# ---------------------------------------------------------------------------

def rows_from_lmf(source: str | Path) -> list[SourceRow]:
    """Read grouped lemma rows from a WN-LMF XML file."""
    import wn.lmf

    source = Path(source)
    if not source.exists():
        raise FileNotFoundError(f"File not found: {source}")

    try:
        resource = wn.lmf.load(str(source))
    except Exception as e:
        raise ImportSourceError(f"Failed to parse XML: {e}") from e

    return _rows_from_resource(resource)  # type: ignore[arg-type]


def _rows_from_resource(resource: Mapping[str, Any]) -> list[SourceRow]:
    """Group the entries of a LexicalResource dict by lemma written form."""
    grouped: dict[str, tuple[str, list[str]]] = {}
    for lex in resource.get("lexicons", []):
        for entry in lex.get("entries", []):
            lemma = entry.get("lemma", {})
            form = lemma.get("writtenForm", "")
            if not form:
                logger.warning(f"Skipping entry without lemma: {entry.get('id')!r}")
                continue
            pos = lemma.get("partOfSpeech") or PartOfSpeech.UNKNOWN.value
            synset_ids = [
                sense["synset"] for sense in entry.get("senses", [])
                if sense.get("synset")
            ]
            if form in grouped:
                grouped[form][1].extend(synset_ids)
            else:
                grouped[form] = (pos, synset_ids)

    return [
        SourceRow(form, pos, ";".join(ids) or None)
        for form, (pos, ids) in grouped.items()
    ]


def rows_from_sqlite(
    source: str | Path | sqlite3.Connection,
    *,
    lexicon: str | None = None,
) -> list[SourceRow]:
    """Read grouped lemma rows from a wn-schema SQLite database.

    ``source`` is a database file or an open connection. ``lexicon``
    restricts the rows to one lexicon specifier (``id:version``).
    """
    if isinstance(source, sqlite3.Connection):
        return _query_grouped_lemmas(source, lexicon)

    source = Path(source)
    if not source.exists():
        raise FileNotFoundError(f"File not found: {source}")
    try:
        conn = sqlite3.connect(f"{source.resolve().as_uri()}?mode=ro", uri=True)
    except sqlite3.Error as e:
        raise ImportSourceError(f"Failed to open {source}: {e}") from e
    try:
        return _query_grouped_lemmas(conn, lexicon)
    finally:
        conn.close()


def rows_from_wn(lexicon: str | None = None) -> list[SourceRow]:
    """Read grouped lemma rows from the wn library's own database."""
    from wn._db import connect as wn_connect

    try:
        wn_conn = wn_connect()
    except Exception as e:
        raise ImportSourceError(f"Failed to open wn database: {e}") from e
    return _query_grouped_lemmas(wn_conn, lexicon)


def _query_grouped_lemmas(
    conn: sqlite3.Connection, lexicon: str | None
) -> list[SourceRow]:
    params: tuple[str, ...] = ()
    lexicon_filter = ""
    if lexicon is not None:
        lexicon_filter = "AND lex.specifier = ?"
        params = (lexicon,)
    sql = _GROUPED_LEMMA_SQL.format(lexicon_filter=lexicon_filter)

    try:
        results = conn.execute(sql, params).fetchall()
    except sqlite3.Error as e:
        raise ImportSourceError(f"Failed to query lexical database: {e}") from e

    if lexicon is not None and not results:
        raise ImportSourceError(f"Lexicon not found or empty: {lexicon!r}")

    return [
        SourceRow(
            written_form=form,
            part_of_speech=pos or PartOfSpeech.UNKNOWN.value,
            synset_ids=synset,
        )
        for form, pos, synset in results
    ]
