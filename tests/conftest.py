"""Shared test fixtures for wordnet-ris."""

import sqlite3

import pytest

from wordnet_ris import SourceRow, SynonymIndex


@pytest.fixture
def speaker_rows():
    """The speaker/talker rows: synset 100 is shared, 101 is speaker-only."""
    return [
        SourceRow("speaker", "n", "100;101"),
        SourceRow("talker", "n", "100"),
    ]


@pytest.fixture
def thesaurus_rows():
    """A slightly larger set of rows, including mixed case and no senses."""
    return [
        SourceRow("speaker", "n", "s1;s2"),
        SourceRow("talker", "n", "s1"),
        SourceRow("verbalizer", "n", "s1"),
        SourceRow("loudspeaker", "n", "s2;s3"),
        SourceRow("Speaker", "n", "s4"),
        SourceRow("presiding officer", "n", "s4"),
        SourceRow("orphan", "n", None),
    ]


@pytest.fixture
def index(thesaurus_rows):
    """In-memory index built from thesaurus_rows."""
    with SynonymIndex.from_rows(thesaurus_rows) as idx:
        yield idx


@pytest.fixture
def db_file(tmp_path):
    """Path of a not-yet-existing database file."""
    return tmp_path / "wordnet-ris.json.gz"


@pytest.fixture
def wn_sqlite(tmp_path):
    """A small SQLite database in the wn schema with two lexicons."""
    path = tmp_path / "lexicon.db"
    conn = sqlite3.connect(path)
    conn.executescript(
        """
        CREATE TABLE lexicons (rowid INTEGER PRIMARY KEY, specifier TEXT);
        CREATE TABLE entries (
            rowid INTEGER PRIMARY KEY, lexicon_rowid INTEGER, pos TEXT
        );
        CREATE TABLE forms (
            rowid INTEGER PRIMARY KEY, entry_rowid INTEGER,
            form TEXT, rank INTEGER DEFAULT 1
        );
        CREATE TABLE synsets (rowid INTEGER PRIMARY KEY, id TEXT);
        CREATE TABLE senses (
            rowid INTEGER PRIMARY KEY, entry_rowid INTEGER,
            entry_rank INTEGER DEFAULT 1, synset_rowid INTEGER
        );

        INSERT INTO lexicons VALUES (1, 'test:1'), (2, 'other:1');
        INSERT INTO entries VALUES
            (1, 1, 'n'), (2, 1, 'n'), (3, 1, 'n'), (4, 2, 'n');
        INSERT INTO forms VALUES
            (1, 1, 'speaker', 0), (2, 2, 'talker', 0), (3, 3, 'orphan', 0),
            (4, 4, 'talker', 0), (5, 1, 'speakers', 1);
        INSERT INTO synsets VALUES
            (1, 'test-100-n'), (2, 'test-101-n'), (3, 'other-5-n');
        INSERT INTO senses VALUES
            (1, 1, 1, 1), (2, 1, 2, 2), (3, 2, 1, 1), (4, 4, 1, 3);
        """
    )
    conn.commit()
    conn.close()
    return path
