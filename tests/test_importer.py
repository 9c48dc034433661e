"""Tests for database construction and the lexical source readers."""

import sqlite3
from pathlib import Path

import pytest

from wordnet_ris import (
    ImportSourceError,
    LemmaEntry,
    SourceRow,
    build_database,
    rows_from_lmf,
    rows_from_sqlite,
)
from wordnet_ris.importer import _rows_from_resource, to_source_row

DATA = Path(__file__).parent / "data"


class TestBuildDatabase:
    def test_speaker_scenario(self, speaker_rows):
        db = build_database(speaker_rows)
        assert db.synsets == [["speaker", "talker"], ["speaker"]]
        assert db.lemmas == {
            "speaker": LemmaEntry("n", (0, 1)),
            "talker": LemmaEntry("n", (0,)),
        }

    def test_dense_first_seen_numbering(self):
        db = build_database([
            SourceRow("a", "n", "z9;a1"),
            SourceRow("b", "n", "m5;z9"),
        ])
        assert db.lemmas["a"].synsets == (0, 1)
        assert db.lemmas["b"].synsets == (2, 0)
        assert db.synsets == [["a", "b"], ["a"], ["b"]]

    def test_row_level_duplicates_removed(self):
        db = build_database([SourceRow("a", "n", "x;y;x;y;x")])
        assert db.lemmas["a"].synsets == (0, 1)
        assert db.synsets == [["a"], ["a"]]

    def test_null_synsets(self):
        db = build_database([SourceRow("orphan", "n", None)])
        assert db.lemmas["orphan"] == LemmaEntry("n", ())
        assert db.synsets == []

    def test_empty_string_synsets(self):
        db = build_database([SourceRow("orphan", "n", "")])
        assert db.lemmas["orphan"].synsets == ()

    def test_later_row_overwrites_entry(self):
        db = build_database([
            SourceRow("bank", "n", "s1"),
            SourceRow("bank", "v", "s2"),
        ])
        assert db.lemmas["bank"] == LemmaEntry("v", (1,))
        # membership from the earlier row stays in the synset table
        assert db.synsets == [["bank"], ["bank"]]
        assert len(db.lemmas) == 1

    def test_no_duplicate_membership(self):
        db = build_database([
            SourceRow("bank", "n", "s1"),
            SourceRow("bank", "n", "s1"),
        ])
        assert db.synsets == [["bank"]]

    def test_accepts_mappings_and_tuples(self):
        db = build_database([
            {"writtenForm": "speaker", "partOfSpeech": "n", "synset": "100;101"},
            ("talker", "n", "100"),
        ])
        assert db == build_database([
            SourceRow("speaker", "n", "100;101"),
            SourceRow("talker", "n", "100"),
        ])

    def test_mapping_rows_with_synset_id_raw(self):
        db = build_database([
            {"writtenForm": "speaker", "partOfSpeech": "n", "synsetIdRaw": "100;101"},
            {"writtenForm": "talker", "partOfSpeech": "n", "synsetIdRaw": "100"},
        ])
        assert db.synsets == [["speaker", "talker"], ["speaker"]]
        assert db.lemmas["speaker"] == LemmaEntry("n", (0, 1))

    def test_string_rows_rejected(self):
        with pytest.raises(ImportSourceError):
            build_database(["abc"])

    def test_reimport_is_equivalent(self, thesaurus_rows):
        first = build_database(thesaurus_rows)
        second = build_database(list(thesaurus_rows))
        assert first == second
        assert first.equivalent(second)

    def test_invariants_hold(self, thesaurus_rows):
        build_database(thesaurus_rows).validate()

    def test_empty_source(self):
        db = build_database([])
        assert len(db) == 0
        assert db.synsets == []


class TestToSourceRow:
    def test_missing_pos_defaults_to_unknown(self):
        row = to_source_row({"writtenForm": "x", "synset": None})
        assert row == SourceRow("x", "u", None)

    @pytest.mark.parametrize(
        "raw",
        [
            {"partOfSpeech": "n"},
            {"writtenForm": "", "partOfSpeech": "n"},
            ("only", "two"),
            "abc",
            b"abc",
            42,
            {"writtenForm": "x", "partOfSpeech": "n", "synsets": "1"},
        ],
    )
    def test_malformed(self, raw):
        with pytest.raises(ImportSourceError):
            to_source_row(raw)


class TestSourceRow:
    def test_split(self):
        assert SourceRow("a", "n", "x;y;;x").split_synset_ids() == ["x", "y"]

    def test_split_none(self):
        assert SourceRow("a", "n").split_synset_ids() == []


class TestRowsFromResource:
    def test_groups_by_written_form(self):
        resource = {
            "lexicons": [{
                "entries": [
                    {
                        "id": "t-bank-n",
                        "lemma": {"writtenForm": "bank", "partOfSpeech": "n"},
                        "senses": [{"id": "s1", "synset": "t-1-n"}],
                    },
                    {
                        "id": "t-bank-v",
                        "lemma": {"writtenForm": "bank", "partOfSpeech": "v"},
                        "senses": [{"id": "s2", "synset": "t-2-v"}],
                    },
                    {
                        "id": "t-lonely-a",
                        "lemma": {"writtenForm": "lonely", "partOfSpeech": "a"},
                        "senses": [],
                    },
                    {"id": "t-broken", "lemma": {}, "senses": []},
                ],
            }],
        }
        rows = _rows_from_resource(resource)
        assert rows == [
            SourceRow("bank", "n", "t-1-n;t-2-v"),
            SourceRow("lonely", "a", None),
        ]


class TestRowsFromLMF:
    def test_load(self):
        pytest.importorskip("wn")
        rows = rows_from_lmf(DATA / "mini-lmf.xml")
        assert rows == [
            SourceRow("speaker", "n", "mini-100-n;mini-101-n"),
            SourceRow("talker", "n", "mini-100-n"),
            SourceRow("bank", "n", "mini-200-n;mini-300-v"),
            SourceRow("depository financial institution", "n", "mini-200-n"),
        ]

    def test_invalid_xml(self, tmp_path):
        pytest.importorskip("wn")
        path = tmp_path / "broken.xml"
        path.write_text("<not valid xml")
        with pytest.raises(ImportSourceError):
            rows_from_lmf(path)

    def test_file_not_found(self, tmp_path):
        pytest.importorskip("wn")
        with pytest.raises(FileNotFoundError):
            rows_from_lmf(tmp_path / "missing.xml")


class TestRowsFromSQLite:
    def test_lexicon_filter(self, wn_sqlite):
        rows = rows_from_sqlite(wn_sqlite, lexicon="test:1")
        assert [r.written_form for r in rows] == ["speaker", "talker", "orphan"]
        assert sorted(rows[0].synset_ids.split(";")) == ["test-100-n", "test-101-n"]
        assert rows[1].synset_ids == "test-100-n"
        assert rows[2].synset_ids is None
        assert {r.part_of_speech for r in rows} == {"n"}

    def test_all_lexicons_group_by_form(self, wn_sqlite):
        rows = rows_from_sqlite(wn_sqlite)
        by_form = {r.written_form: r for r in rows}
        assert set(by_form) == {"speaker", "talker", "orphan"}
        assert sorted(by_form["talker"].synset_ids.split(";")) == [
            "other-5-n", "test-100-n",
        ]

    def test_non_lemma_forms_skipped(self, wn_sqlite):
        rows = rows_from_sqlite(wn_sqlite)
        assert "speakers" not in {r.written_form for r in rows}

    def test_open_connection(self, wn_sqlite):
        conn = sqlite3.connect(wn_sqlite)
        try:
            rows = rows_from_sqlite(conn, lexicon="test:1")
        finally:
            conn.close()
        assert len(rows) == 3

    def test_unknown_lexicon(self, wn_sqlite):
        with pytest.raises(ImportSourceError, match="not found"):
            rows_from_sqlite(wn_sqlite, lexicon="nope:1")

    def test_wrong_schema(self, tmp_path):
        path = tmp_path / "empty.db"
        conn = sqlite3.connect(path)
        conn.execute("CREATE TABLE unrelated (x TEXT)")
        conn.close()
        with pytest.raises(ImportSourceError):
            rows_from_sqlite(path)

    def test_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            rows_from_sqlite(tmp_path / "missing.db")

    def test_builds_speaker_scenario(self, wn_sqlite):
        db = build_database(rows_from_sqlite(wn_sqlite, lexicon="test:1"))
        speaker = db.lemmas["speaker"]
        talker = db.lemmas["talker"]
        assert len(speaker.synsets) == 2
        assert talker.synsets[0] in speaker.synsets
        assert db.synonyms("speaker") == {"talker"}
        assert db.lemmas["orphan"].synsets == ()
