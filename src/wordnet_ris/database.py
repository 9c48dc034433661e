"""In-memory synonym database: synset table, lemma index, case-fold index."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from wordnet_ris.exceptions import PersistenceError
from wordnet_ris.models import LemmaEntry


class Database:
    """Root aggregate owning the synset table and the lemma index.

    ``synsets`` is indexed by dense synset number; each element is the
    ordered, duplicate-free member list of that synset. ``lemmas`` maps the
    exact written form of each lemma to its :class:`LemmaEntry` and keeps
    insertion order.
    """

    __slots__ = ("lemmas", "synsets")

    def __init__(
        self,
        lemmas: dict[str, LemmaEntry] | None = None,
        synsets: list[list[str]] | None = None,
    ) -> None:
        self.lemmas: dict[str, LemmaEntry] = lemmas if lemmas is not None else {}
        self.synsets: list[list[str]] = synsets if synsets is not None else []

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Database):
            return NotImplemented
        # dict equality ignores order, the lemma index order is part of state
        return (
            list(self.lemmas.items()) == list(other.lemmas.items())
            and self.synsets == other.synsets
        )

    def __repr__(self) -> str:
        return f"Database(lemmas={len(self.lemmas)}, synsets={len(self.synsets)})"

    def __len__(self) -> int:
        return len(self.lemmas)

    def __contains__(self, lemma: object) -> bool:
        return lemma in self.lemmas

    def __iter__(self) -> Iterator[str]:
        return iter(self.lemmas)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def entry(self, lemma: str) -> LemmaEntry | None:
        return self.lemmas.get(lemma)

    def members(self, synset: int) -> list[str]:
        return self.synsets[synset]

    def manifest(self) -> list[str]:
        """All lemma keys in index order."""
        return list(self.lemmas)

    def synonyms(self, lemma: str) -> set[str]:
        """Union of the lemma's synset members, without the lemma itself."""
        entry = self.lemmas[lemma]
        words: set[str] = set()
        for synset in entry.synsets:
            words.update(self.synsets[synset])
        words.discard(lemma)
        return words

    # ------------------------------------------------------------------
    # Integrity
    # ------------------------------------------------------------------

    def validate(self) -> None:
        """Check structural invariants, raising PersistenceError if broken."""
        for index, members in enumerate(self.synsets):
            if len(set(members)) != len(members):
                raise PersistenceError(
                    f"Synset {index} contains duplicate members"
                )
        count = len(self.synsets)
        for lemma, entry in self.lemmas.items():
            if len(set(entry.synsets)) != len(entry.synsets):
                raise PersistenceError(
                    f"Lemma {lemma!r} references a synset twice"
                )
            for synset in entry.synsets:
                if not 0 <= synset < count:
                    raise PersistenceError(
                        f"Lemma {lemma!r} references unknown synset {synset}"
                    )

    def equivalent(self, other: Database) -> bool:
        """Compare two databases, ignoring how synsets are numbered."""
        if self.lemmas.keys() != other.lemmas.keys():
            return False
        for lemma, entry in self.lemmas.items():
            theirs = other.lemmas[lemma]
            if entry.pos != theirs.pos:
                return False
            mine = [tuple(self.synsets[s]) for s in entry.synsets]
            if mine != [tuple(other.synsets[s]) for s in theirs.synsets]:
                return False
        return sorted(map(tuple, self.synsets)) == sorted(map(tuple, other.synsets))

    # ------------------------------------------------------------------
    # Serialized shape
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "lemma": {lemma: entry.to_dict() for lemma, entry in self.lemmas.items()},
            "synset": [list(members) for members in self.synsets],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Database:
        """Rebuild a database from its ``{"lemma": ..., "synset": ...}`` form."""
        if not isinstance(data, Mapping):
            raise PersistenceError("Database root must be a mapping")
        raw_lemmas = data.get("lemma")
        raw_synsets = data.get("synset")
        if not isinstance(raw_lemmas, Mapping) or not isinstance(raw_synsets, list):
            raise PersistenceError(
                "Database must contain a 'lemma' mapping and a 'synset' list"
            )

        synsets: list[list[str]] = []
        for members in raw_synsets:
            # older files may store empty synsets as null
            if members is None:
                members = []
            if not isinstance(members, list):
                raise PersistenceError("Synset members must be a list")
            synsets.append([str(m) for m in members])

        lemmas: dict[str, LemmaEntry] = {}
        for lemma, raw in raw_lemmas.items():
            try:
                lemmas[lemma] = LemmaEntry(
                    pos=raw["pos"], synsets=tuple(int(s) for s in raw["syn"])
                )
            except (KeyError, TypeError, ValueError) as e:
                raise PersistenceError(
                    f"Malformed entry for lemma {lemma!r}: {e}"
                ) from e

        db = cls(lemmas, synsets)
        db.validate()
        return db


def build_casefold_index(lemmas: Mapping[str, Any]) -> dict[str, str]:
    """Map lower-cased lemma to canonical key; later keys win on collision."""
    fold: dict[str, str] = {}
    for lemma in lemmas:
        fold[lemma.lower()] = lemma
    return fold
