"""Domain model dataclasses and enums for wordnet-ris."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PartOfSpeech(str, Enum):
    """Part-of-speech tags used by WN-LMF lexical entries."""

    NOUN = "n"
    VERB = "v"
    ADJECTIVE = "a"
    ADVERB = "r"
    ADJECTIVE_SATELLITE = "s"
    PHRASE = "t"
    CONJUNCTION = "c"
    ADPOSITION = "p"
    OTHER = "x"
    UNKNOWN = "u"


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class LemmaEntry:
    """Part of speech and synset memberships of one lemma."""

    pos: str
    synsets: tuple[int, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"pos": self.pos, "syn": list(self.synsets)}


@dataclass(frozen=True, slots=True)
class SourceRow:
    """One grouped row produced by a lexical source reader.

    ``synset_ids`` is the semicolon-joined list of external synset
    identifiers, or ``None`` when the lemma has no senses.
    """

    written_form: str
    part_of_speech: str
    synset_ids: str | None = None

    def split_synset_ids(self) -> list[str]:
        """External synset ids of this row, repeats removed, order kept."""
        if not self.synset_ids:
            return []
        seen: dict[str, None] = {}
        for synset_id in self.synset_ids.split(";"):
            if synset_id and synset_id not in seen:
                seen[synset_id] = None
        return list(seen)


@dataclass(frozen=True, slots=True)
class LookupOptions:
    """Per-call switches for :meth:`SynonymIndex.lookup`."""

    case_insensitive: bool = False
    use_cache: bool = True


@dataclass(frozen=True, slots=True)
class LookupResult:
    """Resolved synonyms of a lemma (the value held by the lookup cache)."""

    lemma: str
    pos: str
    syn: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"lemma": self.lemma, "pos": self.pos, "syn": list(self.syn)}


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Counters of a bounded lookup cache."""

    capacity: int
    size: int
    hits: int
    misses: int
    evictions: int
