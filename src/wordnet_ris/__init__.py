"""wordnet-ris: compact synonym index over WordNet lexical databases."""

__version__ = "1.0.0"

from .database import (
    Database as Database,
    build_casefold_index as build_casefold_index,
)
from .exceptions import (
    WordnetRisError as WordnetRisError,
    PersistenceError as PersistenceError,
    ImportSourceError as ImportSourceError,
    ConfigurationError as ConfigurationError,
)
from .models import (
    PartOfSpeech as PartOfSpeech,
    LemmaEntry as LemmaEntry,
    SourceRow as SourceRow,
    LookupOptions as LookupOptions,
    LookupResult as LookupResult,
    CacheStats as CacheStats,
)
from .cache import LRUCache as LRUCache
from .importer import (
    build_database as build_database,
    rows_from_lmf as rows_from_lmf,
    rows_from_sqlite as rows_from_sqlite,
    rows_from_wn as rows_from_wn,
)
from .storage import DatabaseStore as DatabaseStore
from .index import SynonymIndex as SynonymIndex

__all__ = [
    # Main class
    "SynonymIndex",
    # Data model
    "Database",
    "build_casefold_index",
    "LemmaEntry",
    "SourceRow",
    "LookupOptions",
    "LookupResult",
    "CacheStats",
    "PartOfSpeech",
    # Cache and storage
    "LRUCache",
    "DatabaseStore",
    # Importers
    "build_database",
    "rows_from_lmf",
    "rows_from_sqlite",
    "rows_from_wn",
    # Exceptions
    "WordnetRisError",
    "PersistenceError",
    "ImportSourceError",
    "ConfigurationError",
]
