"""Custom exception hierarchy for wordnet-ris."""


class WordnetRisError(Exception):
    """Base exception for all wordnet-ris errors."""


class PersistenceError(WordnetRisError):
    """Stored database unreadable, corrupt, or not writable."""


class ImportSourceError(WordnetRisError):
    """Lexical source failed to open, query, or parse."""


class ConfigurationError(WordnetRisError):
    """Invalid settings (bad cache size, malformed config file)."""
