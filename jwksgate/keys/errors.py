"""Startup errors raised while acquiring and parsing the key set."""


class KeySourceError(Exception):
    """Key material could not be made available; the service cannot start."""


class KeyFetchError(KeySourceError):
    """The key-set document could not be downloaded or cached."""


class KeyParseError(KeySourceError):
    """The cached key-set document is unreadable or incomplete."""
