"""Exceptions raised by the knowledge core and its collaborators."""


class SormBotError(Exception):
    """Base exception for the bot."""
    pass


class ConfigurationError(SormBotError):
    """Required configuration is missing or invalid."""
    pass


class PersistenceError(SormBotError):
    """A read or write against the SQLite store failed."""
    pass


class TransportError(SormBotError):
    """A reply could not be delivered through the messaging platform."""
    pass
