"""
Custom exceptions used across layers.

GameError is the top-level exception, so the API layer can catch anything raised on purpose by the lower layers.
NOTE illegal moves on the board are NOT exceptions: the controller recovers from those in place.
"""


class GameError(Exception):
    """Base class for all custom exceptions raised on purpose."""


class InvalidRequestError(GameError):
    """Request data cannot be interpreted (bad square, empty game code, ...)."""


class RepositoryError(GameError):
    """Something went wrong in (or on the way to) the persistence layer."""


class GameNotFoundError(RepositoryError):
    """No board session registered under the requested game code."""


class StorageNotConfiguredError(RepositoryError):
    """No database URL was configured, so no session can be opened."""
