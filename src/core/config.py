"""
Configuration read from the process environment (once, at startup).

DATABASE_URL        SQLAlchemy URL of the hosted database holding the comments table.
DATABASE_ECHO       "1"/"true" to log every SQL statement.
LOG_LEVEL           Root log level, defaults to INFO.
MAX_BOARD_SESSIONS  How many boards are kept in memory before the least recently used one is dropped.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Self

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str] = None
    database_echo: bool = False
    log_level: str = "INFO"
    max_board_sessions: int = 1000

    @classmethod
    def from_env(cls) -> Self:
        """Build settings from environment variables. A missing database URL is reported but does not abort startup."""
        database_url = os.getenv("DATABASE_URL") or None
        if database_url is None:
            logger.critical(
                "Missing DATABASE_URL environment variable. Comment storage will fail until it is set."
            )

        return cls(
            database_url=database_url,
            database_echo=os.getenv("DATABASE_ECHO", "").strip().lower() in _TRUTHY,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            max_board_sessions=int(os.getenv("MAX_BOARD_SESSIONS", "1000")),
        )

    @property
    def storage_configured(self) -> bool:
        return self.database_url is not None
