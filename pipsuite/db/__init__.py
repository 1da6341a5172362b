"""Persistence layer for pipsuite."""

from pipsuite.db.cache import SettingsCache
from pipsuite.db.store import (
    DEFAULT_ACCOUNT,
    DEFAULT_STRATEGIES,
    DEFAULT_TAG_GROUPS,
    TRASH_RETENTION_DAYS,
    DataStore,
)

__all__ = [
    "DEFAULT_ACCOUNT",
    "DEFAULT_STRATEGIES",
    "DEFAULT_TAG_GROUPS",
    "TRASH_RETENTION_DAYS",
    "DataStore",
    "SettingsCache",
]
