"""Per-user cache of journal settings (tag groups and strategies)."""

import logging
from typing import Optional

from pipsuite.db.store import DataStore
from pipsuite.models import TagGroup

logger = logging.getLogger(__name__)


class SettingsCache:
    """Caches tag groups and strategies per user in front of a DataStore.

    Saves update the cache before writing through to the store. If the
    write fails the previous value is put back and the error propagates.
    """

    def __init__(self, store: DataStore):
        self.store = store
        self._tag_groups: dict[Optional[str], list[TagGroup]] = {}
        self._strategies: dict[Optional[str], list[str]] = {}

    def get_tag_groups(self, user_id: Optional[str] = None) -> list[TagGroup]:
        if user_id not in self._tag_groups:
            self._tag_groups[user_id] = self.store.get_tag_groups(user_id)
        return list(self._tag_groups[user_id])

    def save_tag_groups(self, groups: list[TagGroup], user_id: Optional[str] = None) -> None:
        """Optimistically cache and persist tag groups.

        Raises:
            Exception: Whatever the store raised; the cached value is rolled back.
        """
        previous = self._tag_groups.get(user_id)
        self._tag_groups[user_id] = list(groups)
        try:
            self.store.save_tag_groups(groups, user_id)
        except Exception:
            logger.warning("Saving tag groups failed, rolling back cache for %s", user_id)
            self._rollback(self._tag_groups, user_id, previous)
            raise

    def get_strategies(self, user_id: Optional[str] = None) -> list[str]:
        if user_id not in self._strategies:
            self._strategies[user_id] = self.store.get_strategies(user_id)
        return list(self._strategies[user_id])

    def save_strategies(self, strategies: list[str], user_id: Optional[str] = None) -> None:
        """Optimistically cache and persist strategy names."""
        previous = self._strategies.get(user_id)
        self._strategies[user_id] = list(strategies)
        try:
            self.store.save_strategies(strategies, user_id)
        except Exception:
            logger.warning("Saving strategies failed, rolling back cache for %s", user_id)
            self._rollback(self._strategies, user_id, previous)
            raise

    def invalidate(self, user_id: Optional[str] = None) -> None:
        """Drop cached settings for one user."""
        self._tag_groups.pop(user_id, None)
        self._strategies.pop(user_id, None)

    def clear(self) -> None:
        """Drop every cached entry."""
        self._tag_groups.clear()
        self._strategies.clear()

    @staticmethod
    def _rollback(cache: dict, user_id: Optional[str], previous: Optional[list]) -> None:
        if previous is None:
            cache.pop(user_id, None)
        else:
            cache[user_id] = previous
