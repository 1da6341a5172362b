"""Edit session with debounced autosave.

A session wraps one trade being edited. Edits mark it dirty; the pending
changes are saved once no edit has happened for `debounce_seconds`, or
immediately on `flush()`. `flush()` must be called before leaving the edit
surface, otherwise pending edits are lost.

    CLEAN --update--> DIRTY --tick (debounce elapsed) / flush--> SAVING --> CLEAN
"""

import logging
import time
from enum import Enum
from typing import Any, Callable, Optional

from pipsuite.models import Trade

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 2.0


class SessionState(str, Enum):
    CLEAN = "CLEAN"
    DIRTY = "DIRTY"
    SAVING = "SAVING"


class EditSession:
    """Tracks unsaved edits to a trade and saves them with a debounce."""

    def __init__(
        self,
        trade: Trade,
        save: Callable[[Trade], Any],
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the session.

        Args:
            trade: Trade as currently persisted.
            save: Callable persisting a trade. Exceptions propagate.
            debounce_seconds: Quiet period before an autosave.
            clock: Monotonic time source in seconds.
        """
        self._trade = trade
        self._save = save
        self._debounce = debounce_seconds
        self._clock = clock
        self._state = SessionState.CLEAN
        self._last_edit: Optional[float] = None

    @property
    def trade(self) -> Trade:
        """Trade including unsaved edits."""
        return self._trade

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_dirty(self) -> bool:
        return self._state == SessionState.DIRTY

    def update(self, **changes: Any) -> Trade:
        """Apply field changes and restart the debounce timer.

        Raises:
            RuntimeError: If called while a save is in progress.
            pydantic.ValidationError: If the changes break a Trade constraint.
                The session is left as it was.
        """
        if self._state == SessionState.SAVING:
            raise RuntimeError("Cannot edit a trade while it is being saved")
        self._trade = Trade.model_validate({**self._trade.model_dump(), **changes})
        self._state = SessionState.DIRTY
        self._last_edit = self._clock()
        return self._trade

    def due(self) -> bool:
        """Whether the debounce period has elapsed since the last edit."""
        if not self.is_dirty or self._last_edit is None:
            return False
        return self._clock() - self._last_edit >= self._debounce

    def tick(self) -> bool:
        """Autosave if the debounce period has elapsed.

        Returns:
            True if a save happened.
        """
        if not self.due():
            return False
        self._perform_save()
        return True

    def flush(self) -> bool:
        """Save pending edits immediately.

        Returns:
            True if there was something to save.
        """
        if not self.is_dirty:
            return False
        self._perform_save()
        return True

    def discard(self, trade: Optional[Trade] = None) -> None:
        """Drop pending edits, optionally resetting to a fresh copy of the trade."""
        if trade is not None:
            self._trade = trade
        self._state = SessionState.CLEAN
        self._last_edit = None

    def _perform_save(self) -> None:
        self._state = SessionState.SAVING
        try:
            self._save(self._trade)
        except Exception:
            self._state = SessionState.DIRTY
            raise
        logger.debug("Saved trade %s", self._trade.id)
        self._state = SessionState.CLEAN
        self._last_edit = None
