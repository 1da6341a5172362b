"""Journal workflows: auto-tagging, closing trades and edit sessions."""

from pipsuite.journal.autotag import AUTO_TAGS, calculate_auto_tags
from pipsuite.journal.closing import classify_status, close_trade, planned_reward
from pipsuite.journal.session import EditSession, SessionState

__all__ = [
    "AUTO_TAGS",
    "EditSession",
    "SessionState",
    "calculate_auto_tags",
    "classify_status",
    "close_trade",
    "planned_reward",
]
