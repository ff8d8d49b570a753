"""Enums for the bullet journal task store."""

from enum import Enum


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    CONCISE = "concise"  # One line per task
    MARKDOWN = "markdown"  # Human-readable (default)
    JSON = "json"  # Machine-readable with all fields


class TaskStatus(str, Enum):
    """Task lifecycle status."""

    POOL = "pool"  # Not yet scheduled
    TODAY = "today"  # Picked for current focus
    DONE = "done"

    @classmethod
    def is_valid(cls, value: object) -> bool:
        """Exact, case-sensitive membership check on the raw value."""
        if isinstance(value, cls):
            return True
        return isinstance(value, str) and value in cls._value2member_map_


class SyncStatus(str, Enum):
    """Relationship between the local blob and its remote copy."""

    SYNCED = "synced"
    AHEAD = "ahead"  # Local has unpushed changes
    BEHIND = "behind"  # Remote has unpulled changes
    DIVERGED = "diverged"
