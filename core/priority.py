from enum import Enum
from typing import Dict, Final


class Priority(Enum):
    NONE = ("None", 4)
    LOW = ("Low", 3)
    MEDIUM = ("Medium", 2)
    HIGH = ("High", 1)
    MAX = ("Max", 0)

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def rank(self) -> int:
        """Sort rank: lower sorts first (Max before None)."""
        return self.value[1]

    @classmethod
    def from_string(cls, value: str) -> "Priority":
        return _BY_NAME.get(normalize_priority_name(value), cls.NONE)


# Older cluster files used Mid/Top.
_ALIASES: Final[Dict[str, str]] = {"mid": "medium", "top": "high"}


def normalize_priority_name(value: str) -> str:
    """Normalize a persisted or typed priority token to its lowercase level name."""
    token = (value or "").strip().lower()
    return _ALIASES.get(token, token)


_BY_NAME: Final[Dict[str, Priority]] = {p.label.lower(): p for p in Priority}
