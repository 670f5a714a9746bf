"""
Severity levels, banner names and the default destination sentinel.

Levels are totally ordered: DEVEL < DEBUG < WARNING < RUNTIME.
CRITICAL is not a level: it always fires and borrows the current threshold.
"""

from enum import IntEnum


class LogLevel(IntEnum):
    """Severity levels accepted by TaskLogger."""
    DEVEL = -1       # Exact-match gate: visible only at threshold DEVEL
    DEBUG = 0
    WARNING = 1
    RUNTIME = 2

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Resolve level from string name, case-insensitive."""
        name_upper = name.upper()
        try:
            return cls[name_upper]
        except KeyError:
            raise ValueError(
                f"Unknown log level '{name}'. "
                f"Valid levels: {', '.join(m.name for m in cls)}"
            )


LEVEL_NAMES: dict[int, str] = {member.value: member.name for member in LogLevel}

# Banner text for critical(), independent of the threshold it logs at
CRITICAL_BANNER = "CRITICAL FAILURE"

# destination_name / channel_key of the shared default destination
DEFAULT_DESTINATION = "default"


def level_name(level: int) -> str:
    """Get display name for a level value. Falls back to numeric string."""
    return LEVEL_NAMES.get(level, str(level))


def resolve_level(value: int | str) -> int:
    """Convert level name or int to numeric level. Arbitrary ints are allowed."""
    if isinstance(value, bool):
        raise TypeError("Expected int or str for level, got bool")
    if isinstance(value, int):
        return int(value)
    if isinstance(value, str):
        return LogLevel.from_name(value).value
    raise TypeError(f"Expected int or str for level, got {type(value).__name__}")

