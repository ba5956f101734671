"""Severity levels shared by every handler.

Levels order the same way as the standard library's numeric levels, so a
``LogRecord.levelno`` can be compared against them after mapping.
"""

from enum import IntEnum

_ALIASES = {
    "warn": "warning",
    "fatal": "critical",
}


class Level(IntEnum):
    """Log severity, lowest to highest."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    NOTICE = 25
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @property
    def wire_name(self) -> str:
        """Lowercase severity name used in outbound payloads."""
        return self.name.lower()

    @classmethod
    def from_logging(cls, levelno: int) -> "Level":
        """Map a stdlib level number onto the closest level at or below it.

        Args:
            levelno: Numeric level, e.g. ``logging.WARNING`` or a custom value.

        Returns:
            The highest Level whose value does not exceed ``levelno``.
            Anything below DEBUG maps to TRACE.
        """
        for level in sorted(cls, reverse=True):
            if levelno >= level:
                return level
        return cls.TRACE

    @classmethod
    def coerce(cls, value: "Level | int | str") -> "Level":
        """Convert a Level, stdlib level number, or level name to a Level.

        Raises:
            ValueError: If ``value`` is a string that names no level.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls.from_logging(value)
        name = value.strip().lower()
        name = _ALIASES.get(name, name)
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {value!r}") from None
