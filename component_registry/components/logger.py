"""
Default Logger Component.

A level-gated console logger that every component manager registers during
init, so other components can always depend on it. It is configured through
the generic ``config`` capability:

    manager.config("logger", "set-level", "warn")
    manager.config("logger", "get-level")   # -> "warn"
"""

import sys
from typing import Any, Optional, TextIO, Union

from component_registry.base import Component, require_name
from component_registry.exceptions import ConfigurationError, InvalidLevelError, ValidationError


class DefaultLogger(Component):
    """Console logger with npm-style severity levels."""

    # Index is the numeric level; higher is chattier
    LEVELS = ("silent", "error", "warn", "info", "verbose", "debug", "silly")
    MARKERS = {
        "error": "!!! ERROR:",
        "warn": "! WARNING:",
    }

    def __init__(self,
                 level: Union[str, int] = "debug",
                 source: str = "unknown",
                 stream: Optional[TextIO] = None):
        """
        Args:
            level: Initial level name or index
            source: Label printed before every line
            stream: Output stream; stdout at the time of writing if None
        """
        super().__init__(name="logger")
        self.debug_level = self.parse_level(level)
        self.source = source
        self.stream = stream

    def __repr__(self):
        return f"DefaultLogger<source={self.source}, level={self.get_level()}>"

    @classmethod
    def parse_level(cls, value: Union[str, int]) -> int:
        """
        Convert a level name or index to its index.

        Raises:
            InvalidLevelError: For unknown names, the empty string, indexes
                outside the level range and non-integer values
        """
        if isinstance(value, bool):
            raise InvalidLevelError(value)
        if isinstance(value, int):
            if 0 <= value < len(cls.LEVELS):
                return value
            raise InvalidLevelError(value)
        if isinstance(value, str) and value in cls.LEVELS:
            return cls.LEVELS.index(value)
        raise InvalidLevelError(value)

    def set_level(self, level: Union[str, int]):
        # Parse first so a bad value leaves the current level alone
        self.debug_level = self.parse_level(level)

    def get_level(self) -> str:
        return self.LEVELS[self.debug_level]

    def config(self, feature: str, *args: Any) -> Any:
        """
        Configure the logger.

        Features:
            set-level <name|index>: change the active level
            get-level: return the active level name
            set-source <label>: change the source label
            get-source: return the source label
        """
        if feature == "set-level":
            if not args:
                raise ValidationError("set-level requires a level")
            self.set_level(args[0])
        elif feature == "get-level":
            return self.get_level()
        elif feature == "set-source":
            if not args:
                raise ValidationError("set-source requires a label")
            self.source = require_name(args[0], "source label")
        elif feature == "get-source":
            return self.source
        else:
            raise ConfigurationError(f"unknown feature for logger: {feature}")

    def log(self, level: str, *message: Any):
        """Write a message at the given level if the active level allows it."""
        if level not in self.LEVELS or level == "silent":
            raise ValidationError(f"cannot log at level {level!r}")
        if self.LEVELS.index(level) > self.debug_level:
            return

        parts = [f"{self.source}:"]
        if level in self.MARKERS:
            parts.append(self.MARKERS[level])
        parts.extend(message)
        print(*parts, file=self.stream or sys.stdout)

    def error(self, *message: Any):
        self.log("error", *message)

    def warn(self, *message: Any):
        self.log("warn", *message)

    def info(self, *message: Any):
        self.log("info", *message)

    def verbose(self, *message: Any):
        self.log("verbose", *message)

    def debug(self, *message: Any):
        self.log("debug", *message)

    def silly(self, *message: Any):
        self.log("silly", *message)
