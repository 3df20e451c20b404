"""Exception types for RandomWalk."""


class RandomWalkError(Exception):
    """Base class for RandomWalk errors"""


class ConfigError(RandomWalkError, ValueError):
    """Invalid configuration value or key"""


class EmptyHistoryError(RandomWalkError, LookupError):
    """Raised when the latest point is requested from an empty history"""


class DuplicateOrdinalError(RandomWalkError, ValueError):
    """Raised when a point would share its ordinal with a stored point"""

    def __init__(self, ordinal: int):
        super().__init__(f"Ordinal {ordinal} is already in the history")
        self.ordinal = ordinal
