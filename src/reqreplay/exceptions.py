"""Exception hierarchy for script generation."""


class ReqReplayError(Exception):
    """Base exception for reqreplay generator errors."""


class CaptureError(ReqReplayError, ValueError):
    """Raised when a capture record cannot be turned into a baseline."""


class ConfigError(ReqReplayError, ValueError):
    """Raised when a generator config file is unreadable or malformed."""
