"""
Error taxonomy for lift-log.

Both concrete errors are recoverable rejections: they carry a
human-readable reason and are raised before any state is mutated.
"""


class LiftLogError(Exception):
    """Base class for lift-log errors."""

    pass


class ValidationError(LiftLogError):
    """Raised when user input is incomplete or out of range."""

    pass


class EmptySessionError(LiftLogError):
    """Raised when a session is committed without entries or without a date."""

    pass
