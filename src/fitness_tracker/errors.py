"""Error types raised by the metrics engine."""


class TrackerError(Exception):
    """Base class for engine errors."""


class ValidationError(TrackerError):
    """Inputs are missing or invalid; the message is safe to show users."""


class NotFoundError(TrackerError):
    """A referenced record does not exist for the user."""


class ConcurrencyError(TrackerError):
    """A version-checked write found the record changed since it was read."""
