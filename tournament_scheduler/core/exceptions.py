"""
Errors raised by the Tournament Scheduling System.

Only structural problems are raised. A game that cannot be placed is
reported in the scheduler result, never raised.
"""


class SchedulerError(Exception):
    """Base class for all scheduling errors."""


class InvalidInputError(SchedulerError, ValueError):
    """Malformed or insufficient input, detected before any computation."""


class NotFoundError(InvalidInputError):
    """A referenced event, team or court id is not in the supplied data."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


class PersistenceError(SchedulerError):
    """An apply batch could not be written. Nothing from the batch was kept."""
