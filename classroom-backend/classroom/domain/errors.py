"""Errors raised by the form-session engine.

Every error is recoverable by the caller; the HTTP layer maps them to
client-facing rejections.
"""


class ClassroomError(Exception):
    """Base class for all domain errors."""


class ValidationError(ClassroomError):
    """Malformed or incomplete input. ``field`` names the offending field."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class NotFoundError(ClassroomError):
    """A referenced course, form, question or participant does not exist."""


class InvalidStateError(ClassroomError):
    """The operation is not allowed in the form's current lifecycle state."""


class AliasConflict(ClassroomError):
    """The alias is already held by another participant of the same form."""

    def __init__(self, alias: str) -> None:
        super().__init__(f"Alias '{alias}' is already taken")
        self.alias = alias


class PermissionDeniedError(ClassroomError):
    """The acting user does not own the course."""


class ConcurrentUpdateError(ClassroomError):
    """The course changed in the store since it was loaded."""
