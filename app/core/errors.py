"""Domain error kinds raised by the service layer.

Each kind carries a stable machine-readable ``code`` and the HTTP status the
API maps it to, so routes never build error responses by hand.
"""


class DomainError(Exception):
    code = "error"
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Malformed or missing input."""

    code = "validation_error"
    status_code = 422


class NotFoundError(DomainError):
    """Unknown doctor, appointment or slot."""

    code = "not_found"
    status_code = 404


class SlotUnavailableError(DomainError):
    """Slot already booked, missing, or the booking race was lost."""

    code = "slot_unavailable"
    status_code = 409


class ForbiddenError(DomainError):
    """Actor does not own the target record."""

    code = "forbidden"
    status_code = 403


class InvalidTransitionError(DomainError):
    """Appointment is in a terminal status that forbids the change."""

    code = "invalid_transition"
    status_code = 409


class AuthenticationError(DomainError):
    code = "unauthorized"
    status_code = 401
