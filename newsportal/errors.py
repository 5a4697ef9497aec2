"""
Domain error taxonomy.

Services raise these instead of returning ``None`` / ``False`` so that the
HTTP layer can translate every failure with a single exception handler
(see ``newsportal.main``).  Errors coming from the database that a service
cannot interpret are not wrapped; they propagate as-is.
"""


class DomainError(Exception):
    """Base class for failures the API reports with a specific status code."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Malformed or missing input, e.g. a blank search query."""

    status_code = 400


class Unauthenticated(DomainError):
    status_code = 401


class Forbidden(DomainError):
    """Authenticated, but not the author of the resource."""

    status_code = 403


class NotFound(DomainError):
    status_code = 404


class Conflict(DomainError):
    """Unique-constraint violation detected by the store (slug, email)."""

    status_code = 409
