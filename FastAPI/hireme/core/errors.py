"""Domain errors raised by the catalog, tracker and user directory.

Each error carries the HTTP status it maps to; main.py turns them into the
``{success: false, message, errors?}`` envelope.
"""


class HireMeError(Exception):
    status_code = 400

    def __init__(self, message: str, errors: list[dict] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ValidationError(HireMeError):
    """Malformed or out-of-range input, or a violated field invariant."""

    status_code = 400


class NotFoundError(HireMeError):
    status_code = 404


class ForbiddenError(HireMeError):
    """Authenticated, but not the owner (or wrong role) for this resource."""

    status_code = 403


class ConflictError(HireMeError):
    status_code = 409


class InvalidOperationError(HireMeError):
    """Well-formed request that breaks a business rule (expired job, wrong state)."""

    status_code = 400
