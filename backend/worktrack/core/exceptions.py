from fastapi import status


class WorktrackError(Exception):
    """Base exception for business rule violations.

    Carries the HTTP status it maps to and a short machine readable code so
    clients can tell e.g. "already checked in" from "already completed".
    """

    status_code = status.HTTP_400_BAD_REQUEST
    code = "error"

    def __init__(self, detail: str, code: str | None = None):
        super().__init__(detail)
        self.detail = detail
        if code is not None:
            self.code = code


class InputValidationError(WorktrackError):
    """Raised when input data is missing or violates record invariants."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_input"


class NotAuthenticatedError(WorktrackError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "not_authenticated"


class NotAuthorizedError(WorktrackError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "not_authorized"


class NotFoundError(WorktrackError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ConflictError(WorktrackError):
    """Raised when an action does not fit the current state of a record."""

    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class UndoWindowExpired(ConflictError):
    code = "undo_window_expired"


class ServiceMisconfiguredError(WorktrackError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "misconfigured"
