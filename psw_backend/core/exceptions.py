"""Service-level errors raised below the HTTP layer.

Routes translate these into ``HTTPException`` responses; nothing in the
services or repositories imports FastAPI.
"""


class ServiceError(Exception):
    """Base error carrying an HTTP status and field-scoped messages."""

    status_code = 500

    def __init__(self, message: str, errors: dict[str, list[str]] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}

    def to_detail(self) -> dict:
        detail = {'message': self.message}
        if self.errors:
            detail['errors'] = self.errors
        return detail


class AvailabilityValidationError(ServiceError):
    """Submitted schedule breaks a slot rule (range, duplicate, overlap, day reference)."""

    status_code = 422

    def __init__(self, field: str, message: str):
        super().__init__(message, {field: [message]})
        self.field = field


class NotFoundError(ServiceError):
    status_code = 404


class OperationFailedError(ServiceError):
    """Unexpected failure. The message is safe to show to callers."""

    status_code = 500
