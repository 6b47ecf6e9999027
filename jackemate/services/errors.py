# jackemate/services/errors.py
"""Domain errors raised by the service layer and mapped to HTTP in main.py."""


class ServiceError(Exception):
    """Base class for errors the API turns into a JSON ``{"error": ...}`` body."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError, ValueError):
    status_code = 400


class PermissionDeniedError(ServiceError):
    status_code = 401


class NotFoundError(ServiceError, LookupError):
    status_code = 404
