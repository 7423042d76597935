from typing import Optional


class ZooApiError(Exception):
    """Base error carrying the HTTP status used in the response envelope."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(ZooApiError):
    status_code = 400


class AuthenticationError(ZooApiError):
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class PermissionDeniedError(ZooApiError):
    status_code = 403

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(message)


class NotFoundError(ZooApiError):
    status_code = 404


class ApiError(Exception):
    """Raised by the API client for any failed request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404
