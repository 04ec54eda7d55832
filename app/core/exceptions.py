from fastapi import status


class SafeNestError(Exception):
    """Base error carrying the HTTP status it should be rendered with."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(SafeNestError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(SafeNestError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(SafeNestError):
    status_code = status.HTTP_404_NOT_FOUND


class StorageError(SafeNestError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
