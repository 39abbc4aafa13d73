# util/errors.py
from fastapi import HTTPException, status


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self, message: str, http_status: int = status.HTTP_400_BAD_REQUEST
    ) -> None:
        super().__init__(status_code=http_status, detail=message)


class BadRequestError(AppError):
    """Caller error: missing relay key, unparsable payload, invalid name."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class TenantNotFoundError(AppError):
    def __init__(self, name: str) -> None:
        super().__init__(f"tenant {name!r} is not registered", status.HTTP_404_NOT_FOUND)


class StoreNotFoundError(AppError):
    def __init__(self, message: str = "not found any related data") -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class StoreConflictError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_409_CONFLICT)


class StorageUnavailableError(AppError):
    def __init__(self, message: str = "storage unavailable") -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


class BadConfigError(AppError):
    """Stored bind/authentication data is corrupted."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


class RenderError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


class UpstreamError(AppError):
    """Transport-level failure talking to a relay destination."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)
