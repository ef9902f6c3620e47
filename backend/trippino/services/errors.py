from __future__ import annotations


class TripServiceError(Exception):
    """Base class for business friendly errors surfaced to API consumers."""

    status_code = 400

    def __init__(self, message: str, code: int = 14000) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ValidationError(TripServiceError):
    """Malformed or out-of-range input the client can correct."""

    def __init__(self, message: str, code: int = 14001) -> None:
        super().__init__(message, code=code)


class NotFoundError(TripServiceError):
    """Missing resource, or one owned by another user."""

    status_code = 404

    def __init__(self, message: str, code: int = 14004) -> None:
        super().__init__(message, code=code)


class StorageError(TripServiceError):
    status_code = 500

    def __init__(self, message: str = "server error", code: int = 14500) -> None:
        super().__init__(message, code=code)


TRIP_NOT_FOUND = 14004
CITY_NOT_FOUND = 14005
USER_NOT_FOUND = 14006
NO_FIELDS_TO_UPDATE = 14002
INVALID_ORDER = 14003
NOT_NEXT_CITY = 14020
NO_NEXT_CITY = 14021
INVALID_MODE = 14022


__all__ = [
    "TripServiceError",
    "ValidationError",
    "NotFoundError",
    "StorageError",
    "TRIP_NOT_FOUND",
    "CITY_NOT_FOUND",
    "USER_NOT_FOUND",
    "NO_FIELDS_TO_UPDATE",
    "INVALID_ORDER",
    "NOT_NEXT_CITY",
    "NO_NEXT_CITY",
    "INVALID_MODE",
]
