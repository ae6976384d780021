"""Domain errors raised by the occupancy, report and storage layers."""

from enum import Enum

from app.domain.models import SpaceState


class ErrorCode(Enum):
    SPACE_NOT_FOUND = "SPACE_NOT_FOUND"
    SPACE_UNAVAILABLE = "SPACE_UNAVAILABLE"
    DUPLICATE_ACTIVE_RESERVATION = "DUPLICATE_ACTIVE_RESERVATION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    STORAGE_FAILURE = "STORAGE_FAILURE"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """Referenced entity does not exist."""


class ConflictError(DomainError):
    """Request is well-formed but clashes with current state."""


class SpaceNotFoundError(NotFoundError):
    def __init__(self, space_code: str) -> None:
        super().__init__(ErrorCode.SPACE_NOT_FOUND, "El espacio no existe")
        self.space_code = space_code


class SpaceUnavailableError(ConflictError):
    """Raised when a reservation targets a space that is not free."""

    def __init__(self, space_code: str, current_state: SpaceState) -> None:
        super().__init__(ErrorCode.SPACE_UNAVAILABLE, f"El espacio está {SpaceState(current_state).value}")
        self.space_code = space_code
        self.current_state = current_state


class DuplicateActiveReservationError(ConflictError):
    """Raised when the holder already has a reservation without check-out."""

    def __init__(self, holder_id: str) -> None:
        super().__init__(ErrorCode.DUPLICATE_ACTIVE_RESERVATION, "Ya tienes una reserva activa")
        self.holder_id = holder_id


class ValidationError(DomainError):
    def __init__(self, field: str) -> None:
        super().__init__(ErrorCode.VALIDATION_ERROR, f"Falta el campo obligatorio '{field}'")
        self.field = field


class StorageFailure(DomainError):
    """Backend I/O failed. Surfaced as an opaque server error, never retried."""

    def __init__(self, detail: str) -> None:
        super().__init__(ErrorCode.STORAGE_FAILURE, "Storage backend failure")
        self.detail = detail
