from app.domain.errors import (  # noqa
    ConflictError,
    DomainError,
    DuplicateActiveReservationError,
    ErrorCode,
    NotFoundError,
    SpaceNotFoundError,
    SpaceUnavailableError,
    StorageFailure,
    ValidationError,
)
from app.domain.models import (  # noqa
    OpenPhase,
    Report,
    ReportDraft,
    Reservation,
    ReservationDraft,
    Space,
    SpaceState,
)
