"""Store interfaces (repository pattern).

The occupancy service only talks to these contracts, so the memory, file
and SQL backends are interchangeable. Stores return domain records from
app.domain.models, never ORM rows.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Optional

from app.domain.models import (
    OpenPhase,
    Report,
    ReportDraft,
    Reservation,
    ReservationDraft,
    Space,
    SpaceState,
)


class SpaceStore(ABC):
    """Fixed catalog of spaces and their current state."""

    @abstractmethod
    def get_by_code(self, code: str) -> Optional[Space]:
        """Return the space with this code, or None if unknown."""
        ...

    @abstractmethod
    def list_all(self) -> list[Space]:
        """Return all spaces ordered by id."""
        ...

    @abstractmethod
    def set_state(self, code: str, new_state: SpaceState) -> bool:
        """Set the state of a space. Returns False if the code is unknown."""
        ...

    @abstractmethod
    def seed(self, codes: list[str]) -> int:
        """Insert missing codes as free spaces. Returns how many were added."""
        ...


class ReservationLedger(ABC):
    """Open and closed reservation records."""

    @abstractmethod
    def find_active_by_holder(self, holder_id: str) -> Optional[Reservation]:
        """Return the holder's reservation without check-out, if any."""
        ...

    @abstractmethod
    def find_open_by_space(self, code: str, phase: OpenPhase) -> Optional[Reservation]:
        """Return the oldest reservation on this space in the given phase."""
        ...

    @abstractmethod
    def create(self, draft: ReservationDraft) -> Reservation:
        """Persist a new reservation with a fresh id and no timestamps."""
        ...

    @abstractmethod
    def mark_entry(self, reservation_id: int, timestamp: datetime) -> bool:
        ...

    @abstractmethod
    def mark_exit(self, reservation_id: int, timestamp: datetime) -> bool:
        ...

    @abstractmethod
    def list_all(self) -> list[Reservation]:
        """Return all reservations ordered by id."""
        ...


class ReportLog(ABC):
    """Append-only log of user issue reports."""

    @abstractmethod
    def append(self, draft: ReportDraft) -> Report:
        ...

    @abstractmethod
    def list_all(self) -> list[Report]:
        ...


class UnitOfWork:
    """The three stores of one transaction, committed together."""

    def __init__(self, spaces: SpaceStore, reservations: ReservationLedger, reports: ReportLog):
        self.spaces = spaces
        self.reservations = reservations
        self.reports = reports


class ParkingStorage(ABC):
    """A persistence backend for the parking state.

    transaction() serializes mutating work: everything done through the
    yielded UnitOfWork commits as one unit, or not at all if the block raises.
    """

    name = "abstract"

    @abstractmethod
    def transaction(self) -> AbstractContextManager[UnitOfWork]:
        ...

    @abstractmethod
    def snapshot(self) -> AbstractContextManager[UnitOfWork]:
        """Read-only view for listings. Mutations through it are not persisted."""
        ...

    def seed_spaces(self, codes: list[str]) -> int:
        with self.transaction() as uow:
            return uow.spaces.seed(codes)
