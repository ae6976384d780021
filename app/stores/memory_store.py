"""In-memory implementation of the parking stores.

State lives in a _MemoryState. A transaction works on a shallow copy and
swaps it in on success, so a failed block leaves the committed state
untouched. Records are frozen dataclasses, so shallow copies are safe.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
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
from app.stores.interfaces import (
    ParkingStorage,
    ReportLog,
    ReservationLedger,
    SpaceStore,
    UnitOfWork,
)


@dataclass
class _MemoryState:
    spaces: dict[str, Space] = field(default_factory=dict)
    reservations: dict[int, Reservation] = field(default_factory=dict)
    reports: list[Report] = field(default_factory=list)
    # Backend-owned id counters (last id handed out per collection)
    last_ids: dict[str, int] = field(default_factory=lambda: {"espacios": 0, "reservas": 0, "reportes": 0})

    def copy(self) -> "_MemoryState":
        return _MemoryState(
            spaces=dict(self.spaces),
            reservations=dict(self.reservations),
            reports=list(self.reports),
            last_ids=dict(self.last_ids),
        )

    def next_id(self, collection: str) -> int:
        self.last_ids[collection] += 1
        return self.last_ids[collection]


class MemorySpaceStore(SpaceStore):
    def __init__(self, state: _MemoryState):
        self._state = state

    def get_by_code(self, code: str) -> Optional[Space]:
        return self._state.spaces.get(code)

    def list_all(self) -> list[Space]:
        return sorted(self._state.spaces.values(), key=lambda s: s.id)

    def set_state(self, code: str, new_state: SpaceState) -> bool:
        space = self._state.spaces.get(code)
        if space is None:
            return False
        self._state.spaces[code] = replace(space, state=SpaceState(new_state))
        return True

    def seed(self, codes: list[str]) -> int:
        added = 0
        for code in codes:
            if code in self._state.spaces:
                continue
            self._state.spaces[code] = Space(id=self._state.next_id("espacios"), code=code, state=SpaceState.FREE)
            added += 1
        return added


class MemoryReservationLedger(ReservationLedger):
    def __init__(self, state: _MemoryState):
        self._state = state

    def find_active_by_holder(self, holder_id: str) -> Optional[Reservation]:
        for reservation in self.list_all():
            if reservation.holder_id == holder_id and reservation.is_active:
                return reservation
        return None

    def find_open_by_space(self, code: str, phase: OpenPhase) -> Optional[Reservation]:
        for reservation in self.list_all():
            if reservation.space_code == code and reservation.matches_phase(phase):
                return reservation
        return None

    def create(self, draft: ReservationDraft) -> Reservation:
        reservation = Reservation(
            id=self._state.next_id("reservas"),
            holder_id=draft.holder_id,
            plate=draft.plate,
            space_code=draft.space_code,
            driver_name=draft.driver_name,
            property_card_ref=draft.property_card_ref,
            photo_ref=draft.photo_ref,
        )
        self._state.reservations[reservation.id] = reservation
        return reservation

    def mark_entry(self, reservation_id: int, timestamp: datetime) -> bool:
        return self._stamp(reservation_id, entry_time=timestamp)

    def mark_exit(self, reservation_id: int, timestamp: datetime) -> bool:
        return self._stamp(reservation_id, exit_time=timestamp)

    def _stamp(self, reservation_id: int, **changes) -> bool:
        reservation = self._state.reservations.get(reservation_id)
        if reservation is None:
            return False
        self._state.reservations[reservation_id] = replace(reservation, **changes)
        return True

    def list_all(self) -> list[Reservation]:
        return sorted(self._state.reservations.values(), key=lambda r: r.id)


class MemoryReportLog(ReportLog):
    def __init__(self, state: _MemoryState):
        self._state = state

    def append(self, draft: ReportDraft) -> Report:
        report = Report(
            id=self._state.next_id("reportes"),
            reporter_name=draft.reporter_name,
            holder_id=draft.holder_id,
            description=draft.description,
            screenshot_ref=draft.screenshot_ref,
        )
        self._state.reports.append(report)
        return report

    def list_all(self) -> list[Report]:
        return list(self._state.reports)


def _unit_of_work(state: _MemoryState) -> UnitOfWork:
    return UnitOfWork(
        spaces=MemorySpaceStore(state),
        reservations=MemoryReservationLedger(state),
        reports=MemoryReportLog(state),
    )


class MemoryStorage(ParkingStorage):
    """Process-local storage. Mutations are serialized by a single RLock."""

    name = "memory"

    def __init__(self):
        self._lock = threading.RLock()
        self._state = _MemoryState()

    @contextmanager
    def transaction(self):
        with self._lock:
            working = self._state.copy()
            yield _unit_of_work(working)
            self._commit(working)
            self._state = working

    @contextmanager
    def snapshot(self):
        with self._lock:
            view = self._state.copy()
        yield _unit_of_work(view)

    def _commit(self, working: _MemoryState) -> None:
        """Hook run before the working copy replaces the committed state."""
