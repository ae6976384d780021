"""SQLAlchemy implementation of the parking stores.

Each transaction is one database transaction on its own Session. Mutating
transactions are also serialized in-process, because SQLite cannot lock the
rows that reserve reads before it writes.
"""

import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.domain.errors import StorageFailure
from app.domain.models import (
    OpenPhase,
    Report,
    ReportDraft,
    Reservation,
    ReservationDraft,
    Space,
    SpaceState,
    to_naive_utc,
)
from app.models.report import Report as ReportRow
from app.models.reservation import Reservation as ReservationRow
from app.models.space import Space as SpaceRow
from app.stores.interfaces import (
    ParkingStorage,
    ReportLog,
    ReservationLedger,
    SpaceStore,
    UnitOfWork,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _space(row: SpaceRow) -> Space:
    # Older databases seeded 'Libre' with a capital letter
    return Space(id=row.id, code=row.code, state=SpaceState(row.state.lower()))


def _reservation(row: ReservationRow) -> Reservation:
    # Rows written by the old server hold ISO strings ending in "Z", which load tz-aware
    return Reservation(
        id=row.id,
        holder_id=row.holder_id,
        plate=row.plate,
        space_code=row.space_code,
        driver_name=row.driver_name,
        property_card_ref=row.property_card_ref,
        photo_ref=row.photo_ref,
        entry_time=to_naive_utc(row.entry_time),
        exit_time=to_naive_utc(row.exit_time),
    )


def _report(row: ReportRow) -> Report:
    return Report(
        id=row.id,
        reporter_name=row.reporter_name,
        holder_id=row.holder_id,
        description=row.description,
        screenshot_ref=row.screenshot_ref,
    )


class SqlSpaceStore(SpaceStore):
    def __init__(self, db: Session):
        self.db = db

    def get_by_code(self, code: str) -> Optional[Space]:
        row = self.db.query(SpaceRow).filter(SpaceRow.code == code).first()
        return _space(row) if row else None

    def list_all(self) -> list[Space]:
        return [_space(row) for row in self.db.query(SpaceRow).order_by(SpaceRow.id).all()]

    def set_state(self, code: str, new_state: SpaceState) -> bool:
        row = self.db.query(SpaceRow).filter(SpaceRow.code == code).first()
        if not row:
            return False
        row.state = SpaceState(new_state).value
        self.db.flush()
        return True

    def seed(self, codes: list[str]) -> int:
        existing = {code for (code,) in self.db.query(SpaceRow.code).all()}
        missing = [code for code in codes if code not in existing]
        for code in missing:
            self.db.add(SpaceRow(code=code, state=SpaceState.FREE.value))
        self.db.flush()
        return len(missing)


class SqlReservationLedger(ReservationLedger):
    def __init__(self, db: Session):
        self.db = db

    def find_active_by_holder(self, holder_id: str) -> Optional[Reservation]:
        row = (
            self.db.query(ReservationRow)
            .filter(ReservationRow.holder_id == holder_id, ReservationRow.exit_time.is_(None))
            .order_by(ReservationRow.id)
            .first()
        )
        return _reservation(row) if row else None

    def find_open_by_space(self, code: str, phase: OpenPhase) -> Optional[Reservation]:
        q = self.db.query(ReservationRow).filter(
            ReservationRow.space_code == code,
            ReservationRow.exit_time.is_(None),
        )
        if phase is OpenPhase.AWAITING_ENTRY:
            q = q.filter(ReservationRow.entry_time.is_(None))
        else:
            q = q.filter(ReservationRow.entry_time.isnot(None))
        row = q.order_by(ReservationRow.id).first()
        return _reservation(row) if row else None

    def create(self, draft: ReservationDraft) -> Reservation:
        row = ReservationRow(
            holder_id=draft.holder_id,
            plate=draft.plate,
            space_code=draft.space_code,
            driver_name=draft.driver_name,
            property_card_ref=draft.property_card_ref,
            photo_ref=draft.photo_ref,
        )
        self.db.add(row)
        self.db.flush()   # assigns the autoincrement id
        return _reservation(row)

    def mark_entry(self, reservation_id: int, timestamp: datetime) -> bool:
        row = self.db.get(ReservationRow, reservation_id)
        if not row:
            return False
        row.entry_time = timestamp
        self.db.flush()
        return True

    def mark_exit(self, reservation_id: int, timestamp: datetime) -> bool:
        row = self.db.get(ReservationRow, reservation_id)
        if not row:
            return False
        row.exit_time = timestamp
        self.db.flush()
        return True

    def list_all(self) -> list[Reservation]:
        return [_reservation(row) for row in self.db.query(ReservationRow).order_by(ReservationRow.id).all()]


class SqlReportLog(ReportLog):
    def __init__(self, db: Session):
        self.db = db

    def append(self, draft: ReportDraft) -> Report:
        row = ReportRow(
            reporter_name=draft.reporter_name,
            holder_id=draft.holder_id,
            description=draft.description,
            screenshot_ref=draft.screenshot_ref,
        )
        self.db.add(row)
        self.db.flush()
        return _report(row)

    def list_all(self) -> list[Report]:
        return [_report(row) for row in self.db.query(ReportRow).order_by(ReportRow.id).all()]


def _unit_of_work(db: Session) -> UnitOfWork:
    return UnitOfWork(
        spaces=SqlSpaceStore(db),
        reservations=SqlReservationLedger(db),
        reports=SqlReportLog(db),
    )


class SqlStorage(ParkingStorage):
    """Relational backend on any SQLAlchemy engine."""

    name = "sql"

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self):
        with self._lock:
            db = self.session_factory()
            try:
                yield _unit_of_work(db)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Database transaction failed: {e}", exc_info=True)
                raise StorageFailure(str(e)) from e
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

    @contextmanager
    def snapshot(self):
        db = self.session_factory()
        try:
            yield _unit_of_work(db)
        except SQLAlchemyError as e:
            logger.error(f"Database read failed: {e}", exc_info=True)
            raise StorageFailure(str(e)) from e
        finally:
            db.rollback()
            db.close()
