"""
User issue reports. Append-only and independent of space occupancy.
"""

from typing import Optional

from app.domain.errors import ValidationError
from app.domain.models import Report, ReportDraft
from app.stores.interfaces import ParkingStorage
from app.utils.logger import get_logger

logger = get_logger(__name__)


def submit_report(storage: ParkingStorage, reporter_name: str, holder_id: Optional[str],
                  description: str, screenshot_ref: Optional[str] = None) -> Report:
    """Persist a report. Only the description is required."""
    if description is None or not description.strip():
        raise ValidationError("descripcion")

    with storage.transaction() as uow:
        report = uow.reports.append(ReportDraft(
            reporter_name=reporter_name,
            holder_id=holder_id or "",
            description=description,
            screenshot_ref=screenshot_ref,
        ))

    logger.info(f"[REPORT] #{report.id} from {reporter_name or 'anonymous'}"
                f"{' (with screenshot)' if screenshot_ref else ''}")
    return report


def list_reports(storage: ParkingStorage) -> list[Report]:
    with storage.snapshot() as uow:
        return uow.reports.list_all()
