"""JSON file snapshot backend.

Same semantics as the memory backend; every committed transaction rewrites
the whole file. The file uses the persisted collection names (espacios,
reservas, reportes) and field names of the HTTP API, so a db.json written
by older deployments loads as-is.
"""

import contextlib
import json
import os
import tempfile
from datetime import datetime
from typing import Optional

from app.domain.errors import StorageFailure
from app.domain.models import Report, Reservation, Space, SpaceState, to_naive_utc
from app.stores.memory_store import MemoryStorage, _MemoryState
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _format_ts(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return to_naive_utc(datetime.fromisoformat(value))


def state_to_dict(state: _MemoryState) -> dict:
    return {
        "espacios": [
            {"id": s.id, "codigo": s.code, "estado": s.state.value}
            for s in sorted(state.spaces.values(), key=lambda s: s.id)
        ],
        "reservas": [
            {
                "id": r.id,
                "dni": r.holder_id,
                "placa": r.plate,
                "codigo_espacio": r.space_code,
                "nombre_conductor": r.driver_name,
                "tarjeta_propiedad": r.property_card_ref,
                "foto": r.photo_ref,
                "hora_entrada": _format_ts(r.entry_time),
                "hora_salida": _format_ts(r.exit_time),
            }
            for r in sorted(state.reservations.values(), key=lambda r: r.id)
        ],
        "reportes": [
            {
                "id": r.id,
                "nombre": r.reporter_name,
                "dni": r.holder_id,
                "descripcion": r.description,
                "captura": r.screenshot_ref,
            }
            for r in state.reports
        ],
        "ultimos_ids": dict(state.last_ids),
    }


def state_from_dict(data: dict) -> _MemoryState:
    state = _MemoryState()
    for row in data.get("espacios", []):
        space = Space(id=row["id"], code=str(row["codigo"]), state=SpaceState(row["estado"].lower()))
        state.spaces[space.code] = space
    for row in data.get("reservas", []):
        reservation = Reservation(
            id=row["id"],
            holder_id=row.get("dni"),
            plate=row.get("placa"),
            space_code=row.get("codigo_espacio"),
            driver_name=row.get("nombre_conductor"),
            property_card_ref=row.get("tarjeta_propiedad"),
            photo_ref=row.get("foto"),
            entry_time=_parse_ts(row.get("hora_entrada")),
            exit_time=_parse_ts(row.get("hora_salida")),
        )
        state.reservations[reservation.id] = reservation
    for row in data.get("reportes", []):
        state.reports.append(Report(
            id=row["id"],
            reporter_name=row.get("nombre"),
            holder_id=row.get("dni") or "",
            description=row.get("descripcion"),
            screenshot_ref=row.get("captura"),
        ))

    # Files written without counters get them from the highest ids present
    saved = data.get("ultimos_ids", {})
    state.last_ids = {
        "espacios": saved.get("espacios", max((s.id for s in state.spaces.values()), default=0)),
        "reservas": saved.get("reservas", max(state.reservations, default=0)),
        "reportes": saved.get("reportes", max((r.id for r in state.reports), default=0)),
    }
    return state


class FileStorage(MemoryStorage):
    """Memory backend persisted to a JSON file after every commit."""

    name = "file"

    def __init__(self, path: str):
        super().__init__()
        self.path = path
        if os.path.exists(path):
            try:
                with open(path, encoding="utf-8") as f:
                    self._state = state_from_dict(json.load(f))
            except (OSError, ValueError, KeyError) as e:
                raise StorageFailure(f"cannot load {path}: {e}") from e
            logger.info(f"Loaded parking state from {path}")

    def _commit(self, working: _MemoryState) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".parking-", suffix=".json")
        except OSError as e:
            logger.error(f"Failed to write {self.path}: {e}", exc_info=True)
            raise StorageFailure(f"cannot write {self.path}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(state_to_dict(working), f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except Exception as e:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_path)
            if isinstance(e, OSError):
                logger.error(f"Failed to write {self.path}: {e}", exc_info=True)
                raise StorageFailure(f"cannot write {self.path}: {e}") from e
            raise
