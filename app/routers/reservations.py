"""Reservation + history endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from app.schemas.reservation import ReservationOut
from app.services.history_service import list_history
from app.services.occupancy_service import reserve
from app.services.upload_service import save_upload, photo_filename
from app.stores import get_storage
from app.stores.interfaces import ParkingStorage

router = APIRouter()


@router.post("/reservar", summary="Reserve a free space")
async def create_reservation(
    dni: str = Form(...),
    placa: str = Form(...),
    codigo_espacio: str = Form(...),
    nombre_conductor: str = Form(...),
    tarjeta_propiedad: str = Form(...),
    foto: Optional[UploadFile] = File(None),
    storage: ParkingStorage = Depends(get_storage),
):
    """
    404 if the space does not exist.
    400 if the space is not free or the dni already has an active reservation.
    """
    photo_ref = await save_upload(foto, naming=photo_filename)
    # The state machine takes a blocking lock, keep it off the event loop
    reservation = await run_in_threadpool(
        reserve, storage, dni, placa, codigo_espacio, nombre_conductor, tarjeta_propiedad, photo_ref,
    )
    return {
        "status": "reserved",
        "message": "Reserva realizada correctamente",
        "reserva": ReservationOut.model_validate(reservation),
    }


@router.get("/historial", response_model=list[ReservationOut], summary="Reservation history")
def get_history(storage: ParkingStorage = Depends(get_storage)):
    """All reservations, latest entry first; never-entered reservations last."""
    return [ReservationOut.model_validate(r) for r in list_history(storage)]
