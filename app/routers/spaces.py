"""Space catalog + check-in / check-out endpoints."""

from fastapi import APIRouter, Depends
from app.schemas.space import SpaceOut, SpaceCodeIn
from app.services.occupancy_service import list_spaces, check_in, check_out
from app.stores import get_storage
from app.stores.interfaces import ParkingStorage

router = APIRouter()


@router.get("/espacios", response_model=list[SpaceOut], summary="List all spaces with their state")
def get_spaces(storage: ParkingStorage = Depends(get_storage)):
    return [SpaceOut.model_validate(s) for s in list_spaces(storage)]


@router.post("/ingresar", summary="Register vehicle entry on a space")
def register_entry(body: SpaceCodeIn, storage: ParkingStorage = Depends(get_storage)):
    """
    Stamps entry time on the space's pending reservation and marks it occupied.
    Always 200. The space flips to occupied even without a reservation.
    """
    check_in(storage, body.codigo_espacio)
    return {"status": "ok", "message": "Ingreso registrado"}


@router.post("/salir", summary="Register vehicle exit from a space")
def register_exit(body: SpaceCodeIn, storage: ParkingStorage = Depends(get_storage)):
    """Stamps exit time on the checked-in reservation and frees the space. Always 200."""
    check_out(storage, body.codigo_espacio)
    return {"status": "ok", "message": "Salida registrada"}
