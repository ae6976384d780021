"""Issue report endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from app.schemas.report import ReportOut
from app.services.report_service import submit_report, list_reports
from app.services.upload_service import save_upload, screenshot_filename
from app.stores import get_storage
from app.stores.interfaces import ParkingStorage

router = APIRouter()


@router.post("/reporte", summary="Submit an issue report")
async def create_report(
    descripcion: str = Form(...),
    nombre: Optional[str] = Form(None),
    dni: Optional[str] = Form(None),
    captura: Optional[UploadFile] = File(None),
    storage: ParkingStorage = Depends(get_storage),
):
    screenshot_ref = await save_upload(captura, naming=screenshot_filename)
    report = await run_in_threadpool(submit_report, storage, nombre, dni, descripcion, screenshot_ref)
    return {"status": "ok", "message": "Reporte enviado correctamente", "id": report.id}


@router.get("/reportes", response_model=list[ReportOut], summary="List submitted reports")
def get_reports(storage: ParkingStorage = Depends(get_storage)):
    return [ReportOut.model_validate(r) for r in list_reports(storage)]
