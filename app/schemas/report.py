from pydantic import BaseModel, Field
from typing import Optional


class ReportOut(BaseModel):
    id: int
    nombre: Optional[str] = Field(validation_alias="reporter_name")
    dni: Optional[str] = Field(validation_alias="holder_id")
    descripcion: str = Field(validation_alias="description")
    captura: Optional[str] = Field(default=None, validation_alias="screenshot_ref")

    class Config:
        from_attributes = True
        populate_by_name = True
