from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class ReservationOut(BaseModel):
    id: int
    dni: Optional[str] = Field(validation_alias="holder_id")
    placa: Optional[str] = Field(validation_alias="plate")
    codigo_espacio: str = Field(validation_alias="space_code")
    nombre_conductor: Optional[str] = Field(validation_alias="driver_name")
    tarjeta_propiedad: Optional[str] = Field(validation_alias="property_card_ref")
    foto: Optional[str] = Field(default=None, validation_alias="photo_ref")
    hora_entrada: Optional[datetime] = Field(default=None, validation_alias="entry_time")
    hora_salida: Optional[datetime] = Field(default=None, validation_alias="exit_time")

    class Config:
        from_attributes = True
        populate_by_name = True
