from pydantic import BaseModel, Field
from app.domain.models import SpaceState


class SpaceOut(BaseModel):
    id: int
    codigo: str = Field(validation_alias="code")
    estado: SpaceState = Field(validation_alias="state")

    class Config:
        from_attributes = True
        populate_by_name = True
        use_enum_values = True


class SpaceCodeIn(BaseModel):
    """Body of /ingresar and /salir."""
    codigo_espacio: str
