"""
Reservations table.
Rows are created on reserve, stamped on check-in / check-out, never deleted.
A row with hora_salida NULL is an active reservation.
"""

from sqlalchemy import Column, Integer, String, DateTime
from app.database import Base


class Reservation(Base):
    __tablename__ = "reservas"

    id = Column(Integer, primary_key=True, autoincrement=True)
    holder_id = Column("dni", String(50), nullable=False, index=True)
    plate = Column("placa", String(50))
    space_code = Column("codigo_espacio", String(20), nullable=False, index=True)
    driver_name = Column("nombre_conductor", String(200))
    property_card_ref = Column("tarjeta_propiedad", String(200))
    photo_ref = Column("foto", String(255))            # filename in UPLOAD_DIR
    entry_time = Column("hora_entrada", DateTime)      # set on check-in
    exit_time = Column("hora_salida", DateTime)        # set on check-out

    def __repr__(self):
        return f"<Reservation {self.id} dni={self.holder_id} space={self.space_code}>"
