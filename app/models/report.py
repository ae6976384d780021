"""
User issue reports table. Append-only.
"""

from sqlalchemy import Column, Integer, String, Text
from app.database import Base


class Report(Base):
    __tablename__ = "reportes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reporter_name = Column("nombre", String(200))
    holder_id = Column("dni", String(50))
    description = Column("descripcion", Text, nullable=False)
    screenshot_ref = Column("captura", String(255))

    def __repr__(self):
        return f"<Report {self.id} nombre={self.reporter_name}>"
