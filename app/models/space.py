"""
Parking spaces table.
One row per fixed slot; `estado` holds libre | reservado | ocupado.
Only the occupancy service changes `estado`.
"""

from sqlalchemy import Column, Integer, String
from app.database import Base


class Space(Base):
    __tablename__ = "espacios"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column("codigo", String(20), unique=True, nullable=False, index=True)
    state = Column("estado", String(20), nullable=False, default="libre")

    def __repr__(self):
        return f"<Space {self.code} state={self.state}>"
