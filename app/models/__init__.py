# Parking reservations — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.space import Space               # noqa
from app.models.reservation import Reservation   # noqa
from app.models.report import Report             # noqa
