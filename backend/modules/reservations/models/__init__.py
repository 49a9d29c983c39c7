from .reservation_models import (
    Reservation,
    ReservationStatus,
    LocationPreference,
)
from .audit_models import ReservationArchive, AuditAction

__all__ = [
    "Reservation",
    "ReservationStatus",
    "LocationPreference",
    "ReservationArchive",
    "AuditAction",
]
