# backend/modules/reservations/models/audit_models.py

"""
Archive of cancelled reservations.

Cancelling hard-deletes the active row; the copy kept here is what tells an
already-cancelled reservation apart from one that never existed.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, Index
from sqlalchemy.sql import func
from core.database import Base
import enum


class AuditAction(enum.Enum):
    """Audit action types"""

    CANCELLED = "cancelled"


class ReservationArchive(Base):
    """Copy of a reservation taken just before it is deleted"""

    __tablename__ = "reservation_archive"

    id = Column(Integer, primary_key=True, index=True)
    reservation_id = Column(Integer, nullable=False)
    confirmation_code = Column(String(32), nullable=False)
    action = Column(String(50), nullable=False, default=AuditAction.CANCELLED.value)

    snapshot = Column(JSON, nullable=False)  # Reservation.to_dict() before delete
    reason = Column(Text)

    # Who cancelled
    user_ip = Column(String(45))
    user_agent = Column(String(255))

    cancelled_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_reservation_archive_reservation_id", "reservation_id"),
        Index("idx_reservation_archive_code", "confirmation_code"),
    )

    def __repr__(self):
        return f"<ReservationArchive {self.confirmation_code} - {self.action}>"
