# backend/modules/reservations/models/reservation_models.py

"""
Reservation records and their consumed-table assignment.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, Date, Time, Text, Enum, JSON, Index
)
from sqlalchemy.sql import func
from core.database import Base
import enum


class ReservationStatus(enum.Enum):
    """Reservation lifecycle: requested -> confirmed -> cancelled"""

    REQUESTED = "requested"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class LocationPreference(enum.Enum):
    """Where the guest would like to sit"""

    INDIFERENTE = "indiferente"
    INTERIOR = "interior"
    TERRAZA = "terraza"


class Reservation(Base):
    """An active reservation and the physical tables it holds"""

    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    confirmation_code = Column(String(32), unique=True, nullable=False, index=True)
    cancellation_token = Column(String(36), unique=True, nullable=False)

    # Guest contact
    guest_name = Column(String(50), nullable=False)
    guest_surname = Column(String(50))
    guest_email = Column(String(100), nullable=False, index=True)
    guest_phone = Column(String(20))

    # Reservation details
    reservation_date = Column(Date, nullable=False, index=True)
    reservation_time = Column(Time, nullable=False)
    party_size = Column(Integer, nullable=False)
    location_preference = Column(
        Enum(LocationPreference), default=LocationPreference.INDIFERENTE
    )
    occasion = Column(String(100))
    allergies = Column(Text)
    comments = Column(Text)

    status = Column(
        Enum(ReservationStatus), default=ReservationStatus.REQUESTED, index=True
    )

    # Table assignment
    unit_id = Column(String(20), nullable=False)  # Table or combination granted
    table_ids = Column(JSON, default=list)  # Physical tables consumed

    # Request info
    ip_address = Column(String(45))
    user_agent = Column(String(255))

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    confirmed_at = Column(DateTime(timezone=True))

    __table_args__ = (
        Index("idx_reservation_date_time", "reservation_date", "reservation_time"),
        Index("idx_reservation_status_date", "status", "reservation_date"),
    )

    @property
    def table_numbers(self) -> str:
        return ", ".join(self.table_ids or [])

    def to_dict(self) -> dict:
        """Plain snapshot used for the cancellation archive"""
        return {
            "id": self.id,
            "confirmation_code": self.confirmation_code,
            "guest_name": self.guest_name,
            "guest_surname": self.guest_surname,
            "guest_email": self.guest_email,
            "guest_phone": self.guest_phone,
            "reservation_date": self.reservation_date.isoformat(),
            "reservation_time": self.reservation_time.strftime("%H:%M"),
            "party_size": self.party_size,
            "location_preference": (
                self.location_preference.value if self.location_preference else None
            ),
            "occasion": self.occasion,
            "allergies": self.allergies,
            "comments": self.comments,
            "status": self.status.value if self.status else None,
            "unit_id": self.unit_id,
            "table_ids": list(self.table_ids or []),
        }

    def __repr__(self):
        return (
            f"<Reservation {self.confirmation_code} - {self.party_size} pax on "
            f"{self.reservation_date} at {self.reservation_time} ({self.unit_id})>"
        )
