# backend/modules/reservations/schemas/reservation_schemas.py

"""
Pydantic schemas for the reservation API.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_serializer, field_validator
from datetime import date, time, datetime
from typing import Optional, List
from enum import Enum


class ReservationStatus(str, Enum):
    """Reservation status enum for schemas"""

    REQUESTED = "requested"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class LocationPreference(str, Enum):
    """Seating area preference"""

    INDIFERENTE = "indiferente"
    INTERIOR = "interior"
    TERRAZA = "terraza"


def _format_slot(value: time) -> str:
    return value.strftime("%H:%M")


class TimeSlot(BaseModel):
    """Availability of one service slot"""

    time: time
    turno: str
    disponible: bool

    @field_serializer("time")
    def serialize_time(self, value: time) -> str:
        return _format_slot(value)


class SlotGridResponse(BaseModel):
    """All service slots of a date"""

    fecha: date
    personas: int
    es_dia_cerrado: bool
    horarios: List[TimeSlot]


class AvailabilityResponse(BaseModel):
    """Single slot availability"""

    disponible: bool
    fecha: date
    hora: time
    personas: int

    @field_serializer("hora")
    def serialize_hora(self, value: time) -> str:
        return _format_slot(value)


class ReservationBase(BaseModel):
    """Base reservation schema"""

    guest_name: str = Field(..., min_length=2, max_length=50)
    guest_surname: Optional[str] = Field(None, max_length=50)
    guest_email: EmailStr
    guest_phone: Optional[str] = Field(None, min_length=6, max_length=20)
    reservation_date: date
    reservation_time: time
    party_size: int = Field(..., ge=1, le=20)
    location_preference: LocationPreference = LocationPreference.INDIFERENTE
    occasion: Optional[str] = Field(None, max_length=100)
    allergies: Optional[str] = Field(None, max_length=500)
    comments: Optional[str] = Field(None, max_length=500)

    @field_validator("guest_name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters long")
        if "<script" in v.lower() or "javascript:" in v.lower():
            raise ValueError("Name contains invalid characters")
        return v


class ReservationCreate(ReservationBase):
    """Schema for creating a new reservation"""

    @field_validator("reservation_date")
    @classmethod
    def validate_date(cls, v):
        if v < date.today():
            raise ValueError("Reservation date cannot be in the past")
        return v


class ReservationUpdate(BaseModel):
    """Schema for updating a reservation"""

    guest_name: Optional[str] = Field(None, min_length=2, max_length=50)
    guest_surname: Optional[str] = Field(None, max_length=50)
    guest_email: Optional[EmailStr] = None
    guest_phone: Optional[str] = Field(None, min_length=6, max_length=20)
    reservation_date: Optional[date] = None
    reservation_time: Optional[time] = None
    party_size: Optional[int] = Field(None, ge=1, le=20)
    location_preference: Optional[LocationPreference] = None
    occasion: Optional[str] = Field(None, max_length=100)
    allergies: Optional[str] = Field(None, max_length=500)
    comments: Optional[str] = Field(None, max_length=500)


class ReservationResponse(BaseModel):
    """Schema for reservation response"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    confirmation_code: str
    guest_name: str
    guest_surname: Optional[str] = None
    guest_email: str
    guest_phone: Optional[str] = None
    reservation_date: date
    reservation_time: time
    party_size: int
    location_preference: Optional[LocationPreference] = None
    occasion: Optional[str] = None
    allergies: Optional[str] = None
    comments: Optional[str] = None
    status: ReservationStatus

    # Table assignment
    unit_id: str
    table_ids: List[str] = []

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None

    @field_validator("status", "location_preference", mode="before")
    @classmethod
    def unwrap_model_enum(cls, v):
        return getattr(v, "value", v)

    @field_serializer("reservation_time")
    def serialize_time(self, value: time) -> str:
        return _format_slot(value)


class ReservationCreatedResponse(ReservationResponse):
    """Returned once, on creation: includes the cancellation token"""

    cancellation_token: str


class CancellationResponse(BaseModel):
    """Schema for cancellation result"""

    confirmation_code: str
    released_table_ids: List[str]
    cancelled_at: Optional[datetime] = None


class ReservationListResponse(BaseModel):
    """Schema for list of reservations"""

    reservations: List[ReservationResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
