from .reservation_schemas import (
    AvailabilityResponse,
    CancellationResponse,
    LocationPreference,
    ReservationCreate,
    ReservationCreatedResponse,
    ReservationListResponse,
    ReservationResponse,
    ReservationStatus,
    ReservationUpdate,
    SlotGridResponse,
    TimeSlot,
)

__all__ = [
    "AvailabilityResponse",
    "CancellationResponse",
    "LocationPreference",
    "ReservationCreate",
    "ReservationCreatedResponse",
    "ReservationListResponse",
    "ReservationResponse",
    "ReservationStatus",
    "ReservationUpdate",
    "SlotGridResponse",
    "TimeSlot",
]
