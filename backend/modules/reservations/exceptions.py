# backend/modules/reservations/exceptions.py

"""
Typed failures raised by the table assignment engine.

Running out of tables is not an error: the resolver returns ``Unavailable``
for that. Everything here is raised and propagated to the caller.
"""

from typing import Any, Dict, Optional


class ReservationError(Exception):
    """Base class for reservation engine errors"""

    error_code = "RESERVATION_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigError(ReservationError):
    """Invalid table inventory; fatal at startup"""

    error_code = "CONFIG_ERROR"


class ConflictError(ReservationError):
    """The slot can no longer host the party at commit time"""

    error_code = "CONFLICT"


class DuplicateReservationError(ConflictError):
    """Same guest already holds a confirmed reservation for the slot"""

    error_code = "DUPLICATE_RESERVATION"


class NotFoundError(ReservationError):
    """No reservation matches the given identifier"""

    error_code = "NOT_FOUND"

    def __init__(self, identifier: Any):
        super().__init__(
            f"Reservation {identifier} not found",
            details={"identifier": str(identifier)},
        )


class AlreadyCancelledError(ReservationError):
    """The reservation exists only as a cancelled record"""

    error_code = "ALREADY_CANCELLED"

    def __init__(self, identifier: Any):
        super().__init__(
            f"Reservation {identifier} is already cancelled",
            details={"identifier": str(identifier)},
        )


class BookingRuleError(ReservationError):
    """Request violates a booking rule (slot not served, closed service)"""

    error_code = "BOOKING_RULE"
