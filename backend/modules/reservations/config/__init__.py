from .reservation_config import (
    ReservationConfig,
    reservation_config,
    get_reservation_config,
    parse_slot,
)

__all__ = [
    "ReservationConfig",
    "reservation_config",
    "get_reservation_config",
    "parse_slot",
]
