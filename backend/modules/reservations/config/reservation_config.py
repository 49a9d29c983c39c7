# backend/modules/reservations/config/reservation_config.py

from datetime import datetime, time
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReservationConfig(BaseSettings):
    """
    Configuration for the table assignment engine.

    Service times are "HH:MM" strings; CLOSED_DINNER_WEEKDAY follows
    ``date.weekday()`` (Monday is 0, Sunday is 6).
    """

    model_config = SettingsConfigDict(env_prefix="RESERVATION_", case_sensitive=False)

    # Service slots per turno
    LUNCH_SLOTS: List[str] = ["13:00", "13:30", "14:00", "14:30", "15:00", "15:30"]
    DINNER_SLOTS: List[str] = ["20:00", "20:30", "21:00", "21:30", "22:00", "22:30"]

    # Day of the week with no dinner service
    CLOSED_DINNER_WEEKDAY: Optional[int] = 6

    # Maximum guests seated in a single slot (None or 0 disables the ceiling)
    MAX_CAPACITY_PER_SLOT: Optional[int] = 50

    # Party size bounds
    MIN_PARTY_SIZE: int = 1
    MAX_PARTY_SIZE: int = 20

    # Booking horizon in days
    MAX_ADVANCE_DAYS: int = 30

    # JSON file with the table inventory; the built-in layout is used if unset
    TABLES_FILE: Optional[str] = None

    CONFIRMATION_CODE_PREFIX: str = "ALC"

    @field_validator("LUNCH_SLOTS", "DINNER_SLOTS")
    @classmethod
    def validate_slot_format(cls, v):
        for slot in v:
            datetime.strptime(slot, "%H:%M")
        return v

    @field_validator("CLOSED_DINNER_WEEKDAY")
    @classmethod
    def validate_weekday(cls, v):
        if v is not None and not 0 <= v <= 6:
            raise ValueError("CLOSED_DINNER_WEEKDAY must be between 0 and 6")
        return v

    @property
    def lunch_times(self) -> List[time]:
        return [parse_slot(s) for s in self.LUNCH_SLOTS]

    @property
    def dinner_times(self) -> List[time]:
        return [parse_slot(s) for s in self.DINNER_SLOTS]

    @property
    def seat_ceiling(self) -> Optional[int]:
        return self.MAX_CAPACITY_PER_SLOT or None


def parse_slot(value: str) -> time:
    """Parse an "HH:MM" service time."""
    return datetime.strptime(value, "%H:%M").time()


# Global instance
reservation_config = ReservationConfig()


def get_reservation_config() -> ReservationConfig:
    """Get the reservation engine configuration."""
    return reservation_config
