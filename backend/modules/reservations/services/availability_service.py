# backend/modules/reservations/services/availability_service.py

"""
Service for checking table availability across service slots.
"""

from sqlalchemy.orm import Session
from datetime import date, time
from typing import Dict, List, Optional
import logging

from ..config import ReservationConfig, get_reservation_config
from .assignment_resolver import AssignmentResolver, Resolution
from .occupancy import OccupancySnapshot, build_occupancy_snapshot
from .reservation_repository import ReservationRepository, SqlAlchemyReservationRepository
from .table_inventory import TableInventory, get_table_inventory

logger = logging.getLogger(__name__)

LUNCH = "comida"
DINNER = "cena"


class AvailabilityService:
    """
    Answers availability questions by dry-running the resolver.

    Every call rebuilds the occupancy snapshot from the confirmed
    reservations, so a cancellation is visible to the next query without any
    invalidation step.
    """

    def __init__(
        self,
        db: Optional[Session] = None,
        inventory: Optional[TableInventory] = None,
        config: Optional[ReservationConfig] = None,
        repository: Optional[ReservationRepository] = None,
    ):
        if repository is None:
            if db is None:
                raise ValueError("AvailabilityService needs a session or a repository")
            repository = SqlAlchemyReservationRepository(db)
        self.repository = repository
        self.inventory = inventory or get_table_inventory()
        self.config = config or get_reservation_config()
        self.resolver = AssignmentResolver(self.inventory, self.config.seat_ceiling)

    def turno_for(self, slot_time: time) -> Optional[str]:
        """Service block a time belongs to, or None if it is not a service slot"""
        if slot_time in self.config.lunch_times:
            return LUNCH
        if slot_time in self.config.dinner_times:
            return DINNER
        return None

    def is_dinner_closed(self, target_date: date) -> bool:
        return target_date.weekday() == self.config.CLOSED_DINNER_WEEKDAY

    def is_closed_slot(self, target_date: date, slot_time: time) -> bool:
        return self.turno_for(slot_time) == DINNER and self.is_dinner_closed(target_date)

    def get_snapshot(
        self,
        target_date: date,
        target_time: time,
        exclude_reservation_id: Optional[int] = None,
    ) -> OccupancySnapshot:
        return build_occupancy_snapshot(
            target_date,
            target_time,
            self.repository.list_confirmed(target_date),
            exclude_reservation_id=exclude_reservation_id,
        )

    def resolve(
        self,
        target_date: date,
        target_time: time,
        party_size: int,
        location: Optional[str] = None,
        exclude_reservation_id: Optional[int] = None,
    ) -> Resolution:
        """Run the resolver against a freshly built snapshot"""
        snapshot = self.get_snapshot(target_date, target_time, exclude_reservation_id)
        return self.resolver.resolve(party_size, snapshot, location)

    def check_availability(
        self,
        target_date: date,
        target_time: time,
        party_size: int,
        location: Optional[str] = None,
    ) -> bool:
        """Whether a party of ``party_size`` can be seated in this slot"""
        if self.turno_for(target_time) is None:
            return False
        if self.is_closed_slot(target_date, target_time):
            return False
        return bool(self.resolve(target_date, target_time, party_size, location))

    def slots_for_date(
        self,
        target_date: date,
        party_size: Optional[int] = None,
        location: Optional[str] = None,
    ) -> List[Dict]:
        """
        Availability grid for every service slot of a date.

        Without a party size the smallest accepted party is probed, which
        only says whether the slot is open at all.
        """
        probe_size = party_size or self.config.MIN_PARTY_SIZE
        reservations = self.repository.list_confirmed(target_date)
        dinner_closed = self.is_dinner_closed(target_date)

        slots = []
        for turno, times in (
            (LUNCH, self.config.lunch_times),
            (DINNER, self.config.dinner_times),
        ):
            for slot_time in times:
                if turno == DINNER and dinner_closed:
                    available = False
                else:
                    snapshot = build_occupancy_snapshot(
                        target_date, slot_time, reservations
                    )
                    available = self.resolver.is_available(
                        probe_size, snapshot, location
                    )
                slots.append(
                    {"time": slot_time, "turno": turno, "disponible": available}
                )

        logger.debug(
            f"Computed {len(slots)} slots for {target_date} (party of {probe_size})"
        )
        return slots
