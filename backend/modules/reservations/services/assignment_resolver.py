# backend/modules/reservations/services/assignment_resolver.py

"""
Greedy smallest-fit table assignment.

For a party size and an occupancy snapshot the resolver picks the free
bookable unit with the smallest capacity that seats the party. Ties go to
physical tables before combinations, then to declaration order. There is no
backtracking: a request may be rejected even though a different earlier
allocation would have made room for it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union
import logging

from .occupancy import OccupancySnapshot
from .table_inventory import BookableUnit, TableInventory

logger = logging.getLogger(__name__)

ANY_LOCATION = "indiferente"


class UnavailableReason(str, Enum):
    NO_TABLE_FITS = "no_table_fits"
    ALL_CANDIDATES_OCCUPIED = "all_candidates_occupied"
    SEAT_CEILING_REACHED = "seat_ceiling_reached"


@dataclass(frozen=True)
class Assignment:
    """Winning unit and the physical tables it consumes"""

    unit_id: str
    table_ids: Tuple[str, ...]
    capacity: int
    is_combination: bool = False

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Unavailable:
    """Normal outcome when no free unit seats the party"""

    reason: UnavailableReason

    def __bool__(self) -> bool:
        return False


Resolution = Union[Assignment, Unavailable]


def _sort_key(unit: BookableUnit):
    return (unit.capacity, unit.is_combination, unit.order)


class AssignmentResolver:
    """Resolve a party size against an inventory and an occupancy snapshot"""

    def __init__(self, inventory: TableInventory, seat_ceiling: Optional[int] = None):
        self.inventory = inventory
        self.seat_ceiling = seat_ceiling

    def resolve(
        self,
        party_size: int,
        occupancy: OccupancySnapshot,
        location: Optional[str] = None,
    ) -> Resolution:
        if party_size <= 0:
            raise ValueError(f"Party size must be positive, got {party_size}")

        if self.seat_ceiling and occupancy.seats + party_size > self.seat_ceiling:
            return Unavailable(UnavailableReason.SEAT_CEILING_REACHED)

        if location == ANY_LOCATION:
            location = None

        candidates = self.inventory.units_capable_of(party_size, location)
        if not candidates:
            return Unavailable(UnavailableReason.NO_TABLE_FITS)

        free = [unit for unit in candidates if unit.is_free(occupancy.table_ids)]
        if not free:
            return Unavailable(UnavailableReason.ALL_CANDIDATES_OCCUPIED)

        winner = min(free, key=_sort_key)
        return Assignment(
            unit_id=winner.id,
            table_ids=self._consumed_tables(winner),
            capacity=winner.capacity,
            is_combination=winner.is_combination,
        )

    def _consumed_tables(self, unit: BookableUnit) -> Tuple[str, ...]:
        if unit.is_combination:
            return tuple(self.inventory.combination(unit.id).components)
        return (unit.id,)

    def is_available(
        self,
        party_size: int,
        occupancy: OccupancySnapshot,
        location: Optional[str] = None,
    ) -> bool:
        """Dry run: keep only whether a fit exists."""
        return bool(self.resolve(party_size, occupancy, location))
