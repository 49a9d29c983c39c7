from .reservation_service import ReservationService
from .availability_service import AvailabilityService
from .assignment_resolver import (
    AssignmentResolver,
    Assignment,
    Unavailable,
    UnavailableReason,
)
from .occupancy import OccupancySnapshot, build_occupancy_snapshot
from .reservation_repository import (
    ReservationRepository,
    SqlAlchemyReservationRepository,
)
from .slot_locks import SlotLockRegistry, slot_locks
from .table_inventory import (
    TableInventory,
    PhysicalTable,
    Combination,
    load_inventory,
    get_table_inventory,
)

__all__ = [
    "ReservationService",
    "AvailabilityService",
    "AssignmentResolver",
    "Assignment",
    "Unavailable",
    "UnavailableReason",
    "OccupancySnapshot",
    "build_occupancy_snapshot",
    "ReservationRepository",
    "SqlAlchemyReservationRepository",
    "SlotLockRegistry",
    "slot_locks",
    "TableInventory",
    "PhysicalTable",
    "Combination",
    "load_inventory",
    "get_table_inventory",
]
