# backend/modules/reservations/services/occupancy.py

"""
Occupancy snapshot: which physical tables are taken at a date and time.

Always derived from the confirmed reservations; nothing here is cached.
"""

from dataclasses import dataclass, field
from datetime import date, time
from typing import FrozenSet, Iterable, Optional


@dataclass(frozen=True)
class OccupancySnapshot:
    """Physical tables consumed and guests seated in one slot"""

    reservation_date: date
    reservation_time: time
    table_ids: FrozenSet[str] = field(default_factory=frozenset)
    seats: int = 0

    def is_occupied(self, table_id: str) -> bool:
        return table_id in self.table_ids

    def without(self, table_ids: Iterable[str], seats: int = 0) -> "OccupancySnapshot":
        """Snapshot with the given tables and guests released."""
        return OccupancySnapshot(
            reservation_date=self.reservation_date,
            reservation_time=self.reservation_time,
            table_ids=self.table_ids - frozenset(table_ids),
            seats=max(0, self.seats - seats),
        )


def _is_confirmed(reservation) -> bool:
    status = getattr(reservation, "status", None)
    if status is None:
        return True
    return getattr(status, "value", status) == "confirmed"


def build_occupancy_snapshot(
    reservation_date: date,
    reservation_time: time,
    reservations: Iterable,
    exclude_reservation_id: Optional[int] = None,
) -> OccupancySnapshot:
    """
    Replay confirmed reservations for the slot and union their consumed tables.

    Reservations only need ``reservation_date``, ``reservation_time``,
    ``party_size`` and ``table_ids``; ``status`` and ``id`` are honoured when
    present.
    """
    occupied = set()
    seats = 0
    for reservation in reservations:
        if (
            reservation.reservation_date != reservation_date
            or reservation.reservation_time != reservation_time
        ):
            continue
        if not _is_confirmed(reservation):
            continue
        if (
            exclude_reservation_id is not None
            and getattr(reservation, "id", None) == exclude_reservation_id
        ):
            continue
        occupied.update(reservation.table_ids or [])
        seats += reservation.party_size or 0

    return OccupancySnapshot(
        reservation_date=reservation_date,
        reservation_time=reservation_time,
        table_ids=frozenset(occupied),
        seats=seats,
    )


def find_double_bookings(reservations: Iterable) -> dict:
    """
    Physical tables claimed by more than one confirmed reservation in the
    same slot, keyed by (date, time). Empty when the ledger is consistent.
    """
    claimed = {}
    clashes = {}
    for reservation in reservations:
        if not _is_confirmed(reservation):
            continue
        key = (reservation.reservation_date, reservation.reservation_time)
        slot_claimed = claimed.setdefault(key, set())
        for table_id in reservation.table_ids or []:
            if table_id in slot_claimed:
                clashes.setdefault(key, set()).add(table_id)
            else:
                slot_claimed.add(table_id)
    return clashes
