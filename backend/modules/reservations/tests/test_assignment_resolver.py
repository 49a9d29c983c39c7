# backend/modules/reservations/tests/test_assignment_resolver.py

"""
Tests for greedy smallest-fit table assignment.
"""

import pytest
from datetime import date, time

from modules.reservations.services.assignment_resolver import (
    Assignment,
    AssignmentResolver,
    Unavailable,
    UnavailableReason,
)
from modules.reservations.services.occupancy import OccupancySnapshot
from modules.reservations.services.table_inventory import TableInventory

DAY = date(2030, 5, 14)
SLOT = time(21, 0)


def occupied(*table_ids, seats=0):
    return OccupancySnapshot(DAY, SLOT, frozenset(table_ids), seats)


@pytest.fixture
def tie_inventory():
    """Free units of capacity 4 (plain), 4 (combination), 6 and 8"""
    return TableInventory.from_dict(
        {
            "tables": [
                {"id": "s1", "capacity": 2},
                {"id": "s2", "capacity": 2},
                {"id": "t8", "capacity": 8},
                {"id": "t6", "capacity": 6},
                {"id": "t4", "capacity": 4},
            ],
            "combinations": [{"id": "j4", "components": ["s1", "s2"], "capacity": 4}],
        }
    )


class TestSmallestFit:

    def test_plain_table_wins_tie(self, tie_inventory):
        resolution = AssignmentResolver(tie_inventory).resolve(4, occupied())
        assert resolution == Assignment("t4", ("t4",), 4, False)

    def test_combination_before_larger_table(self, tie_inventory):
        resolution = AssignmentResolver(tie_inventory).resolve(4, occupied("t4"))
        assert resolution.unit_id == "j4"
        assert resolution.table_ids == ("s1", "s2")
        assert resolution.is_combination

    def test_falls_through_by_capacity(self, tie_inventory):
        resolver = AssignmentResolver(tie_inventory)
        assert resolver.resolve(4, occupied("t4", "s1")).unit_id == "t6"
        assert resolver.resolve(4, occupied("t4", "s2", "t6")).unit_id == "t8"

    def test_small_party_takes_small_table(self, inventory):
        resolver = AssignmentResolver(inventory)
        assert resolver.resolve(1, occupied()).unit_id == "m1"
        assert resolver.resolve(3, occupied()).unit_id == "m5"
        assert resolver.resolve(5, occupied()).unit_id == "m11"

    def test_deterministic(self, inventory):
        resolver = AssignmentResolver(inventory)
        snapshot = occupied("m1", "m5")
        assert resolver.resolve(4, snapshot) == resolver.resolve(4, snapshot)


class TestButterflyEffect:
    """Occupying one physical table breaks every combination using it"""

    RIVALS = ("m13", "m6", "m7", "m11", "m3")

    def test_c3_assigned_when_rivals_full(self, inventory):
        resolution = AssignmentResolver(inventory).resolve(8, occupied(*self.RIVALS))
        assert resolution.unit_id == "c3"
        assert resolution.table_ids == ("m8", "m9")

    def test_one_component_breaks_combination(self, inventory):
        resolution = AssignmentResolver(inventory).resolve(
            8, occupied(*self.RIVALS, "m8")
        )
        assert resolution == Unavailable(UnavailableReason.ALL_CANDIDATES_OCCUPIED)

    def test_release_restores_combination(self, inventory):
        resolver = AssignmentResolver(inventory)
        snapshot = occupied(*self.RIVALS, "m8")
        assert not resolver.is_available(8, snapshot)
        assert resolver.is_available(8, snapshot.without(["m8"]))

    def test_shared_component_breaks_two_combinations(self, inventory):
        # m3 belongs to c2 and c5
        resolver = AssignmentResolver(inventory)
        snapshot = occupied("m3", "m11", "m12", "m13", "m6", "m8")
        assert resolver.resolve(6, snapshot) == Unavailable(
            UnavailableReason.ALL_CANDIDATES_OCCUPIED
        )


class TestGreedyNotOptimal:

    def test_first_combination_blocks_second_party(self):
        inventory = TableInventory.from_dict(
            {
                "tables": [{"id": k, "capacity": 2} for k in ("a", "b", "c", "d")],
                "combinations": [
                    {"id": "bc", "components": ["b", "c"], "capacity": 4},
                    {"id": "ab", "components": ["a", "b"], "capacity": 4},
                    {"id": "cd", "components": ["c", "d"], "capacity": 4},
                ],
            }
        )
        resolver = AssignmentResolver(inventory)

        first = resolver.resolve(4, occupied())
        assert first.unit_id == "bc"

        # ab + cd would have seated both parties; the greedy pass does not look back
        second = resolver.resolve(4, occupied(*first.table_ids))
        assert not second

    def test_only_two_tops_left(self, inventory):
        everything_but_m3_m4 = [
            t.id for t in inventory.tables if t.id not in ("m3", "m4")
        ]
        resolver = AssignmentResolver(inventory)
        snapshot = occupied(*everything_but_m3_m4)

        assert not resolver.resolve(4, snapshot)
        assert resolver.resolve(2, snapshot).unit_id == "m3"


class TestUnavailable:

    def test_no_table_fits(self, inventory):
        resolution = AssignmentResolver(inventory).resolve(9, occupied())
        assert resolution == Unavailable(UnavailableReason.NO_TABLE_FITS)
        assert not resolution

    def test_invalid_party_size(self, inventory):
        with pytest.raises(ValueError):
            AssignmentResolver(inventory).resolve(0, occupied())

    def test_location_filter(self, inventory):
        resolver = AssignmentResolver(inventory)
        assert resolver.resolve(2, occupied(), "terraza").unit_id == "m4"
        assert resolver.resolve(2, occupied(), "indiferente").unit_id == "m1"
        assert resolver.resolve(4, occupied("m8", "m9"), "terraza").reason == (
            UnavailableReason.ALL_CANDIDATES_OCCUPIED
        )


class TestSeatCeiling:

    def test_full_slot_rejects_any_party(self, inventory):
        resolver = AssignmentResolver(inventory, seat_ceiling=50)
        resolution = resolver.resolve(1, occupied(seats=50))
        assert resolution == Unavailable(UnavailableReason.SEAT_CEILING_REACHED)

    def test_one_seat_under_accepts_party_of_one(self, inventory):
        resolver = AssignmentResolver(inventory, seat_ceiling=50)
        assert resolver.is_available(1, occupied(seats=49))
        assert not resolver.is_available(2, occupied(seats=49))

    def test_no_ceiling(self, inventory):
        assert AssignmentResolver(inventory).is_available(1, occupied(seats=500))
