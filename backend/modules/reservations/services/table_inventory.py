# backend/modules/reservations/services/table_inventory.py

"""
Static catalog of physical tables and the combinations built from them.
"""

from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union
import json
import logging

from ..config import get_reservation_config
from ..config.tables import COMBINATIONS, PHYSICAL_TABLES
from ..exceptions import ConfigError

logger = logging.getLogger(__name__)


class TableLocation(str, Enum):
    """Known location tags; other tags are accepted verbatim"""

    INTERIOR = "interior"
    TERRAZA = "terraza"


class UnitKind(str, Enum):
    PHYSICAL = "physical"
    COMBINATION = "combination"


@dataclass(frozen=True)
class PhysicalTable:
    """An actual table in the dining room"""

    id: str
    capacity: int
    location: str = TableLocation.INTERIOR.value


@dataclass(frozen=True)
class Combination:
    """Two or more physical tables joined to seat a larger party"""

    id: str
    components: Tuple[str, ...]
    capacity: int
    location: str = TableLocation.INTERIOR.value


@dataclass(frozen=True)
class BookableUnit:
    """Physical table or combination, as seen by the resolver"""

    id: str
    kind: UnitKind
    capacity: int
    location: str
    table_ids: FrozenSet[str] = field(default_factory=frozenset)
    order: int = 0

    @property
    def is_combination(self) -> bool:
        return self.kind == UnitKind.COMBINATION

    def is_free(self, occupied: Iterable[str]) -> bool:
        """A unit is free only if none of its physical tables is occupied."""
        return self.table_ids.isdisjoint(occupied)


class TableInventory:
    """
    Immutable table catalog.

    Units are kept in configuration order: physical tables first, in
    declaration order, then combinations in declaration order. The resolver
    relies on this order for tie-breaks, so it never changes between calls.
    """

    def __init__(
        self,
        tables: Iterable[PhysicalTable],
        combinations: Iterable[Combination] = (),
    ):
        self._tables: Dict[str, PhysicalTable] = {}
        self._combinations: Dict[str, Combination] = {}

        for table in tables:
            if table.id in self._tables:
                raise ConfigError(f"Duplicate table id '{table.id}'")
            if table.capacity <= 0:
                raise ConfigError(
                    f"Table '{table.id}' must have a positive capacity, got {table.capacity}"
                )
            self._tables[table.id] = table

        for combo in combinations:
            if combo.id in self._combinations or combo.id in self._tables:
                raise ConfigError(f"Duplicate combination id '{combo.id}'")
            if combo.capacity <= 0:
                raise ConfigError(
                    f"Combination '{combo.id}' must have a positive capacity, got {combo.capacity}"
                )
            if len(combo.components) < 2:
                raise ConfigError(
                    f"Combination '{combo.id}' needs at least two tables"
                )
            if len(set(combo.components)) != len(combo.components):
                raise ConfigError(
                    f"Combination '{combo.id}' lists a table more than once",
                    details={"combination": combo.id, "components": list(combo.components)},
                )
            unknown = [c for c in combo.components if c not in self._tables]
            if unknown:
                raise ConfigError(
                    f"Combination '{combo.id}' references unknown tables: {', '.join(unknown)}",
                    details={"combination": combo.id, "unknown": unknown},
                )
            self._combinations[combo.id] = combo

        units: List[BookableUnit] = []
        for table in self._tables.values():
            units.append(
                BookableUnit(
                    id=table.id,
                    kind=UnitKind.PHYSICAL,
                    capacity=table.capacity,
                    location=table.location,
                    table_ids=frozenset([table.id]),
                    order=len(units),
                )
            )
        for combo in self._combinations.values():
            units.append(
                BookableUnit(
                    id=combo.id,
                    kind=UnitKind.COMBINATION,
                    capacity=combo.capacity,
                    location=combo.location,
                    table_ids=frozenset(combo.components),
                    order=len(units),
                )
            )
        self._units: Tuple[BookableUnit, ...] = tuple(units)
        self._units_by_id = {unit.id: unit for unit in self._units}

    @property
    def tables(self) -> List[PhysicalTable]:
        return list(self._tables.values())

    @property
    def combinations(self) -> List[Combination]:
        return list(self._combinations.values())

    @property
    def units(self) -> Tuple[BookableUnit, ...]:
        return self._units

    def physical_table(self, table_id: str) -> Optional[PhysicalTable]:
        return self._tables.get(table_id)

    def combination(self, combination_id: str) -> Optional[Combination]:
        return self._combinations.get(combination_id)

    def unit(self, unit_id: str) -> Optional[BookableUnit]:
        return self._units_by_id.get(unit_id)

    def units_capable_of(
        self, party_size: int, location: Optional[str] = None
    ) -> List[BookableUnit]:
        """All units seating at least ``party_size``, in configuration order."""
        return [
            unit
            for unit in self._units
            if unit.capacity >= party_size
            and (location is None or unit.location == location)
        ]

    def combinations_using(self, table_id: str) -> List[Combination]:
        """Combinations that break when ``table_id`` is occupied."""
        return [c for c in self._combinations.values() if table_id in c.components]

    @property
    def total_seats(self) -> int:
        """Seats across all physical tables."""
        return sum(t.capacity for t in self._tables.values())

    @classmethod
    def from_dict(cls, data: dict) -> "TableInventory":
        """
        Build an inventory from plain data.

        Expected shape::

            {"tables": [{"id", "capacity", "location"}],
             "combinations": [{"id", "components", "capacity", "location"}]}
        """
        try:
            tables = [
                PhysicalTable(
                    id=str(t["id"]),
                    capacity=int(t["capacity"]),
                    location=t.get("location", TableLocation.INTERIOR.value),
                )
                for t in data.get("tables", [])
            ]
            combinations = [
                Combination(
                    id=str(c["id"]),
                    components=tuple(str(x) for x in c["components"]),
                    capacity=int(c["capacity"]),
                    location=c.get("location", TableLocation.INTERIOR.value),
                )
                for c in data.get("combinations", [])
            ]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Malformed table inventory: {e}") from e
        return cls(tables, combinations)


def default_inventory() -> TableInventory:
    """The built-in venue layout."""
    return TableInventory.from_dict(
        {"tables": PHYSICAL_TABLES, "combinations": COMBINATIONS}
    )


def load_inventory(path: Optional[Union[str, Path]] = None) -> TableInventory:
    """
    Load the inventory from a JSON file, or the built-in layout when no path
    is given. Raises ConfigError on any problem so startup fails fast.
    """
    if path is None:
        inventory = default_inventory()
    else:
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Cannot read table inventory {path}: {e}")
            raise ConfigError(f"Cannot read table inventory {path}: {e}") from e
        inventory = TableInventory.from_dict(data)

    logger.info(
        f"Loaded table inventory: {len(inventory.tables)} tables, "
        f"{len(inventory.combinations)} combinations, {inventory.total_seats} seats"
    )
    return inventory


@lru_cache()
def get_table_inventory() -> TableInventory:
    """Process-wide inventory, loaded once from the configured source."""
    return load_inventory(get_reservation_config().TABLES_FILE)
