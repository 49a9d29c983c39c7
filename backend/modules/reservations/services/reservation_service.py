# backend/modules/reservations/services/reservation_service.py

"""
Reservation lifecycle: create, update and cancel with table assignment.
"""

from sqlalchemy.orm import Session
from datetime import datetime, date, time, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple
import random
import string
import time as clock
import uuid
import logging

from ..config import ReservationConfig, get_reservation_config
from ..exceptions import (
    AlreadyCancelledError,
    BookingRuleError,
    ConflictError,
    DuplicateReservationError,
    NotFoundError,
)
from ..models import LocationPreference, Reservation, ReservationArchive, ReservationStatus
from ..schemas.reservation_schemas import ReservationCreate, ReservationUpdate
from .availability_service import AvailabilityService
from .reservation_repository import SqlAlchemyReservationRepository
from .slot_locks import SlotLockRegistry, slot_locks
from .table_inventory import TableInventory

logger = logging.getLogger(__name__)

BASE36 = string.digits + string.ascii_uppercase

# Fields whose change invalidates the table assignment
SCHEDULE_FIELDS = ("reservation_date", "reservation_time", "party_size")
REQUIRED_FIELDS = SCHEDULE_FIELDS + ("guest_name", "guest_email")


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36[remainder])
    return "".join(reversed(digits))


def _model_location(value) -> LocationPreference:
    if value is None:
        return LocationPreference.INDIFERENTE
    return LocationPreference(getattr(value, "value", value))


class ReservationService:
    """Service for managing reservations"""

    def __init__(
        self,
        db: Session,
        inventory: Optional[TableInventory] = None,
        config: Optional[ReservationConfig] = None,
        locks: Optional[SlotLockRegistry] = None,
        repository: Optional[SqlAlchemyReservationRepository] = None,
    ):
        self.db = db
        self.repository = repository or SqlAlchemyReservationRepository(db)
        self.config = config or get_reservation_config()
        self.locks = locks or slot_locks
        self.availability_service = AvailabilityService(
            inventory=inventory, config=self.config, repository=self.repository
        )

    def generate_confirmation_code(self) -> str:
        """Generate a unique confirmation code"""
        while True:
            # Format: ALC-<base36 epoch millis>-XXXX
            stamp = to_base36(int(clock.time() * 1000))
            suffix = "".join(random.choices(BASE36, k=4))
            code = f"{self.config.CONFIRMATION_CODE_PREFIX}-{stamp}-{suffix}"
            if not self.repository.code_exists(code):
                return code

    def create_reservation(
        self,
        reservation_data: ReservationCreate,
        request_info: Optional[Dict[str, Any]] = None,
    ) -> Reservation:
        """
        Assign tables and persist a confirmed reservation.

        The slot lock is held from the availability check to the commit. The
        row is flushed as requested, the slot is re-read and checked once more,
        and only then is it confirmed.
        """
        request_info = request_info or {}
        target_date = reservation_data.reservation_date
        target_time = reservation_data.reservation_time
        location = _model_location(reservation_data.location_preference)

        self._validate_booking_rules(target_date, target_time, reservation_data.party_size)

        with self.locks.hold((target_date, target_time)):
            try:
                self._check_duplicate(reservation_data.guest_email, target_date, target_time)

                resolution = self.availability_service.resolve(
                    target_date, target_time, reservation_data.party_size, location.value
                )
                if not resolution:
                    logger.warning(
                        f"No table for {reservation_data.party_size} on {target_date} "
                        f"at {target_time}: {resolution.reason.value}"
                    )
                    raise ConflictError(
                        "No table available for this time",
                        details={"reason": resolution.reason.value},
                    )

                reservation = Reservation(
                    confirmation_code=self.generate_confirmation_code(),
                    cancellation_token=str(uuid.uuid4()),
                    guest_name=reservation_data.guest_name,
                    guest_surname=reservation_data.guest_surname,
                    guest_email=reservation_data.guest_email.strip().lower(),
                    guest_phone=reservation_data.guest_phone,
                    reservation_date=target_date,
                    reservation_time=target_time,
                    party_size=reservation_data.party_size,
                    location_preference=location,
                    occasion=reservation_data.occasion,
                    allergies=reservation_data.allergies,
                    comments=reservation_data.comments,
                    status=ReservationStatus.REQUESTED,
                    unit_id=resolution.unit_id,
                    table_ids=list(resolution.table_ids),
                    ip_address=request_info.get("ip_address"),
                    user_agent=request_info.get("user_agent"),
                )
                self.repository.insert(reservation)

                self._verify_slot(reservation)

                reservation.status = ReservationStatus.CONFIRMED
                reservation.confirmed_at = datetime.now(timezone.utc)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        self.db.refresh(reservation)
        logger.info(
            f"Created reservation {reservation.confirmation_code}: "
            f"{reservation.party_size} pax on {target_date} at {target_time} "
            f"-> {reservation.unit_id} ({reservation.table_numbers})"
        )
        return reservation

    def update_reservation(
        self, reservation_id: int, update_data: ReservationUpdate
    ) -> Reservation:
        """
        Update a reservation.

        Descriptive fields are written in place. A new date, time or party
        size, or a location the current tables are not in, is re-resolved
        with the reservation's own tables released and is rejected with
        ConflictError when it no longer fits.
        """
        reservation = self._get_active(reservation_id)
        changes = update_data.model_dump(exclude_unset=True)

        if "location_preference" in changes:
            changes["location_preference"] = _model_location(changes["location_preference"])
        if changes.get("guest_email"):
            changes["guest_email"] = changes["guest_email"].strip().lower()

        target_date = changes.get("reservation_date") or reservation.reservation_date
        target_time = changes.get("reservation_time") or reservation.reservation_time
        party_size = changes.get("party_size") or reservation.party_size
        reschedule = any(
            changes.get(field) is not None and changes[field] != getattr(reservation, field)
            for field in SCHEDULE_FIELDS
        ) or self._needs_relocation(reservation, changes.get("location_preference"))

        if reschedule:
            self._validate_booking_rules(target_date, target_time, party_size)

        with self.locks.hold(
            (reservation.reservation_date, reservation.reservation_time),
            (target_date, target_time),
        ):
            try:
                if reschedule or "guest_email" in changes:
                    self._check_duplicate(
                        changes.get("guest_email") or reservation.guest_email,
                        target_date,
                        target_time,
                        exclude_reservation_id=reservation.id,
                    )

                if reschedule:
                    location = changes.get("location_preference") or reservation.location_preference
                    resolution = self.availability_service.resolve(
                        target_date,
                        target_time,
                        party_size,
                        _model_location(location).value,
                        exclude_reservation_id=reservation.id,
                    )
                    if not resolution:
                        logger.warning(
                            f"Cannot move reservation {reservation.confirmation_code} to "
                            f"{party_size} pax on {target_date} at {target_time}: "
                            f"{resolution.reason.value}"
                        )
                        raise ConflictError(
                            "No table available for the requested change",
                            details={"reason": resolution.reason.value},
                        )
                    reservation.unit_id = resolution.unit_id
                    reservation.table_ids = list(resolution.table_ids)

                for field, value in changes.items():
                    if value is None and field in REQUIRED_FIELDS:
                        continue
                    setattr(reservation, field, value)
                self.db.flush()

                if reschedule:
                    self._verify_slot(reservation)

                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        self.db.refresh(reservation)
        logger.info(
            f"Updated reservation {reservation.confirmation_code}"
            + (f" -> {reservation.unit_id} ({reservation.table_numbers})" if reschedule else "")
        )
        return reservation

    def cancel_reservation(
        self,
        reservation_id: int,
        reason: Optional[str] = None,
        request_info: Optional[Dict[str, Any]] = None,
    ) -> ReservationArchive:
        """Cancel by id, releasing the reservation's tables"""
        reservation = self.repository.get(reservation_id)
        if reservation is None:
            if self.repository.find_archived(reservation_id=reservation_id):
                raise AlreadyCancelledError(reservation_id)
            raise NotFoundError(reservation_id)
        return self._release(reservation, reason, request_info)

    def cancel_by_code(
        self,
        code: str,
        reason: Optional[str] = None,
        request_info: Optional[Dict[str, Any]] = None,
    ) -> ReservationArchive:
        """Cancel by confirmation code"""
        reservation = self.repository.get_by_code(code)
        if reservation is None:
            if self.repository.find_archived(code=code):
                raise AlreadyCancelledError(code)
            raise NotFoundError(code)
        return self._release(reservation, reason, request_info)

    def _release(
        self,
        reservation: Reservation,
        reason: Optional[str],
        request_info: Optional[Dict[str, Any]],
    ) -> ReservationArchive:
        request_info = request_info or {}
        reservation_id = reservation.id
        code = reservation.confirmation_code
        table_numbers = reservation.table_numbers

        with self.locks.hold((reservation.reservation_date, reservation.reservation_time)):
            try:
                reservation.status = ReservationStatus.CANCELLED
                deleted = self.repository.delete(
                    reservation_id,
                    reason=reason,
                    user_ip=request_info.get("ip_address"),
                    user_agent=request_info.get("user_agent"),
                )
                if not deleted:
                    raise AlreadyCancelledError(code)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        logger.info(f"Cancelled reservation {code}, released {table_numbers}")
        return self.repository.find_archived(reservation_id=reservation_id)

    def get_reservation(self, reservation_id: int) -> Reservation:
        return self._get_active(reservation_id)

    def get_by_code(self, code: str) -> Reservation:
        reservation = self.repository.get_by_code(code)
        if reservation is None:
            if self.repository.find_archived(code=code):
                raise AlreadyCancelledError(code)
            raise NotFoundError(code)
        return reservation

    def list_reservations(
        self,
        reservation_date: Optional[date] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[Reservation], int]:
        """Back office listing, most recent dates first"""
        return self.repository.search(
            reservation_date=reservation_date,
            text=search,
            skip=(page - 1) * page_size,
            limit=page_size,
        )

    def _get_active(self, reservation_id: int) -> Reservation:
        reservation = self.repository.get(reservation_id)
        if reservation is None:
            if self.repository.find_archived(reservation_id=reservation_id):
                raise AlreadyCancelledError(reservation_id)
            raise NotFoundError(reservation_id)
        return reservation

    def _needs_relocation(self, reservation: Reservation, location) -> bool:
        """Whether a new location preference rules out the current tables"""
        if location is None:
            return False
        wanted = _model_location(location)
        if wanted == LocationPreference.INDIFERENTE:
            return False
        unit = self.availability_service.inventory.unit(reservation.unit_id)
        return unit is None or unit.location != wanted.value

    def _validate_booking_rules(self, target_date: date, target_time: time, party_size: int):
        """Validate reservation against booking rules"""
        if party_size < self.config.MIN_PARTY_SIZE:
            raise BookingRuleError(f"Minimum party size is {self.config.MIN_PARTY_SIZE}")
        if party_size > self.config.MAX_PARTY_SIZE:
            raise BookingRuleError(f"Maximum party size is {self.config.MAX_PARTY_SIZE}")

        today = date.today()
        if target_date < today:
            raise BookingRuleError("Reservation date cannot be in the past")
        if target_date > today + timedelta(days=self.config.MAX_ADVANCE_DAYS):
            raise BookingRuleError(
                f"Reservations can only be made up to {self.config.MAX_ADVANCE_DAYS} days in advance"
            )

        if self.availability_service.turno_for(target_time) is None:
            raise BookingRuleError(
                f"{target_time.strftime('%H:%M')} is not a service time",
                details={"time": target_time.strftime("%H:%M")},
            )
        if self.availability_service.is_closed_slot(target_date, target_time):
            raise BookingRuleError(f"No dinner service on {target_date.strftime('%A')}")

    def _check_duplicate(
        self,
        email: str,
        target_date: date,
        target_time: time,
        exclude_reservation_id: Optional[int] = None,
    ):
        normalized = email.strip().lower()
        for existing in self.repository.list_confirmed(target_date):
            if existing.id == exclude_reservation_id:
                continue
            if (
                existing.reservation_time == target_time
                and (existing.guest_email or "").strip().lower() == normalized
            ):
                logger.warning(
                    f"Duplicate reservation attempt for {normalized} on {target_date} at {target_time}"
                )
                raise DuplicateReservationError(
                    "A reservation already exists for this email at this time",
                    details={"existing": existing.confirmation_code},
                )

    def _verify_slot(self, reservation: Reservation):
        """Re-read the slot after the flush and check nothing overlaps"""
        snapshot = self.availability_service.get_snapshot(
            reservation.reservation_date,
            reservation.reservation_time,
            exclude_reservation_id=reservation.id,
        )
        clashes = snapshot.table_ids & set(reservation.table_ids or [])
        if clashes:
            logger.warning(
                f"Tables {', '.join(sorted(clashes))} taken concurrently on "
                f"{reservation.reservation_date} at {reservation.reservation_time}"
            )
            raise ConflictError(
                "Tables were taken by another reservation",
                details={"tables": sorted(clashes)},
            )

        ceiling = self.config.seat_ceiling
        if ceiling and snapshot.seats + reservation.party_size > ceiling:
            raise ConflictError(
                "Slot is full",
                details={"seats": snapshot.seats, "ceiling": ceiling},
            )
