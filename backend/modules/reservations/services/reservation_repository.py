# backend/modules/reservations/services/reservation_repository.py

"""
Persistence boundary for reservations.

The engine only needs to list the confirmed reservations of a date, insert a
record and delete one; the SQLAlchemy implementation adds the lookups the API
needs. Writes are flushed, never committed: the caller owns the transaction.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..models import Reservation, ReservationArchive, ReservationStatus


class ReservationRepository(ABC):
    """Interface the lifecycle coordinator depends on"""

    @abstractmethod
    def list_confirmed(self, reservation_date: date) -> List[Reservation]:
        ...

    @abstractmethod
    def insert(self, reservation: Reservation) -> int:
        ...

    @abstractmethod
    def delete(
        self,
        reservation_id: int,
        reason: Optional[str] = None,
        user_ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> bool:
        ...


class SqlAlchemyReservationRepository(ReservationRepository):
    """Reservation store backed by a SQLAlchemy session"""

    def __init__(self, db: Session):
        self.db = db

    def list_confirmed(self, reservation_date: date) -> List[Reservation]:
        return (
            self.db.query(Reservation)
            .filter(
                Reservation.reservation_date == reservation_date,
                Reservation.status == ReservationStatus.CONFIRMED,
            )
            .order_by(Reservation.reservation_time, Reservation.id)
            .all()
        )

    def insert(self, reservation: Reservation) -> int:
        self.db.add(reservation)
        self.db.flush()
        return reservation.id

    def delete(
        self,
        reservation_id: int,
        reason: Optional[str] = None,
        user_ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> bool:
        """Archive a copy of the reservation, then remove the active row."""
        reservation = self.get(reservation_id)
        if reservation is None:
            return False

        self.db.add(
            ReservationArchive(
                reservation_id=reservation.id,
                confirmation_code=reservation.confirmation_code,
                snapshot=reservation.to_dict(),
                reason=reason,
                user_ip=user_ip,
                user_agent=user_agent,
            )
        )
        self.db.delete(reservation)
        self.db.flush()
        return True

    def get(self, reservation_id: int) -> Optional[Reservation]:
        return self.db.query(Reservation).filter_by(id=reservation_id).first()

    def get_by_code(self, code: str) -> Optional[Reservation]:
        return self.db.query(Reservation).filter_by(confirmation_code=code).first()

    def code_exists(self, code: str) -> bool:
        return (
            self.db.query(Reservation.id).filter_by(confirmation_code=code).first()
            is not None
        )

    def find_archived(
        self, reservation_id: Optional[int] = None, code: Optional[str] = None
    ) -> Optional[ReservationArchive]:
        query = self.db.query(ReservationArchive)
        if reservation_id is not None:
            query = query.filter_by(reservation_id=reservation_id)
        elif code is not None:
            query = query.filter_by(confirmation_code=code)
        else:
            return None
        return query.order_by(ReservationArchive.id.desc()).first()

    def search(
        self,
        reservation_date: Optional[date] = None,
        status: Optional[ReservationStatus] = None,
        text: Optional[str] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Reservation], int]:
        """Filtered, paginated listing for the back office"""
        query = self.db.query(Reservation)

        if reservation_date:
            query = query.filter(Reservation.reservation_date == reservation_date)
        if status:
            query = query.filter(Reservation.status == status)
        if text:
            pattern = f"%{text}%"
            query = query.filter(
                or_(
                    Reservation.guest_name.ilike(pattern),
                    Reservation.guest_surname.ilike(pattern),
                    Reservation.guest_email.ilike(pattern),
                    Reservation.confirmation_code.ilike(pattern),
                )
            )

        total = query.count()
        reservations = (
            query.order_by(
                Reservation.reservation_date.desc(),
                Reservation.reservation_time.asc(),
            )
            .offset(skip)
            .limit(limit)
            .all()
        )
        return reservations, total
