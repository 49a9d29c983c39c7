# backend/modules/reservations/routes/reservation_routes.py

"""
Public reservation API routes.
"""

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date, time
import math

from core.database import get_db
from core.exceptions import APIError
from ..services import AvailabilityService, ReservationService
from ..services.table_inventory import TableInventory, get_table_inventory
from ..schemas import (
    AvailabilityResponse,
    CancellationResponse,
    LocationPreference,
    ReservationCreate,
    ReservationCreatedResponse,
    ReservationListResponse,
    ReservationResponse,
    ReservationUpdate,
    SlotGridResponse,
    TimeSlot,
)

router = APIRouter(prefix="/reservas", tags=["Reservas"])


def get_reservation_service(
    db: Session = Depends(get_db),
    inventory: TableInventory = Depends(get_table_inventory),
) -> ReservationService:
    return ReservationService(db, inventory=inventory)


def get_availability_service(
    db: Session = Depends(get_db),
    inventory: TableInventory = Depends(get_table_inventory),
) -> AvailabilityService:
    return AvailabilityService(db, inventory=inventory)


def _request_info(request: Request) -> dict:
    return {
        "ip_address": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }


@router.get("/disponibilidad", response_model=AvailabilityResponse)
def check_availability(
    fecha: date = Query(..., description="Fecha (YYYY-MM-DD)"),
    hora: time = Query(..., description="Hora (HH:MM)"),
    personas: int = Query(..., ge=1, le=20),
    ubicacion: Optional[LocationPreference] = None,
    service: AvailabilityService = Depends(get_availability_service),
):
    """Whether a party fits in a single slot."""
    available = service.check_availability(
        fecha, hora, personas, ubicacion.value if ubicacion else None
    )
    return AvailabilityResponse(
        disponible=available, fecha=fecha, hora=hora, personas=personas
    )


@router.get("/horarios", response_model=SlotGridResponse)
def get_slots(
    fecha: date = Query(..., description="Fecha (YYYY-MM-DD)"),
    personas: Optional[int] = Query(None, ge=1, le=20),
    ubicacion: Optional[LocationPreference] = None,
    service: AvailabilityService = Depends(get_availability_service),
):
    """
    Availability grid for every lunch and dinner slot of a date.

    Without ``personas`` the smallest party is probed.
    """
    slots = service.slots_for_date(
        fecha, personas, ubicacion.value if ubicacion else None
    )
    return SlotGridResponse(
        fecha=fecha,
        personas=personas or service.config.MIN_PARTY_SIZE,
        es_dia_cerrado=service.is_dinner_closed(fecha),
        horarios=[TimeSlot(**slot) for slot in slots],
    )


@router.get("/admin/lista", response_model=ReservationListResponse)
def list_reservations(
    fecha: Optional[date] = None,
    busqueda: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    service: ReservationService = Depends(get_reservation_service),
):
    """Paginated reservation listing for the back office."""
    reservations, total = service.list_reservations(
        reservation_date=fecha, search=busqueda, page=page, page_size=limit
    )
    return ReservationListResponse(
        reservations=[ReservationResponse.model_validate(r) for r in reservations],
        total=total,
        page=page,
        page_size=limit,
        total_pages=math.ceil(total / limit) if total else 0,
    )


@router.post(
    "", response_model=ReservationCreatedResponse, status_code=status.HTTP_201_CREATED
)
def create_reservation(
    reservation_data: ReservationCreate,
    request: Request,
    service: ReservationService = Depends(get_reservation_service),
):
    """
    Create a reservation.

    - Assigns the smallest free table or combination
    - 409 when no table fits or the email already booked this slot
    """
    reservation = service.create_reservation(reservation_data, _request_info(request))
    return ReservationCreatedResponse.model_validate(reservation)


@router.get("/{codigo}", response_model=ReservationResponse)
def get_reservation(
    codigo: str,
    service: ReservationService = Depends(get_reservation_service),
):
    """Look up a reservation by confirmation code."""
    return ReservationResponse.model_validate(service.get_by_code(codigo))


@router.put("/{codigo}", response_model=ReservationResponse)
def update_reservation(
    codigo: str,
    update_data: ReservationUpdate,
    service: ReservationService = Depends(get_reservation_service),
):
    """Modify a reservation; schedule changes are re-assigned."""
    reservation = service.get_by_code(codigo)
    reservation = service.update_reservation(reservation.id, update_data)
    return ReservationResponse.model_validate(reservation)


@router.delete("/{codigo}", response_model=CancellationResponse)
def cancel_reservation(
    codigo: str,
    request: Request,
    motivo: Optional[str] = Query(None, max_length=500),
    token: Optional[str] = Query(None, description="Token de cancelación"),
    service: ReservationService = Depends(get_reservation_service),
):
    """
    Cancel a reservation and release its tables.

    When ``token`` is given it must match the reservation's cancellation token.
    """
    if token is not None:
        reservation = service.get_by_code(codigo)
        if token != reservation.cancellation_token:
            raise APIError(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid cancellation token",
                error_code="INVALID_TOKEN",
            )

    archive = service.cancel_by_code(codigo, motivo, _request_info(request))
    return CancellationResponse(
        confirmation_code=archive.confirmation_code,
        released_table_ids=archive.snapshot.get("table_ids", []),
        cancelled_at=archive.cancelled_at,
    )
