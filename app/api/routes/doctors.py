import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_session
from app.api.schemas.appointment import AppointmentListResponse, AppointmentResponse, DashboardResponse
from app.api.schemas.doctor import (
    AddSlotsRequest,
    AvailabilityResponse,
    BookSlotRequest,
    DoctorCreateRequest,
    DoctorListResponse,
    DoctorResponse,
    DoctorUpdateRequest,
    RatingRequest,
    RatingResponse,
    SlotsAddedResponse,
)
from app.models.doctor import RatingPublic
from app.services.appointment_service import (
    appointment_to_public,
    doctor_dashboard,
    list_appointments_for_doctor,
)
from app.services.doctor_service import (
    add_slots,
    create_doctor,
    get_doctor_detail,
    list_doctors,
    rate_doctor,
    search_doctors,
    slot_to_public,
    toggle_availability,
    update_profile,
)
from app.services.slot_service import reserve_slot

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/doctors", tags=["doctors"])


@router.post("", response_model=DoctorResponse, status_code=status.HTTP_201_CREATED)
async def register_doctor(
    body: DoctorCreateRequest,
    session: AsyncSession = Depends(get_session),
) -> DoctorResponse:
    """Admin: register a doctor with an initial set of bookable slots."""
    fields = body.model_dump(exclude={"email", "password", "slots"})
    doctor = await create_doctor(
        session, fields, body.slots, email=body.email, password=body.password
    )
    return DoctorResponse(doctor=await get_doctor_detail(session, doctor.id))


@router.get("", response_model=DoctorListResponse)
async def all_doctors(session: AsyncSession = Depends(get_session)) -> DoctorListResponse:
    return DoctorListResponse(doctors=await list_doctors(session))


@router.get("/search", response_model=DoctorListResponse)
async def find_doctors(
    q: str | None = Query(None),
    speciality: str | None = Query(None),
    name: str | None = Query(None),
    hospital_name: str | None = Query(None, alias="hospitalName"),
    location: str | None = Query(None),
    limit: int | None = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
) -> DoctorListResponse:
    """Free-text search; name/hospitalName/location are older aliases for q."""
    term = q or name or hospital_name or location
    doctors = await search_doctors(session, term, speciality, limit=limit, offset=offset)
    return DoctorListResponse(doctors=doctors)


@router.get("/{doctor_id}", response_model=DoctorResponse)
async def doctor_detail(
    doctor_id: int,
    session: AsyncSession = Depends(get_session),
) -> DoctorResponse:
    return DoctorResponse(doctor=await get_doctor_detail(session, doctor_id))


@router.patch("/{doctor_id}", response_model=DoctorResponse)
async def edit_doctor(
    doctor_id: int,
    body: DoctorUpdateRequest,
    session: AsyncSession = Depends(get_session),
) -> DoctorResponse:
    await update_profile(session, doctor_id, body.model_dump(exclude_unset=True))
    return DoctorResponse(doctor=await get_doctor_detail(session, doctor_id))


@router.post("/{doctor_id}/slots", response_model=SlotsAddedResponse, status_code=status.HTTP_201_CREATED)
async def add_doctor_slots(
    doctor_id: int,
    body: AddSlotsRequest,
    session: AsyncSession = Depends(get_session),
) -> SlotsAddedResponse:
    added = await add_slots(session, doctor_id, body.slots)
    logger.info("Added %d of %d requested slot(s) to doctor %s", len(added), len(body.slots), doctor_id)
    return SlotsAddedResponse(added=[slot_to_public(s) for s in added])


@router.post("/{doctor_id}/availability", response_model=AvailabilityResponse)
async def change_availability(
    doctor_id: int,
    session: AsyncSession = Depends(get_session),
) -> AvailabilityResponse:
    available = await toggle_availability(session, doctor_id)
    return AvailabilityResponse(available=available)


@router.post("/{doctor_id}/book", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def book_slot(
    doctor_id: int,
    body: BookSlotRequest,
    session: AsyncSession = Depends(get_session),
) -> AppointmentResponse:
    appointment = await reserve_slot(session, doctor_id, body.slot, body.patient_id)
    return AppointmentResponse(appointment=appointment_to_public(appointment))


@router.post("/{doctor_id}/ratings", response_model=RatingResponse, status_code=status.HTTP_201_CREATED)
async def add_rating(
    doctor_id: int,
    body: RatingRequest,
    session: AsyncSession = Depends(get_session),
) -> RatingResponse:
    rating = await rate_doctor(session, doctor_id, body.patient_id, body.score, body.comment)
    return RatingResponse(rating=RatingPublic.model_validate(rating))


@router.get("/{doctor_id}/appointments", response_model=AppointmentListResponse)
async def doctor_appointments(
    doctor_id: int,
    session: AsyncSession = Depends(get_session),
) -> AppointmentListResponse:
    appointments = await list_appointments_for_doctor(session, doctor_id)
    return AppointmentListResponse(appointments=[appointment_to_public(a) for a in appointments])


@router.get("/{doctor_id}/dashboard", response_model=DashboardResponse)
async def dashboard(
    doctor_id: int,
    as_of: datetime | None = Query(None),
    session: AsyncSession = Depends(get_session),
) -> DashboardResponse:
    return DashboardResponse(dash_data=await doctor_dashboard(session, doctor_id, as_of))
