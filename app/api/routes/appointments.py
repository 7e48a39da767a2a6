from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_session
from app.api.schemas.appointment import AppointmentResponse, DoctorActionRequest, MessageResponse
from app.services.appointment_service import (
    appointment_to_public,
    cancel_appointment,
    complete_appointment,
    record_payment,
)

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.post("/{appointment_id}/cancel", response_model=MessageResponse)
async def cancel(
    appointment_id: int,
    body: DoctorActionRequest,
    session: AsyncSession = Depends(get_session),
) -> MessageResponse:
    await cancel_appointment(session, appointment_id, body.requesting_doctor_id)
    return MessageResponse(message="Appointment cancelled")


@router.post("/{appointment_id}/complete", response_model=MessageResponse)
async def complete(
    appointment_id: int,
    body: DoctorActionRequest,
    session: AsyncSession = Depends(get_session),
) -> MessageResponse:
    await complete_appointment(session, appointment_id, body.requesting_doctor_id)
    return MessageResponse(message="Appointment completed")


@router.post("/{appointment_id}/payment", response_model=AppointmentResponse)
async def payment(
    appointment_id: int,
    session: AsyncSession = Depends(get_session),
) -> AppointmentResponse:
    """Record that the external payment provider settled this appointment."""
    appointment = await record_payment(session, appointment_id)
    return AppointmentResponse(appointment=appointment_to_public(appointment))
