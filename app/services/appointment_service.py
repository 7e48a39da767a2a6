import logging
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import ForbiddenError, InvalidTransitionError, NotFoundError
from app.core.timezone import to_naive_utc, utc_naive_now
from app.models.appointment import Appointment, AppointmentPublic, AppointmentStatus, DashboardData
from app.models.doctor import DoctorSlot
from app.services.doctor_service import get_doctor

logger = logging.getLogger(__name__)


def appointment_to_public(a: Appointment) -> AppointmentPublic:
    return AppointmentPublic(
        id=a.id,
        doctor_id=a.doctor_id,
        patient_id=a.patient_id,
        hospital_name=a.hospital_name,
        hospital_location=a.hospital_location,
        fee=a.fee,
        slot=a.slot_at,
        status=AppointmentStatus(a.status),
        paid=a.paid,
        created_at=a.created_at,
    )


async def get_appointment(session: AsyncSession, appointment_id: int) -> Appointment:
    appointment = await session.get(Appointment, appointment_id)
    if appointment is None:
        raise NotFoundError("Appointment not found")
    return appointment


async def _get_owned(
    session: AsyncSession, appointment_id: int, requesting_doctor_id: int
) -> Appointment:
    appointment = await get_appointment(session, appointment_id)
    if appointment.doctor_id != requesting_doctor_id:
        raise ForbiddenError("Appointment belongs to another doctor")
    return appointment


async def _leave_confirmed(
    session: AsyncSession, appointment_id: int, target: AppointmentStatus
) -> bool:
    """Move a confirmed appointment to ``target``; False when it had already left confirmed."""
    result = await session.execute(
        update(Appointment)
        .where(
            Appointment.id == appointment_id,
            Appointment.status == AppointmentStatus.CONFIRMED.value,
        )
        .values(status=target.value, updated_at=utc_naive_now())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def cancel_appointment(
    session: AsyncSession, appointment_id: int, requesting_doctor_id: int
) -> Appointment:
    """Cancel a confirmed appointment and reopen its slot for rebooking.

    Cancelling twice is a no-op; a completed appointment cannot be cancelled.
    Only the cancel that actually moves the row out of confirmed reopens the slot.
    """
    appointment = await _get_owned(session, appointment_id, requesting_doctor_id)
    if await _leave_confirmed(session, appointment_id, AppointmentStatus.CANCELLED):
        await session.execute(
            update(DoctorSlot)
            .where(
                DoctorSlot.doctor_id == appointment.doctor_id,
                DoctorSlot.slot_at == appointment.slot_at,
                DoctorSlot.booked == True,  # noqa: E712
            )
            .values(booked=False)
            .execution_options(synchronize_session=False)
        )
        logger.info("Appointment %s cancelled by doctor %s; slot reopened", appointment_id, requesting_doctor_id)
    await session.refresh(appointment)
    if appointment.status == AppointmentStatus.COMPLETED:
        raise InvalidTransitionError("Completed appointments cannot be cancelled")
    return appointment


async def complete_appointment(
    session: AsyncSession, appointment_id: int, requesting_doctor_id: int
) -> Appointment:
    appointment = await _get_owned(session, appointment_id, requesting_doctor_id)
    if await _leave_confirmed(session, appointment_id, AppointmentStatus.COMPLETED):
        logger.info("Appointment %s completed by doctor %s", appointment_id, requesting_doctor_id)
    await session.refresh(appointment)
    if appointment.status == AppointmentStatus.CANCELLED:
        raise InvalidTransitionError("Cancelled appointments cannot be completed")
    return appointment


async def record_payment(session: AsyncSession, appointment_id: int) -> Appointment:
    """Mark an appointment paid. Called by the external payment collaborator."""
    appointment = await get_appointment(session, appointment_id)
    await session.execute(
        update(Appointment)
        .where(
            Appointment.id == appointment_id,
            Appointment.status != AppointmentStatus.CANCELLED.value,
            Appointment.paid == False,  # noqa: E712
        )
        .values(paid=True, updated_at=utc_naive_now())
        .execution_options(synchronize_session=False)
    )
    await session.refresh(appointment)
    if appointment.status == AppointmentStatus.CANCELLED:
        raise InvalidTransitionError("Cancelled appointments cannot be paid")
    return appointment


async def list_appointments_for_doctor(
    session: AsyncSession, doctor_id: int, as_of: datetime | None = None
) -> list[Appointment]:
    """Newest first."""
    await get_doctor(session, doctor_id)
    q = select(Appointment).where(Appointment.doctor_id == doctor_id)
    if as_of is not None:
        q = q.where(Appointment.created_at <= to_naive_utc(as_of))
    q = q.order_by(Appointment.created_at.desc(), Appointment.id.desc())
    result = await session.execute(q)
    return list(result.scalars().all())


async def doctor_dashboard(
    session: AsyncSession, doctor_id: int, as_of: datetime | None = None
) -> DashboardData:
    appointments = await list_appointments_for_doctor(session, doctor_id, as_of or utc_naive_now())
    earnings = sum(
        a.fee for a in appointments
        if a.status == AppointmentStatus.COMPLETED or a.paid
    )
    patients = {a.patient_id for a in appointments}
    return DashboardData(
        earnings_total=earnings,
        appointment_count=len(appointments),
        distinct_patient_count=len(patients),
        recent_appointments=[
            appointment_to_public(a) for a in appointments[: settings.dashboard_recent_limit]
        ],
    )
