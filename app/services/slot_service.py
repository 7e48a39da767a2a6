import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import SlotUnavailableError
from app.core.timezone import local_day, to_naive_utc, utc_naive_now
from app.models.appointment import Appointment
from app.models.doctor import DoctorSlot
from app.services.doctor_service import get_doctor, list_slots

logger = logging.getLogger(__name__)


@dataclass
class SlotGroups:
    today: list[DoctorSlot] = field(default_factory=list)
    tomorrow: list[DoctorSlot] = field(default_factory=list)
    later: list[DoctorSlot] = field(default_factory=list)
    # Unbooked slots on calendar days before as_of; kept so nothing is silently dropped
    past: list[DoctorSlot] = field(default_factory=list)


def group_available(slots: Iterable[DoctorSlot], as_of: datetime) -> SlotGroups:
    """Partition unbooked slots into day buckets relative to as_of's day in the
    clinic timezone. Slots earlier on the same day still land in today."""
    groups = SlotGroups()
    as_of_day = local_day(as_of)
    for slot in sorted((s for s in slots if not s.booked), key=lambda s: s.slot_at):
        diff = (local_day(slot.slot_at) - as_of_day).days
        if diff == 0:
            groups.today.append(slot)
        elif diff == 1:
            groups.tomorrow.append(slot)
        elif diff > 1:
            groups.later.append(slot)
        else:
            groups.past.append(slot)
    return groups


async def get_grouped_slots(
    session: AsyncSession, doctor_id: int, as_of: datetime | None = None
) -> SlotGroups:
    await get_doctor(session, doctor_id)
    slots = await list_slots(session, doctor_id)
    return group_available(slots, as_of or utc_naive_now())


async def reserve_slot(
    session: AsyncSession,
    doctor_id: int,
    slot_instant: datetime,
    patient_id: str,
    now: datetime | None = None,
) -> Appointment:
    """Claim a slot and record the appointment in the caller's transaction.

    The claim is a single conditional UPDATE (booked = false -> true), so of any
    number of concurrent attempts on one slot exactly one sees a matched row.
    """
    doctor = await get_doctor(session, doctor_id)
    if not doctor.available:
        raise SlotUnavailableError("Doctor is not accepting appointments")
    slot_at = to_naive_utc(slot_instant)
    if slot_at < to_naive_utc(now or utc_naive_now()):
        raise SlotUnavailableError("Slot is in the past")
    result = await session.execute(
        update(DoctorSlot)
        .where(
            DoctorSlot.doctor_id == doctor_id,
            DoctorSlot.slot_at == slot_at,
            DoctorSlot.booked == False,  # noqa: E712
        )
        .values(booked=True)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        logger.info("Slot not available: doctor=%s slot=%s", doctor_id, slot_at.isoformat())
        raise SlotUnavailableError("Slot is already booked or does not exist")
    appointment = Appointment(
        doctor_id=doctor_id,
        patient_id=patient_id,
        hospital_name=doctor.hospital_name,
        hospital_location=doctor.hospital_location,
        fee=doctor.consultation_fee,
        slot_at=slot_at,
    )
    session.add(appointment)
    await session.flush()
    await session.refresh(appointment)
    logger.info(
        "Appointment %s booked: doctor=%s patient=%s slot=%s",
        appointment.id, doctor_id, patient_id, slot_at.isoformat(),
    )
    return appointment
