import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import NotFoundError, ValidationError
from app.core.security import hash_password
from app.core.timezone import to_naive_utc, utc_naive_now
from app.models.doctor import (
    Doctor,
    DoctorContactPublic,
    DoctorDetailPublic,
    DoctorPublic,
    DoctorRating,
    DoctorSlot,
    SlotPublic,
)

logger = logging.getLogger(__name__)

# Profile fields an update may touch; anything else in the payload is ignored
PROFILE_FIELDS = frozenset({
    "name",
    "qualification",
    "specialty",
    "experience_years",
    "hospital_name",
    "hospital_location",
    "consultation_fee",
    "registration_verified",
    "profile_image",
    "available",
})
_REQUIRED_TEXT = ("name", "specialty")
_NON_NEGATIVE = ("experience_years", "consultation_fee")
_NOT_NULL = ("experience_years", "consultation_fee", "registration_verified", "available")


def _clean_profile(values: Mapping[str, Any], partial: bool) -> dict[str, Any]:
    clean = {k: v for k, v in values.items() if k in PROFILE_FIELDS}
    for key in _REQUIRED_TEXT:
        if key not in clean:
            if not partial:
                raise ValidationError(f"{key} is required")
            continue
        value = clean[key]
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"{key} must not be empty")
        clean[key] = value.strip()
    for key in _NOT_NULL:
        if key in clean and clean[key] is None:
            raise ValidationError(f"{key} must not be null")
    for key in _NON_NEGATIVE:
        if key in clean and clean[key] < 0:
            raise ValidationError(f"{key} must not be negative")
    for key in ("qualification", "hospital_name", "hospital_location"):
        if isinstance(clean.get(key), str):
            clean[key] = clean[key].strip()
    return clean


def doctor_to_public(doctor: Doctor, exclude_sensitive: bool = True) -> DoctorPublic:
    """Public projection. The password hash is never exposed; the contact email only
    when exclude_sensitive is False (the doctor's own profile)."""
    if exclude_sensitive:
        return DoctorPublic.model_validate(doctor)
    return DoctorContactPublic.model_validate(doctor)


def slot_to_public(slot: DoctorSlot) -> SlotPublic:
    return SlotPublic(slot=slot.slot_at, booked=slot.booked)


async def get_doctor(session: AsyncSession, doctor_id: int) -> Doctor:
    doctor = await session.get(Doctor, doctor_id)
    if doctor is None:
        raise NotFoundError("Doctor not found")
    return doctor


async def get_doctor_by_email(session: AsyncSession, email: str) -> Doctor | None:
    result = await session.execute(select(Doctor).where(Doctor.email == email.lower()))
    return result.scalar_one_or_none()


async def list_slots(session: AsyncSession, doctor_id: int) -> list[DoctorSlot]:
    result = await session.execute(
        select(DoctorSlot).where(DoctorSlot.doctor_id == doctor_id).order_by(DoctorSlot.slot_at)
    )
    return list(result.scalars().all())


async def _flush_unique(session: AsyncSession, message: str) -> None:
    """Flush, turning a unique-constraint clash into a ValidationError."""
    try:
        await session.flush()
    except IntegrityError as exc:
        raise ValidationError(message) from exc


async def create_doctor(
    session: AsyncSession,
    fields: Mapping[str, Any],
    initial_slots: Iterable[datetime] = (),
    email: str | None = None,
    password: str | None = None,
) -> Doctor:
    profile = _clean_profile(fields, partial=False)
    doctor = Doctor(**profile)
    if email:
        email = email.lower()
        if await get_doctor_by_email(session, email):
            raise ValidationError("A doctor with this email already exists")
        doctor.email = email
    if password:
        doctor.hashed_password = hash_password(password)
    session.add(doctor)
    await _flush_unique(session, "A doctor with this email already exists")
    await session.refresh(doctor)
    for slot_at in sorted({to_naive_utc(s) for s in initial_slots}):
        session.add(DoctorSlot(doctor_id=doctor.id, slot_at=slot_at))
    await session.flush()
    logger.info("Doctor registered: id=%s specialty=%s", doctor.id, doctor.specialty)
    return doctor


async def update_profile(
    session: AsyncSession, doctor_id: int, partial_fields: Mapping[str, Any]
) -> Doctor:
    doctor = await get_doctor(session, doctor_id)
    changes = _clean_profile(partial_fields, partial=True)
    for key, value in changes.items():
        setattr(doctor, key, value)
    if changes:
        doctor.updated_at = utc_naive_now()
        session.add(doctor)
        await session.flush()
    return doctor


async def toggle_availability(session: AsyncSession, doctor_id: int) -> bool:
    doctor = await get_doctor(session, doctor_id)
    doctor.available = not doctor.available
    doctor.updated_at = utc_naive_now()
    session.add(doctor)
    await session.flush()
    logger.info("Doctor %s availability set to %s", doctor_id, doctor.available)
    return doctor.available


async def _existing_instants(
    session: AsyncSession, doctor_id: int, instants: set[datetime]
) -> set[datetime]:
    result = await session.execute(
        select(DoctorSlot.slot_at).where(
            DoctorSlot.doctor_id == doctor_id,
            DoctorSlot.slot_at.in_(sorted(instants)),
        )
    )
    return {row[0] for row in result.all()}


async def add_slots(
    session: AsyncSession, doctor_id: int, instants: Iterable[datetime]
) -> list[DoctorSlot]:
    """Add bookable instants to a doctor. Instants the doctor already has are skipped."""
    await get_doctor(session, doctor_id)
    wanted = {to_naive_utc(s) for s in instants}
    if not wanted:
        return []
    existing = await _existing_instants(session, doctor_id, wanted)
    added = [DoctorSlot(doctor_id=doctor_id, slot_at=s) for s in sorted(wanted - existing)]
    session.add_all(added)
    await _flush_unique(session, "Slot already exists for this doctor")
    return added


async def list_doctors(
    session: AsyncSession, exclude_sensitive: bool = True
) -> list[DoctorPublic]:
    result = await session.execute(select(Doctor).order_by(Doctor.id))
    return [doctor_to_public(d, exclude_sensitive) for d in result.scalars().all()]


async def get_doctor_detail(session: AsyncSession, doctor_id: int) -> DoctorDetailPublic:
    doctor = await get_doctor(session, doctor_id)
    slots = await list_slots(session, doctor_id)
    return DoctorDetailPublic(
        **DoctorPublic.model_validate(doctor).model_dump(),
        slots=[slot_to_public(s) for s in slots],
    )


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def search_doctors(
    session: AsyncSession,
    free_text: str | None = None,
    speciality: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[DoctorPublic]:
    """Speciality is an exact case-insensitive filter; free text matches any of name,
    hospital name, hospital location or specialty as a substring. Both are ANDed."""
    q = select(Doctor)
    speciality = (speciality or "").strip()
    if speciality:
        q = q.where(func.lower(Doctor.specialty) == speciality.lower())
    term = (free_text or "").strip()
    if term:
        pattern = f"%{_escape_like(term)}%"
        q = q.where(
            or_(
                Doctor.name.ilike(pattern, escape="\\"),
                Doctor.hospital_name.ilike(pattern, escape="\\"),
                Doctor.hospital_location.ilike(pattern, escape="\\"),
                Doctor.specialty.ilike(pattern, escape="\\"),
            )
        )
    limit = min(limit or settings.search_default_limit, settings.search_max_limit)
    q = q.order_by(Doctor.id).offset(max(offset, 0)).limit(limit)
    result = await session.execute(q)
    return [doctor_to_public(d) for d in result.scalars().all()]


async def rate_doctor(
    session: AsyncSession, doctor_id: int, patient_id: str, score: int, comment: str | None = None
) -> DoctorRating:
    await get_doctor(session, doctor_id)
    if not 1 <= score <= 5:
        raise ValidationError("score must be between 1 and 5")
    rating = DoctorRating(doctor_id=doctor_id, patient_id=patient_id, score=score, comment=comment)
    session.add(rating)
    await session.flush()
    await session.refresh(rating)
    return rating
