from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.core.timezone import UtcDatetime, utc_naive_now


class DoctorBase(SQLModel):
    name: str = Field(index=True, max_length=200)
    qualification: str | None = Field(default=None, max_length=200)
    specialty: str = Field(index=True, max_length=120)
    experience_years: int = 0
    hospital_name: str | None = Field(default=None, max_length=200)
    hospital_location: str | None = Field(default=None, max_length=200)
    consultation_fee: float = 0
    registration_verified: bool = False
    profile_image: str | None = None  # URL owned by the external asset store
    available: bool = True


class Doctor(DoctorBase, table=True):
    __tablename__ = "doctors"
    id: int | None = Field(default=None, primary_key=True)
    email: str | None = Field(default=None, unique=True, index=True)
    hashed_password: str | None = None  # None for doctors without panel access
    created_at: datetime = Field(default_factory=utc_naive_now)
    updated_at: datetime = Field(default_factory=utc_naive_now)


class DoctorSlot(SQLModel, table=True):
    __tablename__ = "doctor_slots"
    __table_args__ = (UniqueConstraint("doctor_id", "slot_at", name="uq_doctor_slots_doctor_id_slot_at"),)
    id: int | None = Field(default=None, primary_key=True)
    doctor_id: int = Field(foreign_key="doctors.id", index=True, ondelete="CASCADE")
    slot_at: datetime = Field(index=True)
    booked: bool = False


class DoctorRating(SQLModel, table=True):
    __tablename__ = "doctor_ratings"
    id: int | None = Field(default=None, primary_key=True)
    doctor_id: int = Field(foreign_key="doctors.id", index=True, ondelete="CASCADE")
    patient_id: str = Field(index=True, max_length=64)
    score: int
    comment: str | None = None
    created_at: datetime = Field(default_factory=utc_naive_now)


class SlotPublic(SQLModel):
    slot: UtcDatetime
    booked: bool


class DoctorPublic(DoctorBase):
    """Listing shape: no credentials, image only as a URL reference."""

    id: int


class DoctorContactPublic(DoctorPublic):
    email: str | None = None


class DoctorDetailPublic(DoctorPublic):
    slots: list[SlotPublic] = []


class RatingPublic(SQLModel):
    id: int
    doctor_id: int
    patient_id: str
    score: int
    comment: str | None = None
    created_at: UtcDatetime
