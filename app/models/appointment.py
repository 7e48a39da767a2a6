from datetime import datetime
from enum import Enum

from sqlmodel import Field, SQLModel

from app.core.timezone import UtcDatetime, utc_naive_now


class AppointmentStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: int | None = Field(default=None, primary_key=True)
    doctor_id: int = Field(foreign_key="doctors.id", index=True)
    patient_id: str = Field(index=True, max_length=64)
    # Snapshot of the doctor's hospital and fee at booking time
    hospital_name: str | None = None
    hospital_location: str | None = None
    fee: float = 0
    slot_at: datetime = Field(index=True)
    status: str = Field(default=AppointmentStatus.CONFIRMED.value, index=True, max_length=16)
    paid: bool = False
    created_at: datetime = Field(default_factory=utc_naive_now)
    updated_at: datetime = Field(default_factory=utc_naive_now)


class AppointmentPublic(SQLModel):
    id: int
    doctor_id: int
    patient_id: str
    hospital_name: str | None = None
    hospital_location: str | None = None
    fee: float
    slot: UtcDatetime
    status: AppointmentStatus
    paid: bool
    created_at: UtcDatetime


class DashboardData(SQLModel):
    earnings_total: float
    appointment_count: int
    distinct_patient_count: int
    recent_appointments: list[AppointmentPublic]
