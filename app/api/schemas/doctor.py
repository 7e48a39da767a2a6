from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

from app.core.timezone import UtcDatetime
from app.models.doctor import DoctorContactPublic, DoctorDetailPublic, DoctorPublic, RatingPublic, SlotPublic


class DoctorCreateRequest(BaseModel):
    # Canonical names only; legacy keys (doctorName, speciality) are rejected
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=200)
    qualification: str | None = None
    specialty: str = Field(min_length=1, max_length=120)
    experience_years: int = Field(default=0, ge=0)
    hospital_name: str | None = None
    hospital_location: str | None = None
    consultation_fee: float = Field(default=0, ge=0)
    registration_verified: bool = False
    profile_image: str | None = None
    available: bool = True
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6)
    slots: list[datetime] = []


class DoctorUpdateRequest(BaseModel):
    """Partial profile update; unrecognised keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    qualification: str | None = None
    specialty: str | None = None
    experience_years: int | None = None
    hospital_name: str | None = None
    hospital_location: str | None = None
    consultation_fee: float | None = None
    registration_verified: bool | None = None
    profile_image: str | None = None
    available: bool | None = None


class AddSlotsRequest(BaseModel):
    slots: list[datetime] = Field(min_length=1)


class BookSlotRequest(BaseModel):
    patient_id: str = Field(
        min_length=1,
        max_length=64,
        validation_alias=AliasChoices("patient_id", "patientId"),
    )
    slot: datetime


class RatingRequest(BaseModel):
    patient_id: str = Field(
        min_length=1,
        max_length=64,
        validation_alias=AliasChoices("patient_id", "patientId"),
    )
    score: int = Field(ge=1, le=5)
    comment: str | None = Field(default=None, max_length=2000)


class DoctorListResponse(BaseModel):
    success: bool = True
    doctors: list[DoctorPublic]


class DoctorResponse(BaseModel):
    success: bool = True
    doctor: DoctorDetailPublic


class DoctorProfileResponse(BaseModel):
    success: bool = True
    profile: DoctorContactPublic


class AvailabilityResponse(BaseModel):
    success: bool = True
    available: bool
    message: str = "Availability changed"


class SlotsAddedResponse(BaseModel):
    success: bool = True
    added: list[SlotPublic]


class GroupedSlotsResponse(BaseModel):
    success: bool = True
    as_of: UtcDatetime
    today: list[SlotPublic]
    tomorrow: list[SlotPublic]
    later: list[SlotPublic]
    past: list[SlotPublic]


class RatingResponse(BaseModel):
    success: bool = True
    rating: RatingPublic
