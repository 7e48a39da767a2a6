from app.models.doctor import (
    Doctor,
    DoctorContactPublic,
    DoctorDetailPublic,
    DoctorPublic,
    DoctorRating,
    DoctorSlot,
    RatingPublic,
    SlotPublic,
)
from app.models.appointment import Appointment, AppointmentPublic, AppointmentStatus, DashboardData

__all__ = [
    "Doctor",
    "DoctorContactPublic",
    "DoctorDetailPublic",
    "DoctorPublic",
    "DoctorRating",
    "DoctorSlot",
    "RatingPublic",
    "SlotPublic",
    "Appointment",
    "AppointmentPublic",
    "AppointmentStatus",
    "DashboardData",
]
