from pydantic import AliasChoices, BaseModel, Field

from app.models.appointment import AppointmentPublic, DashboardData


class DoctorActionRequest(BaseModel):
    requesting_doctor_id: int = Field(
        validation_alias=AliasChoices("requesting_doctor_id", "requestingDoctorId"),
    )


class AppointmentResponse(BaseModel):
    success: bool = True
    appointment: AppointmentPublic


class AppointmentListResponse(BaseModel):
    success: bool = True
    appointments: list[AppointmentPublic]


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class DashboardResponse(BaseModel):
    success: bool = True
    dash_data: DashboardData
