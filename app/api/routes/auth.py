from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_doctor, get_session
from app.api.schemas.auth import LoginRequest, TokenResponse
from app.api.schemas.doctor import DoctorProfileResponse, DoctorUpdateRequest
from app.core.errors import AuthenticationError
from app.models.doctor import Doctor
from app.services.auth_service import login_doctor
from app.services.doctor_service import doctor_to_public, update_profile

router = APIRouter(prefix="/auth/doctor", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_session),
) -> TokenResponse:
    result = await login_doctor(session, body.email, body.password)
    if not result:
        raise AuthenticationError("Invalid credentials")
    _, access, expires_in = result
    return TokenResponse(access_token=access, expires_in=expires_in)


@router.get("/me", response_model=DoctorProfileResponse)
async def me(current_doctor: Doctor = Depends(get_current_doctor)) -> DoctorProfileResponse:
    return DoctorProfileResponse(profile=doctor_to_public(current_doctor, exclude_sensitive=False))


@router.patch("/me", response_model=DoctorProfileResponse)
async def update_me(
    body: DoctorUpdateRequest,
    session: AsyncSession = Depends(get_session),
    current_doctor: Doctor = Depends(get_current_doctor),
) -> DoctorProfileResponse:
    doctor = await update_profile(session, current_doctor.id, body.model_dump(exclude_unset=True))
    return DoctorProfileResponse(profile=doctor_to_public(doctor, exclude_sensitive=False))
