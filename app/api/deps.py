from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_session
from app.core.errors import AuthenticationError
from app.core.security import decode_access_token
from app.models.doctor import Doctor

security = HTTPBearer(auto_error=False)

__all__ = ["get_session", "get_current_doctor"]


async def get_current_doctor(
    session: AsyncSession = Depends(get_session),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Doctor:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Missing or invalid authorization header")
    doctor_id = decode_access_token(credentials.credentials)
    if not doctor_id:
        raise AuthenticationError("Invalid or expired token")
    try:
        did = int(doctor_id)
    except ValueError:
        raise AuthenticationError("Invalid token")
    doctor = await session.get(Doctor, did)
    if not doctor:
        raise AuthenticationError("Doctor not found")
    return doctor
