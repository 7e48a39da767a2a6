import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import create_access_token, verify_password
from app.models.doctor import Doctor
from app.services.doctor_service import get_doctor_by_email

logger = logging.getLogger(__name__)


def make_access_token(doctor_id: int) -> tuple[str, int]:
    access = create_access_token(doctor_id)
    expires_in = settings.access_token_expire_minutes * 60
    return access, expires_in


async def login_doctor(
    session: AsyncSession, email: str, password: str
) -> tuple[Doctor, str, int] | None:
    doctor = await get_doctor_by_email(session, email)
    if not doctor or not doctor.hashed_password:
        logger.info("Doctor login failed: unknown email or no panel access")
        return None
    if not verify_password(password, doctor.hashed_password):
        logger.info("Doctor login failed: wrong password for doctor %s", doctor.id)
        return None
    access, expires_in = make_access_token(doctor.id)
    return doctor, access, expires_in
