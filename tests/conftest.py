"""Shared test fixtures."""
import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="docbook-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["CLINIC_TIMEZONE"] = "UTC"

from contextlib import asynccontextmanager  # noqa: E402
from datetime import datetime, timedelta  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from app.core.db import async_session_maker, engine, init_db  # noqa: E402
from app.core.timezone import utc_naive_now  # noqa: E402
from app.main import app  # noqa: E402
from app.services.doctor_service import create_doctor  # noqa: E402


@pytest.fixture(autouse=True)
async def database():
    """Fresh schema for every test."""
    await init_db()
    yield
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def transaction():
    """Open a session with one committed-on-exit transaction."""
    @asynccontextmanager
    async def _tx():
        async with async_session_maker() as session, session.begin():
            yield session
    return _tx


@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def future_slot():
    """Slot instants on whole hours a few days from now."""
    def _make(days: int = 2, hour: int = 9) -> datetime:
        base = utc_naive_now() + timedelta(days=days)
        return base.replace(hour=hour, minute=0, second=0, microsecond=0)
    return _make


@pytest.fixture
def make_doctor(transaction):
    async def _make(slots=(), email=None, password=None, **overrides):
        fields = {
            "name": "Dr. Asha Rao",
            "specialty": "Cardiologist",
            "qualification": "MBBS, MD",
            "experience_years": 12,
            "hospital_name": "City Hospital",
            "hospital_location": "Bengaluru",
            "consultation_fee": 500,
            **overrides,
        }
        async with transaction() as session:
            return await create_doctor(session, fields, slots, email=email, password=password)
    return _make
