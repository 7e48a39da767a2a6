from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_session
from app.api.schemas.doctor import GroupedSlotsResponse
from app.core.timezone import to_naive_utc, utc_naive_now
from app.services.doctor_service import slot_to_public
from app.services.slot_service import get_grouped_slots

router = APIRouter(prefix="/doctors", tags=["slots"])


@router.get("/{doctor_id}/slots", response_model=GroupedSlotsResponse)
async def grouped_slots(
    doctor_id: int,
    as_of: datetime | None = Query(None),
    session: AsyncSession = Depends(get_session),
) -> GroupedSlotsResponse:
    """Unbooked slots grouped into today / tomorrow / later (and past days) relative to as_of."""
    as_of = to_naive_utc(as_of) if as_of else utc_naive_now()
    groups = await get_grouped_slots(session, doctor_id, as_of)
    return GroupedSlotsResponse(
        as_of=as_of,
        today=[slot_to_public(s) for s in groups.today],
        tomorrow=[slot_to_public(s) for s in groups.tomorrow],
        later=[slot_to_public(s) for s in groups.later],
        past=[slot_to_public(s) for s in groups.past],
    )
