"""Today's totals per exercise."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quickreps.api.v1.deps import get_current_profile
from quickreps.core.enums import ApiErrorCode
from quickreps.core.errors import ApiError
from quickreps.db.session import get_db
from quickreps.models.profile import Profile
from quickreps.schemas.summary import TodaySummary
from quickreps.services.day_bounds import validate_timezone
from quickreps.services.summary import today_summary

router = APIRouter()


@router.get("/today", response_model=TodaySummary)
async def get_today_summary(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
    tz: str | None = Query(None, description="IANA timezone; defaults to the profile's"),
):
    """
    Reps logged today per exercise plus the grand total. "Today" is the local
    calendar day in `tz` (or the profile timezone), converted to a UTC range.
    """
    if tz is not None:
        try:
            validate_timezone(tz)
        except ValueError as e:
            raise ApiError(ApiErrorCode.VALIDATION_ERROR, str(e)) from e
    return await today_summary(db, profile, tz)
