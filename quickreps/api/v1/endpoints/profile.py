"""Current profile endpoints (timezone preference)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickreps.api.v1.deps import get_current_profile
from quickreps.db.session import get_db
from quickreps.models.profile import Profile
from quickreps.schemas.auth import ProfileRead, ProfileUpdate

router = APIRouter()


@router.get("", response_model=ProfileRead)
async def get_profile(profile: Profile = Depends(get_current_profile)):
    return profile


@router.put("", response_model=ProfileRead)
async def update_profile(
    payload: ProfileUpdate,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    """Change the timezone used for "today" boundaries."""
    profile.timezone = payload.timezone
    await db.flush()
    await db.refresh(profile)
    return profile
