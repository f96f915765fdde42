"""Account and access-token handling."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from quickreps.core.enums import ApiErrorCode
from quickreps.core.errors import ApiError
from quickreps.core.security import hash_password, new_access_token, token_expiry, verify_password
from quickreps.models.profile import AccessToken, Profile

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


async def create_profile(db: AsyncSession, email: str, password: str, tz_name: str) -> Profile:
    email = email.strip().lower()
    existing = await db.execute(select(Profile.id).where(func.lower(Profile.email) == email))
    if existing.scalar_one_or_none() is not None:
        raise ApiError(ApiErrorCode.CONFLICT, "Email already registered")
    profile = Profile(email=email, password_hash=hash_password(password), timezone=tz_name)
    db.add(profile)
    await db.flush()
    logger.info("Created profile %s", profile.id)
    return profile


async def authenticate(db: AsyncSession, email: str, password: str) -> Profile:
    result = await db.execute(select(Profile).where(func.lower(Profile.email) == email.strip().lower()))
    profile = result.scalar_one_or_none()
    if profile is None or not verify_password(password, profile.password_hash):
        raise ApiError(ApiErrorCode.UNAUTHORIZED, "Invalid email or password")
    return profile


async def issue_token(db: AsyncSession, profile: Profile, ttl_hours: int) -> AccessToken:
    token = AccessToken(token=new_access_token(), profile_id=profile.id, expires_at=token_expiry(ttl_hours))
    db.add(token)
    await db.flush()
    return token


async def revoke_token(db: AsyncSession, token: str) -> None:
    await db.execute(delete(AccessToken).where(AccessToken.token == token))


async def profile_for_token(db: AsyncSession, token: str | None) -> Profile:
    """Resolve a bearer token to its profile, or raise UNAUTHORIZED."""
    if not token:
        raise ApiError(ApiErrorCode.UNAUTHORIZED, "No session")
    result = await db.execute(
        select(AccessToken, Profile)
        .join(Profile, Profile.id == AccessToken.profile_id)
        .where(AccessToken.token == token)
    )
    row = result.one_or_none()
    if row is None:
        raise ApiError(ApiErrorCode.UNAUTHORIZED, "Invalid session")
    access, profile = row
    if _as_utc(access.expires_at) <= datetime.now(timezone.utc):
        raise ApiError(ApiErrorCode.UNAUTHORIZED, "Session expired")
    return profile
