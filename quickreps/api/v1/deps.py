"""Shared endpoint dependencies: bearer token, current profile, buffer registry."""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from quickreps.buffer.registry import BufferRegistry
from quickreps.db.session import get_db
from quickreps.models.profile import Profile
from quickreps.services.auth import profile_for_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    return credentials.credentials if credentials else None


async def get_current_profile(
    token: str | None = Depends(get_token),
    db: AsyncSession = Depends(get_db),
) -> Profile:
    """Profile behind the bearer token; 401 when missing, unknown or expired."""
    return await profile_for_token(db, token)


def get_registry(request: Request) -> BufferRegistry:
    return request.app.state.buffers
