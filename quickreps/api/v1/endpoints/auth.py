"""Signup, login and logout with opaque bearer tokens."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quickreps.api.v1.deps import get_registry, get_token
from quickreps.buffer.registry import BufferRegistry
from quickreps.core.config import get_settings
from quickreps.db.session import get_db
from quickreps.schemas.auth import Credentials, SignupRequest, TokenResponse
from quickreps.services.auth import authenticate, create_profile, issue_token, revoke_token

router = APIRouter()


@router.post("/signup", response_model=TokenResponse, status_code=201)
async def signup(payload: SignupRequest, db: AsyncSession = Depends(get_db)):
    """Create an account and return a token for it."""
    settings = get_settings()
    profile = await create_profile(
        db, payload.email, payload.password, payload.timezone or settings.default_timezone
    )
    token = await issue_token(db, profile, settings.access_token_ttl_hours)
    return TokenResponse(access_token=token.token, expires_at=token.expires_at)


@router.post("/login", response_model=TokenResponse)
async def login(payload: Credentials, db: AsyncSession = Depends(get_db)):
    profile = await authenticate(db, payload.email, payload.password)
    token = await issue_token(db, profile, get_settings().access_token_ttl_hours)
    return TokenResponse(access_token=token.token, expires_at=token.expires_at)


@router.post("/logout", status_code=204)
async def logout(
    token: str | None = Depends(get_token),
    db: AsyncSession = Depends(get_db),
    registry: BufferRegistry = Depends(get_registry),
):
    """Revoke the presented token and drop the buffers it was driving. Unknown or missing tokens are ignored."""
    if token:
        registry.discard_token(token)
        await revoke_token(db, token)
    return None
