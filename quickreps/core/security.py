"""Security utilities: password hashing and opaque access tokens."""

import secrets
from datetime import datetime, timedelta, timezone

from passlib.context import CryptContext

password_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(plain: str) -> str:
    return password_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return password_context.verify(plain, hashed)


def new_access_token() -> str:
    return secrets.token_urlsafe(32)


def token_expiry(ttl_hours: int, now: datetime | None = None) -> datetime:
    return (now or datetime.now(timezone.utc)) + timedelta(hours=ttl_hours)
