"""Auth and profile schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from quickreps.services.day_bounds import validate_timezone


class Credentials(BaseModel):
    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=128)


class SignupRequest(Credentials):
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v: str | None) -> str | None:
        return validate_timezone(v) if v is not None else v


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class ProfileRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    email: str
    timezone: str
    created_at: datetime


class ProfileUpdate(BaseModel):
    timezone: str

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v: str) -> str:
        return validate_timezone(v)
