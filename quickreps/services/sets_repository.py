"""Database-backed SetsRepository used by hosted quick-entry buffers."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from quickreps.buffer.collaborators import SessionProvider
from quickreps.core.constants import HISTORY_LIMIT
from quickreps.core.enums import ApiErrorCode, SetSource
from quickreps.core.errors import ApiError
from quickreps.models.set_record import SetRecord
from quickreps.services.auth import profile_for_token
from quickreps.services.sets import add_set, get_owned_exercise, recent_reps

logger = logging.getLogger(__name__)


class DatabaseSetsRepository:
    """
    Opens its own session per call (buffers commit outside any request) and
    checks the caller's token and exercise ownership every time, exactly as
    POST /sets would.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession], session: SessionProvider):
        self._session_maker = session_maker
        self._session = session

    async def create_set(
        self, exercise_id: uuid.UUID, reps: int, source: SetSource = SetSource.QUICKBUTTON
    ) -> SetRecord:
        token = self._session.current_access_token()
        if not token:
            raise ApiError(ApiErrorCode.UNAUTHORIZED, "No session")
        async with self._session_maker() as db:
            try:
                profile = await profile_for_token(db, token)
                exercise = await get_owned_exercise(db, profile.id, exercise_id)
                record = await add_set(db, exercise, reps, source)
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                logger.exception("Saving set for %s failed", exercise_id)
                raise ApiError(ApiErrorCode.INTERNAL_ERROR, "Could not save set") from e
        return record

    async def list_recent_reps(self, exercise_id: uuid.UUID, limit: int = HISTORY_LIMIT) -> list[int]:
        token = self._session.current_access_token()
        async with self._session_maker() as db:
            try:
                profile = await profile_for_token(db, token)
                await get_owned_exercise(db, profile.id, exercise_id)
                return await recent_reps(db, exercise_id, limit)
            except SQLAlchemyError as e:
                logger.exception("Loading recent sets for %s failed", exercise_id)
                raise ApiError(ApiErrorCode.INTERNAL_ERROR, "Could not load sets") from e
