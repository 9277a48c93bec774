"""Quick survey poll: one upserted answer per alumni."""
from __future__ import annotations

import logging
import uuid
from uuid import UUID

from sqlalchemy import select, insert as sa_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from alumni_backend.models.base import get_current_utc
from alumni_backend.models.quick_survey_response import QuickSurveyResponse
from alumni_backend.schemas.quick_survey import QuickSurveyStatus, QuickSurveySubmission
from alumni_backend.utils.exceptions import InternalServiceError

logger = logging.getLogger(__name__)


class QuickSurveyService:
    """Stores and reads the quick survey answer of an alumni."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def submit_quick_survey(self, alumni_id: UUID, submission: QuickSurveySubmission) -> QuickSurveyStatus:
        """Insert the alumni's answer, or replace the previous one."""
        now = get_current_utc()
        other_response = (submission.other_response or "").strip() or None
        values = {
            "quick_survey_response_id": uuid.uuid4(),
            "alumni_id": alumni_id,
            "selected_options": list(submission.selected_options),
            "other_response": other_response,
            "created_at": now,
            "updated_at": now,
        }
        try:
            await self._upsert(alumni_id, values)
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(f"Failed to store quick survey answer for alumni {alumni_id}: {exc}")
            raise InternalServiceError(
                "quick_survey_submission_failed", "An error occurred while submitting the quick survey."
            ) from exc

        logger.info(f"Stored quick survey answer for alumni {alumni_id}")
        return await self.get_quick_survey_status(alumni_id)

    async def _upsert(self, alumni_id: UUID, values: dict) -> None:
        dialect = self.db.bind.dialect.name if self.db.bind else ""

        if dialect in ("postgresql", "sqlite"):
            insert_factory = pg_insert if dialect == "postgresql" else sqlite_insert
            stmt = insert_factory(QuickSurveyResponse).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=[QuickSurveyResponse.alumni_id],
                set_={
                    "selected_options": stmt.excluded.selected_options,
                    "other_response": stmt.excluded.other_response,
                    "updated_at": stmt.excluded.updated_at,
                },
            )
            await self.db.execute(stmt)
        else:
            existing = await self._get(alumni_id)
            if existing:
                existing.selected_options = values["selected_options"]
                existing.other_response = values["other_response"]
                existing.updated_at = values["updated_at"]
                await self.db.flush()
            else:
                await self.db.execute(sa_insert(QuickSurveyResponse).values(**values))

    async def get_quick_survey_status(self, alumni_id: UUID) -> QuickSurveyStatus:
        response = await self._get(alumni_id)
        if not response:
            return QuickSurveyStatus(answered=False)
        return QuickSurveyStatus(
            answered=True,
            selected_options=list(response.selected_options or []),
            other_response=response.other_response,
        )

    async def _get(self, alumni_id: UUID) -> QuickSurveyResponse | None:
        result = await self.db.execute(
            select(QuickSurveyResponse)
            .where(QuickSurveyResponse.alumni_id == alumni_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
