"""SQLAlchemy (async) implementation of the workflow store."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from workflow_helper.db.models import WorkflowRecord
from workflow_helper.errors import FETCH_FAILED_MESSAGE, StorageError

from .base import StoredWorkflow, WorkflowId, WorkflowStore

logger = logging.getLogger(__name__)


def _to_stored(record: WorkflowRecord) -> StoredWorkflow:
    return StoredWorkflow(
        id=record.id,
        original_text=record.original_workflow,
        suggested_steps=record.suggested_steps,
        user_email=record.user_email,
    )


class SqlAlchemyWorkflowStore(WorkflowStore):
    """Persist workflows in the ``workflows`` table; one session per operation."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self._session_maker = session_maker

    async def insert(self, original_text: str, suggested_steps: List[Any]) -> StoredWorkflow:
        try:
            async with self._session_maker() as session:
                record = WorkflowRecord(
                    original_workflow=original_text,
                    suggested_steps=list(suggested_steps),
                )
                session.add(record)
                await session.commit()
                await session.refresh(record)
                return _to_stored(record)
        except SQLAlchemyError as e:
            logger.error(f"DB insert error: {e}")
            raise StorageError(detail=f"Insert into workflows failed: {e}") from e

    async def get(self, workflow_id: WorkflowId) -> Optional[StoredWorkflow]:
        try:
            key = int(workflow_id)
        except (TypeError, ValueError):
            return None

        try:
            async with self._session_maker() as session:
                record = await session.get(WorkflowRecord, key)
                return _to_stored(record) if record else None
        except SQLAlchemyError as e:
            logger.error(f"DB fetch error: {e}")
            raise StorageError(FETCH_FAILED_MESSAGE, detail=f"Fetch of workflow {workflow_id} failed: {e}") from e

    async def update_email(self, workflow_id: WorkflowId, user_email: str) -> None:
        try:
            async with self._session_maker() as session:
                await session.execute(
                    update(WorkflowRecord)
                    .where(WorkflowRecord.id == int(workflow_id))
                    .values(user_email=user_email)
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(detail=f"Email update of workflow {workflow_id} failed: {e}") from e
