"""In-memory implementation of the workflow store."""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, List, Optional

from .base import StoredWorkflow, WorkflowId, WorkflowStore


class InMemoryWorkflowStore(WorkflowStore):
    """Store workflows in local memory.

    Useful for tests or when no database is configured. Data is not
    persisted across process restarts.
    """

    def __init__(self) -> None:
        self._workflows: Dict[int, StoredWorkflow] = {}
        self._next_id = 1

    async def insert(self, original_text: str, suggested_steps: List[Any]) -> StoredWorkflow:
        record = StoredWorkflow(
            id=self._next_id,
            original_text=original_text,
            suggested_steps=list(suggested_steps),
        )
        self._workflows[record.id] = record
        self._next_id += 1
        return deepcopy(record)

    async def get(self, workflow_id: WorkflowId) -> Optional[StoredWorkflow]:
        record = self._workflows.get(_as_key(workflow_id))
        return deepcopy(record) if record else None

    async def update_email(self, workflow_id: WorkflowId, user_email: str) -> None:
        record = self._workflows.get(_as_key(workflow_id))
        if record:
            record.user_email = user_email

    def __len__(self) -> int:
        return len(self._workflows)


def _as_key(workflow_id: WorkflowId) -> Optional[int]:
    try:
        return int(workflow_id)
    except (TypeError, ValueError):
        return None
