"""Storage abstraction for workflow records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Union

WorkflowId = Union[int, str]


@dataclass
class StoredWorkflow:
    """Storage-independent view of a persisted workflow."""

    id: WorkflowId
    original_text: str
    suggested_steps: List[Any] = field(default_factory=list)
    user_email: Optional[str] = None


class WorkflowStore(Protocol):
    """Protocol for workflow persistence backends."""

    async def insert(self, original_text: str, suggested_steps: List[Any]) -> StoredWorkflow:
        """Persist a new workflow and return it with its generated id."""

    async def get(self, workflow_id: WorkflowId) -> Optional[StoredWorkflow]:
        """Retrieve the workflow by id, or None when it does not exist."""

    async def update_email(self, workflow_id: WorkflowId, user_email: str) -> None:
        """Record the email address the instructions are sent to."""
