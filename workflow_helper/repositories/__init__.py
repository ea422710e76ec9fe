"""Workflow persistence backends."""

from __future__ import annotations

from typing import Optional

from workflow_helper.config import Settings
from workflow_helper.db.database import Database
from workflow_helper.errors import ConfigurationError

from .base import StoredWorkflow, WorkflowId, WorkflowStore
from .database import SqlAlchemyWorkflowStore
from .inmemory import InMemoryWorkflowStore
from .supabase import SupabaseWorkflowStore


def build_workflow_store(settings: Settings, database: Optional[Database] = None) -> WorkflowStore:
    """Store selected by settings.storage_backend."""
    if settings.storage_backend == "database":
        if database is None:
            raise ConfigurationError("The database storage backend needs a Database instance")
        return SqlAlchemyWorkflowStore(database.session_maker)
    if settings.storage_backend == "supabase":
        return SupabaseWorkflowStore(
            url=settings.supabase_url,
            service_role_key=settings.supabase_service_role_key,
            table=settings.supabase_table,
            timeout=settings.http_timeout_seconds,
        )
    raise ConfigurationError(f"Unknown storage backend: {settings.storage_backend}")


__all__ = [
    "StoredWorkflow",
    "WorkflowId",
    "WorkflowStore",
    "SqlAlchemyWorkflowStore",
    "InMemoryWorkflowStore",
    "SupabaseWorkflowStore",
    "build_workflow_store",
]
