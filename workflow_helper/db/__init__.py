from workflow_helper.db.models import Base, WorkflowRecord
from workflow_helper.db.database import Database, create_engine_from_settings

__all__ = [
    "Base",
    "WorkflowRecord",
    "Database",
    "create_engine_from_settings",
]
