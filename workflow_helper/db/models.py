"""
Database models for the workflow helper

A single table holds each submitted workflow, the steps suggested for it and
the email address the instructions were last sent to.
"""

from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class WorkflowRecord(Base):
    """A submitted workflow and its suggested AI steps."""
    __tablename__ = "workflows"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    original_workflow: Mapped[str] = mapped_column(Text, nullable=False)
    suggested_steps: Mapped[List[Any]] = mapped_column(JSON, nullable=False, default=list)
    user_email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)  # Set on delivery
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<WorkflowRecord id={self.id} steps={len(self.suggested_steps or [])}>"
