"""Supabase (PostgREST over HTTP) implementation of the workflow store."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from workflow_helper.errors import FETCH_FAILED_MESSAGE, StorageError

from .base import StoredWorkflow, WorkflowId, WorkflowStore

logger = logging.getLogger(__name__)

COLUMNS = "id,original_workflow,suggested_steps,user_email"


def _to_stored(row: Dict[str, Any]) -> StoredWorkflow:
    return StoredWorkflow(
        id=row["id"],
        original_text=row.get("original_workflow") or "",
        suggested_steps=row.get("suggested_steps"),
        user_email=row.get("user_email"),
    )


class SupabaseWorkflowStore(WorkflowStore):
    """Talk to a Supabase table with the service-role key.

    The service-role key bypasses row level security, so this store must only
    run server-side.
    """

    def __init__(
        self,
        url: str,
        service_role_key: str,
        table: str = "workflows",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        self._headers = {
            "apikey": service_role_key,
            "Authorization": f"Bearer {service_role_key}",
            "Content-Type": "application/json",
        }
        self._timeout = timeout
        self._transport = transport

    async def _request(self, method: str, message: Optional[str] = None, **kwargs) -> httpx.Response:
        headers = {**self._headers, **kwargs.pop("headers", {})}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.request(method, self._endpoint, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Supabase {method} failed: {e!r}")
            raise StorageError(message, detail=f"Supabase {method} transport error: {e!r}") from e

        if not response.is_success:
            logger.error(f"Supabase {method} error: {response.status_code} {response.text[:500]}")
            raise StorageError(
                message,
                detail=f"Supabase {method} failed: {response.status_code} - {response.text}"
            )
        return response

    async def insert(self, original_text: str, suggested_steps: List[Any]) -> StoredWorkflow:
        response = await self._request(
            "POST",
            params={"select": COLUMNS},
            headers={"Prefer": "return=representation"},
            json={"original_workflow": original_text, "suggested_steps": list(suggested_steps)},
        )
        rows = response.json()
        if not rows or "id" not in rows[0]:
            raise StorageError(detail="Failed to retrieve ID after inserting into database.")
        return _to_stored(rows[0])

    async def get(self, workflow_id: WorkflowId) -> Optional[StoredWorkflow]:
        try:
            key = int(workflow_id)
        except (TypeError, ValueError):
            return None

        response = await self._request(
            "GET",
            FETCH_FAILED_MESSAGE,
            params={"id": f"eq.{key}", "select": COLUMNS},
        )
        rows = response.json()
        return _to_stored(rows[0]) if rows else None

    async def update_email(self, workflow_id: WorkflowId, user_email: str) -> None:
        await self._request(
            "PATCH",
            params={"id": f"eq.{workflow_id}"},
            headers={"Prefer": "return=minimal"},
            json={"user_email": user_email},
        )
