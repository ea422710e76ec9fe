"""
Tests for the workflow stores: in-memory, SQLAlchemy (SQLite) and Supabase (mocked HTTP)
"""

import json

import httpx
import pytest

from workflow_helper.errors import FETCH_FAILED_MESSAGE, ConfigurationError, StorageError
from workflow_helper.repositories import (
    InMemoryWorkflowStore,
    SqlAlchemyWorkflowStore,
    SupabaseWorkflowStore,
    build_workflow_store,
)

from tests.conftest import make_settings

STEPS = ["Summarize notes", "Draft report", 3]


# ============ In-memory ============

@pytest.mark.asyncio
async def test_inmemory_insert_get_update(memory_store: InMemoryWorkflowStore):
    first = await memory_store.insert("first workflow", STEPS)
    second = await memory_store.insert("second workflow", [])
    assert (first.id, second.id) == (1, 2)

    await memory_store.update_email(1, "a@b.com")
    stored = await memory_store.get(1)
    assert stored.original_text == "first workflow"
    assert stored.suggested_steps == STEPS
    assert stored.user_email == "a@b.com"

    # Overwrite allowed
    await memory_store.update_email("1", "c@d.com")
    assert (await memory_store.get("1")).user_email == "c@d.com"


@pytest.mark.asyncio
async def test_inmemory_unknown_id(memory_store: InMemoryWorkflowStore):
    assert await memory_store.get(99) is None
    assert await memory_store.get("not-a-number") is None


@pytest.mark.asyncio
async def test_inmemory_returns_copies(memory_store: InMemoryWorkflowStore):
    record = await memory_store.insert("wf", ["a"])
    record.suggested_steps.append("mutated")
    assert (await memory_store.get(record.id)).suggested_steps == ["a"]


# ============ SQLAlchemy ============

@pytest.mark.asyncio
async def test_sql_insert_assigns_sequential_ids(sql_store: SqlAlchemyWorkflowStore):
    first = await sql_store.insert("first workflow", STEPS)
    second = await sql_store.insert("second workflow", ["x"])
    assert first.id == 1
    assert second.id == 2
    assert first.user_email is None


@pytest.mark.asyncio
async def test_sql_round_trip_and_email_update(sql_store: SqlAlchemyWorkflowStore):
    record = await sql_store.insert("Draft weekly reports", STEPS)

    await sql_store.update_email(record.id, "a@b.com")
    stored = await sql_store.get(record.id)

    assert stored.original_text == "Draft weekly reports"
    assert stored.suggested_steps == STEPS
    assert stored.user_email == "a@b.com"


@pytest.mark.asyncio
async def test_sql_get_missing(sql_store: SqlAlchemyWorkflowStore):
    assert await sql_store.get(42) is None
    assert await sql_store.get("abc") is None


@pytest.mark.asyncio
async def test_sql_failure_becomes_storage_error(database, sql_store: SqlAlchemyWorkflowStore):
    await database.drop_db()
    with pytest.raises(StorageError):
        await sql_store.insert("wf", ["a"])
    await database.init_db()


# ============ Supabase ============

class FakePostgrest:
    """Minimal PostgREST stand-in backed by a list of rows."""

    def __init__(self):
        self.rows = []
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        params = request.url.params
        if request.method == "POST":
            body = json.loads(request.content)
            row = {"id": len(self.rows) + 1, "user_email": None, **body}
            self.rows.append(row)
            return httpx.Response(201, json=[row])
        row_id = int(params["id"].split(".", 1)[1])
        matches = [r for r in self.rows if r["id"] == row_id]
        if request.method == "GET":
            return httpx.Response(200, json=matches)
        if request.method == "PATCH":
            for r in matches:
                r.update(json.loads(request.content))
            return httpx.Response(204)
        return httpx.Response(405)


def supabase_store(handler) -> SupabaseWorkflowStore:
    return SupabaseWorkflowStore(
        url="https://project.supabase.co/",
        service_role_key="service-key",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_supabase_insert_get_update():
    backend = FakePostgrest()
    store = supabase_store(backend)

    record = await store.insert("Draft weekly reports", STEPS)
    assert record.id == 1

    await store.update_email(record.id, "a@b.com")
    stored = await store.get(record.id)
    assert stored.suggested_steps == STEPS
    assert stored.user_email == "a@b.com"

    insert, patch, get = backend.requests
    assert str(insert.url).startswith("https://project.supabase.co/rest/v1/workflows")
    assert insert.headers["apikey"] == "service-key"
    assert insert.headers["Authorization"] == "Bearer service-key"
    assert insert.headers["Prefer"] == "return=representation"
    assert patch.url.params["id"] == "eq.1"
    assert get.url.params["id"] == "eq.1"


@pytest.mark.asyncio
async def test_supabase_missing_row():
    store = supabase_store(FakePostgrest())
    assert await store.get(7) is None


@pytest.mark.asyncio
async def test_supabase_error_becomes_storage_error():
    store = supabase_store(lambda request: httpx.Response(500, text="db down"))
    with pytest.raises(StorageError) as exc:
        await store.insert("wf", ["a"])
    assert "db down" in exc.value.detail


@pytest.mark.asyncio
async def test_supabase_non_numeric_id_is_not_found():
    backend = FakePostgrest()
    store = supabase_store(backend)
    assert await store.get("abc") is None
    assert await store.get(None) is None
    assert backend.requests == []


@pytest.mark.asyncio
async def test_supabase_fetch_failure_message():
    store = supabase_store(
        lambda request: httpx.Response(400, json={"code": "22P02", "message": "invalid input syntax"})
    )
    with pytest.raises(StorageError) as exc:
        await store.get(3)
    assert exc.value.message == FETCH_FAILED_MESSAGE
    assert exc.value.status_code == 503


# ============ Factory ============

def test_build_store_for_supabase():
    settings = make_settings(
        storage_backend="supabase",
        supabase_url="https://project.supabase.co",
        supabase_service_role_key="k",
    )
    assert isinstance(build_workflow_store(settings), SupabaseWorkflowStore)


def test_build_store_for_database_needs_database():
    with pytest.raises(ConfigurationError):
        build_workflow_store(make_settings())


@pytest.mark.asyncio
async def test_build_store_for_database(database):
    store = build_workflow_store(make_settings(), database)
    assert isinstance(store, SqlAlchemyWorkflowStore)
