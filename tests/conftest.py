"""Shared fixtures: settings, fake generation/email collaborators, database."""

from typing import List, Optional

import pytest
import pytest_asyncio

from workflow_helper.config import Settings
from workflow_helper.db.database import Database
from workflow_helper.errors import UpstreamServiceError
from workflow_helper.repositories import InMemoryWorkflowStore, SqlAlchemyWorkflowStore
from workflow_helper.services.email_service import EmailResult, EmailSender
from workflow_helper.services.llm_service import LLMResponse

STEPS_RESPONSE = (
    '["Summarize notes into bullet points", "Draft report skeleton", '
    '"Highlight risks for review", "Format final document"]'
)

SYSTEM_PROMPT_RESPONSE = (
    "## Role\nYou are an assistant that helps a project manager write status reports.\n"
    "## Context\nThe manager turns raw notes into weekly client reports.\n"
    "## Instructions\nSummarize notes, draft a skeleton, flag risks, format the document.\n"
    "## Constraints\nThe manager reviews and approves everything before it is sent."
)


def make_settings(**overrides) -> Settings:
    values = dict(
        _env_file=None,
        openai_api_key="sk-test",
        database_url="sqlite+aiosqlite:///:memory:",
        storage_backend="database",
        email_provider="resend",
        resend_api_key="re_test",
        from_email="AI Workflow Helper <helper@example.com>",
        instructions_mode="steps",
        log_level="DEBUG",
    )
    values.update(overrides)
    return Settings(**values)


class FakeLLM:
    """Stands in for LLMService; replays queued responses and records prompts."""

    def __init__(self, responses: Optional[List[str]] = None, error: Optional[Exception] = None):
        self.responses = list(responses or [])
        self.error = error
        self.prompts: List[str] = []
        self.temperatures: List[float] = []

    async def complete(self, prompt: str, temperature: float, model: Optional[str] = None) -> LLMResponse:
        self.prompts.append(prompt)
        self.temperatures.append(temperature)
        if self.error:
            raise self.error
        content = self.responses.pop(0)
        return LLMResponse(
            content=content,
            model=model or "fake-model",
            tokens_prompt=10,
            tokens_completion=20,
            tokens_total=30,
            finish_reason="stop",
        )


class FakeEmailSender(EmailSender):
    """Records outgoing messages instead of calling a provider."""

    provider = "fake"

    def __init__(self, fail: bool = False):
        super().__init__(from_email="helper@example.com")
        self.fail = fail
        self.sent: List[dict] = []

    async def send(self, to: str, subject: str, html: str) -> EmailResult:
        if self.fail:
            raise UpstreamServiceError(detail="fake provider rejected the message")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return EmailResult(provider=self.provider, message_id=f"msg-{len(self.sent)}")


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM(responses=[STEPS_RESPONSE])


@pytest.fixture
def fake_email() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture
def memory_store() -> InMemoryWorkflowStore:
    return InMemoryWorkflowStore()


@pytest_asyncio.fixture
async def database(settings: Settings):
    """Create a fresh database for each test"""
    db = Database(settings)
    await db.init_db()
    yield db
    await db.drop_db()
    await db.dispose()


@pytest_asyncio.fixture
async def sql_store(database: Database) -> SqlAlchemyWorkflowStore:
    return SqlAlchemyWorkflowStore(database.session_maker)
