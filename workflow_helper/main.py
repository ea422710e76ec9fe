"""
AI Workflow Helper - Application Entry Point

Usage:
    uvicorn workflow_helper.main:create_app --factory --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from workflow_helper.api import workflows_router
from workflow_helper.api.workflows import error_for_path
from workflow_helper.config import Settings, get_settings
from workflow_helper.db.database import Database
from workflow_helper.logging_config import generate_request_id, request_id_var, setup_logging
from workflow_helper.repositories import WorkflowStore, build_workflow_store
from workflow_helper.services.delivery_service import InstructionDeliveryService
from workflow_helper.services.email_service import EmailSender, build_email_sender
from workflow_helper.services.llm_service import LLMService
from workflow_helper.services.submission_service import WorkflowSubmissionService

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[WorkflowStore] = None,
    llm: Optional[LLMService] = None,
    email_sender: Optional[EmailSender] = None,
) -> FastAPI:
    """
    Build the application.

    Configuration is validated here, before anything is served. Collaborators
    default to the ones described by ``settings``; tests pass their own.
    """
    settings = settings or get_settings()
    settings.validate_required()
    setup_logging(settings.log_level, settings.log_json)

    database: Optional[Database] = None
    if store is None:
        if settings.storage_backend == "database":
            database = Database(settings)
        store = build_workflow_store(settings, database)
    llm = llm or LLMService(settings)
    email_sender = email_sender or build_email_sender(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler - runs on startup and shutdown"""
        logger.info(f"{settings.app_name} starting up (storage={settings.storage_backend}, "
                    f"email={settings.email_provider}, mode={settings.instructions_mode})")
        if database is not None:
            await database.init_db()
            logger.info("Database initialized")
        yield
        if database is not None:
            await database.dispose()
        logger.info(f"{settings.app_name} shut down")

    app = FastAPI(
        title=settings.app_name,
        description="Suggests AI assistance steps for a workflow and emails instructions",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.submission_service = WorkflowSubmissionService(settings, llm, store)
    app.state.delivery_service = InstructionDeliveryService(settings, llm, store, email_sender)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or generate_request_id()
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        logger.warning(f"Rejected request body for {request.url.path}: {exc.errors()}")
        return error_for_path(request.url.path, 400, "Request body must be valid JSON with the expected fields.")

    app.include_router(workflows_router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "app": settings.app_name}

    return app
