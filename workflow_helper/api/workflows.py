"""
Workflow endpoints

POST /process-workflow  : suggest AI steps for a workflow and store them
POST /send-instructions : email the stored steps / system prompt to the user

Each route owns its failure boundary: known errors map to their status and
public message, anything else to a generic 500. The response body is always
JSON in the endpoint's envelope.

Failures keep distinct statuses (400 invalid input, 404 unknown workflow,
502 generation or email provider, 503 storage) rather than a blanket 500 on
the delivery path. Clients that only check for a 2xx status are unaffected.
"""

import logging
from typing import Any, List, Optional, Union

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from workflow_helper.errors import WorkflowHelperError
from workflow_helper.services.delivery_service import InstructionDeliveryService
from workflow_helper.services.submission_service import WorkflowSubmissionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Workflows"])

GENERIC_ERROR = "Internal server error"


# ── Schemas ───────────────────────────────────────────────────────────────

class ProcessWorkflowRequest(BaseModel):
    workflow_text: Optional[str] = None


class ProcessWorkflowResponse(BaseModel):
    workflowId: Union[int, str]
    steps: List[Any]


class SendInstructionsRequest(BaseModel):
    user_email: Optional[str] = None
    workflow_id: Optional[Union[int, str]] = None


class SendInstructionsResponse(BaseModel):
    success: bool = True
    message: str = "Instructions sent successfully!"


# ── Dependencies ──────────────────────────────────────────────────────────

def get_submission_service(request: Request) -> WorkflowSubmissionService:
    return request.app.state.submission_service


def get_delivery_service(request: Request) -> InstructionDeliveryService:
    return request.app.state.delivery_service


# ── Error envelopes ───────────────────────────────────────────────────────

def submission_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def delivery_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def error_for_path(path: str, status_code: int, message: str) -> JSONResponse:
    if path.rstrip("/").endswith("/send-instructions"):
        return delivery_error(status_code, message)
    return submission_error(status_code, message)


def _log_failure(route: str, exc: Exception):
    if isinstance(exc, WorkflowHelperError):
        level = logging.WARNING if exc.status_code < 500 else logging.ERROR
        logger.log(level, f"{route} failed ({exc.status_code}): {exc.message}")
        if exc.detail:
            logger.log(level, f"{route} detail: {exc.detail}")
    else:
        logger.exception(f"Unexpected error in {route}")


def _allowed_origin(request: Request, origins: List[str]) -> str:
    # The header takes a single origin or "*"
    if "*" in origins:
        return "*"
    origin = request.headers.get("origin")
    return origin if origin in origins else origins[0]


def _preflight(request: Request) -> PlainTextResponse:
    settings = request.app.state.settings
    return PlainTextResponse(
        "ok",
        headers={
            "Access-Control-Allow-Origin": _allowed_origin(request, settings.cors_origins),
            "Vary": "Origin",
            "Access-Control-Allow-Headers": ", ".join(settings.cors_allow_headers),
            "Access-Control-Allow-Methods": ", ".join(settings.cors_allow_methods),
        },
    )


# ── Endpoints ─────────────────────────────────────────────────────────────

@router.options("/process-workflow", include_in_schema=False)
async def process_workflow_preflight(request: Request):
    return _preflight(request)


@router.post("/process-workflow", response_model=ProcessWorkflowResponse)
async def process_workflow(
    body: ProcessWorkflowRequest,
    service: WorkflowSubmissionService = Depends(get_submission_service),
):
    """Suggest AI assistance steps for a workflow and store them."""
    try:
        result = await service.submit(body.workflow_text)
    except WorkflowHelperError as e:
        _log_failure("process-workflow", e)
        return submission_error(e.status_code, e.message)
    except Exception as e:
        _log_failure("process-workflow", e)
        return submission_error(500, GENERIC_ERROR)

    return ProcessWorkflowResponse(workflowId=result.workflow_id, steps=result.steps)


@router.options("/send-instructions", include_in_schema=False)
async def send_instructions_preflight(request: Request):
    return _preflight(request)


@router.post("/send-instructions", response_model=SendInstructionsResponse)
async def send_instructions(
    body: SendInstructionsRequest,
    service: InstructionDeliveryService = Depends(get_delivery_service),
):
    """Email the instructions for a stored workflow."""
    try:
        await service.deliver(body.user_email, body.workflow_id)
    except WorkflowHelperError as e:
        _log_failure("send-instructions", e)
        return delivery_error(e.status_code, e.message)
    except Exception as e:
        _log_failure("send-instructions", e)
        return delivery_error(500, GENERIC_ERROR)

    return SendInstructionsResponse()
