"""
Instruction delivery - emails the stored steps (or a system prompt built
from them) to the user.

fetch -> best-effort email update -> optional generation -> render -> send.
The email update is bookkeeping and never blocks delivery; generation and
sending are mandatory and abort the request when they fail. Nothing is
retried.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from workflow_helper.config import Settings
from workflow_helper.errors import NotFoundError, StorageError, ValidationError
from workflow_helper.repositories import StoredWorkflow, WorkflowStore
from workflow_helper.services.email_renderer import render_steps_email, render_system_prompt_email
from workflow_helper.services.email_service import EmailResult, EmailSender
from workflow_helper.services.llm_service import LLMService
from workflow_helper.services.prompt_builder import build_system_prompt_request

logger = logging.getLogger(__name__)


@dataclass
class DeliveryResult:
    workflow_id: Any
    message_id: Optional[str]
    enriched: bool


class InstructionDeliveryService:
    def __init__(
        self,
        settings: Settings,
        llm: LLMService,
        store: WorkflowStore,
        email_sender: EmailSender,
    ):
        self.settings = settings
        self.llm = llm
        self.store = store
        self.email_sender = email_sender

    async def deliver(self, user_email: Optional[str], workflow_id: Any) -> DeliveryResult:
        if not user_email or workflow_id is None or workflow_id == "":
            raise ValidationError("Email and Workflow ID are required.")

        logger.info(f"Delivering instructions for workflow {workflow_id}")

        workflow = await self.store.get(workflow_id)
        if workflow is None:
            raise NotFoundError(detail=f"Workflow with ID {workflow_id} not found.")

        await self._record_email(workflow, user_email)

        if self.settings.enrich_instructions:
            system_prompt = await self._synthesize_system_prompt(workflow)
            html = render_system_prompt_email(
                workflow.original_text, workflow.suggested_steps, system_prompt
            )
        else:
            html = render_steps_email(workflow.original_text, workflow.suggested_steps)

        result: EmailResult = await self.email_sender.send(
            to=user_email,
            subject=self.settings.email_subject,
            html=html,
        )
        logger.info(f"Instructions for workflow {workflow.id} sent via {result.provider} ({result.message_id})")

        return DeliveryResult(
            workflow_id=workflow.id,
            message_id=result.message_id,
            enriched=self.settings.enrich_instructions,
        )

    async def _record_email(self, workflow: StoredWorkflow, user_email: str) -> None:
        # A later delivery for the same workflow overwrites the stored address
        try:
            await self.store.update_email(workflow.id, user_email)
        except StorageError as e:
            logger.warning(f"DB email update failed for workflow {workflow.id} (continuing anyway): {e.detail}")
        except Exception:
            logger.warning(f"DB email update failed for workflow {workflow.id} (continuing anyway)", exc_info=True)
        else:
            logger.info(f"Updated email for workflow {workflow.id}")

    async def _synthesize_system_prompt(self, workflow: StoredWorkflow) -> str:
        steps = workflow.suggested_steps if isinstance(workflow.suggested_steps, list) else []
        prompt = build_system_prompt_request(workflow.original_text, steps)
        response = await self.llm.complete(prompt, temperature=self.settings.instructions_temperature)
        return response.content.strip()
