"""
Workflow submission - turns a workflow description into stored AI steps.

generation API -> step extraction -> insert. Persistence is the last step,
so a failure anywhere earlier leaves no record behind.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from workflow_helper.config import Settings
from workflow_helper.errors import MalformedResponse, UpstreamServiceError, ValidationError
from workflow_helper.repositories import WorkflowId, WorkflowStore
from workflow_helper.services.llm_service import LLMService
from workflow_helper.services.prompt_builder import build_steps_prompt
from workflow_helper.services.step_extractor import extract_steps

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    workflow_id: WorkflowId
    steps: List[Any]


class WorkflowSubmissionService:
    def __init__(self, settings: Settings, llm: LLMService, store: WorkflowStore):
        self.settings = settings
        self.llm = llm
        self.store = store

    def _validate(self, workflow_text: Optional[str]) -> str:
        if not isinstance(workflow_text, str) or not workflow_text.strip():
            raise ValidationError("Workflow text is required.")
        if len(workflow_text) > self.settings.max_workflow_chars:
            raise ValidationError(
                f"Workflow text is too long (maximum {self.settings.max_workflow_chars} characters)."
            )
        return workflow_text

    async def submit(self, workflow_text: Optional[str]) -> SubmissionResult:
        workflow_text = self._validate(workflow_text)
        logger.info(f"Processing workflow ({len(workflow_text)} chars)")

        prompt = build_steps_prompt(workflow_text, self.settings.step_count)
        response = await self.llm.complete(prompt, temperature=self.settings.steps_temperature)

        try:
            steps = extract_steps(response.content)
        except MalformedResponse as e:
            logger.error(f"Failed to parse model response as JSON array: {e.reason}")
            logger.error(f"Raw model response content: {e.raw_text!r}")
            raise UpstreamServiceError(
                message="Could not parse steps from AI response.",
                detail=f"{e.reason}: {e.raw_text}",
            ) from e

        logger.info(f"Parsed {len(steps)} suggested steps")

        record = await self.store.insert(workflow_text, steps)
        logger.info(f"Saved workflow {record.id}")
        return SubmissionResult(workflow_id=record.id, steps=steps)
