from workflow_helper.services.step_extractor import extract_steps, coerce_steps
from workflow_helper.services.llm_service import LLMService, LLMResponse
from workflow_helper.services.email_service import (
    EmailSender, EmailResult, ResendEmailSender, MailgunEmailSender, build_email_sender
)
from workflow_helper.services.submission_service import WorkflowSubmissionService, SubmissionResult
from workflow_helper.services.delivery_service import InstructionDeliveryService, DeliveryResult

__all__ = [
    "extract_steps",
    "coerce_steps",
    "LLMService",
    "LLMResponse",
    "EmailSender",
    "EmailResult",
    "ResendEmailSender",
    "MailgunEmailSender",
    "build_email_sender",
    "WorkflowSubmissionService",
    "SubmissionResult",
    "InstructionDeliveryService",
    "DeliveryResult",
]
