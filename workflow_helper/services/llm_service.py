"""
LLM Service - OpenAI API wrapper for chat completions

Provides:
- Single-prompt chat completion with token usage
- Mapping of OpenAI failures to UpstreamServiceError
- One attempt per call: the client is built with retries disabled and an
  explicit timeout
"""

import logging
from dataclasses import dataclass
from typing import Optional

from openai import AsyncOpenAI, APIConnectionError, APIError, APIStatusError, APITimeoutError

from workflow_helper.config import Settings
from workflow_helper.errors import UpstreamServiceError

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Response from LLM completion"""
    content: str
    model: str
    tokens_prompt: int
    tokens_completion: int
    tokens_total: int
    finish_reason: Optional[str]


class LLMService:
    """
    OpenAI LLM Service for the two generation calls.

    The OpenAI client can be injected for tests; otherwise one is built from
    settings.
    """

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None):
        self.client = client or AsyncOpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url or None,
            timeout=settings.http_timeout_seconds,
            max_retries=0,
        )
        self.default_model = settings.generation_model

    async def complete(
        self,
        prompt: str,
        temperature: float,
        model: Optional[str] = None,
    ) -> LLMResponse:
        """
        Generate a chat completion for a single user prompt.

        Args:
            prompt: The user message content
            temperature: Sampling temperature (0-2)
            model: Model to use (defaults to settings.generation_model)

        Returns:
            LLMResponse with content and token usage

        Raises:
            UpstreamServiceError: on transport failure, non-success status or
                an empty completion
        """
        model = model or self.default_model

        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
            )
        except APIStatusError as e:
            logger.error(f"OpenAI API error: {e.status_code} {e.message}")
            raise UpstreamServiceError(
                detail=f"OpenAI API request failed with status {e.status_code}: {e.message}"
            ) from e
        except APITimeoutError as e:
            logger.error(f"OpenAI API timed out: {e}")
            raise UpstreamServiceError(detail="OpenAI API request timed out") from e
        except APIConnectionError as e:
            logger.error(f"OpenAI connection error: {e}")
            raise UpstreamServiceError(detail=f"OpenAI connection error: {e}") from e
        except APIError as e:
            logger.error(f"OpenAI API error: {e}")
            raise UpstreamServiceError(detail=f"OpenAI API error: {e}") from e

        if not response.choices:
            raise UpstreamServiceError(detail="No choices in OpenAI response")

        choice = response.choices[0]
        content = choice.message.content if choice.message else None
        if not content:
            raise UpstreamServiceError(detail="No content in OpenAI response")

        usage = response.usage
        logger.info(
            f"Completion from {response.model}: "
            f"{usage.total_tokens if usage else 0} tokens, finish={choice.finish_reason}"
        )

        return LLMResponse(
            content=content,
            model=response.model,
            tokens_prompt=usage.prompt_tokens if usage else 0,
            tokens_completion=usage.completion_tokens if usage else 0,
            tokens_total=usage.total_tokens if usage else 0,
            finish_reason=choice.finish_reason,
        )
