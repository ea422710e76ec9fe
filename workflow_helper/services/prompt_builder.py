"""
Prompt Builder - Constructs the generation prompts

Two prompts are sent to the generation API:
1. Step suggestion: break a workflow into a fixed number of ways an AI
   assistant can help with it, answered as a bare JSON array
2. System prompt synthesis: turn the stored steps into a structured document
   (Role, Context, Instructions, Constraints) for configuring an assistant

Both keep the assistant in a supporting role: it helps the person doing the
work and never takes the work over.
"""

import json
from typing import Any, Sequence

from workflow_helper.services.step_extractor import coerce_steps

SYSTEM_PROMPT_SECTIONS = ("Role", "Context", "Instructions", "Constraints")


def build_steps_prompt(workflow_text: str, step_count: int = 4) -> str:
    """Prompt asking for exactly ``step_count`` assistance steps as a JSON array."""
    example = json.dumps([f"Step {i} description" for i in range(1, step_count + 1)])

    return (
        "Analyze the following user-described workflow and break it down into "
        f"exactly {step_count} distinct, actionable steps describing how an AI "
        "assistant could help the person carry out this workflow. Each step must "
        "describe the AI supporting the person (drafting, summarizing, checking, "
        "suggesting), not replacing them or doing the work without their review. "
        "Respond ONLY with a JSON array of strings, where each string is a step. "
        "Do not include any other text, explanation or markdown formatting. "
        f"Example response: {example}. "
        f"Workflow: \"{workflow_text}\""
    )


def build_system_prompt_request(original_text: str, steps: Sequence[Any]) -> str:
    """Prompt asking the model to write a system prompt document from the steps."""
    step_lines = "\n".join(
        f"{i}. {step}" for i, step in enumerate(coerce_steps(steps), start=1)
    ) or "(no specific steps were suggested)"

    sections = "\n".join(f"## {name}" for name in SYSTEM_PROMPT_SECTIONS)

    return (
        "You are writing a system prompt that will configure an AI assistant. "
        "The assistant supports a person who performs the workflow below. It "
        "helps them work faster and better; it never replaces them, never acts "
        "on their behalf without review, and always leaves final decisions to "
        "the person.\n\n"
        f"Workflow described by the user:\n\"{original_text}\"\n\n"
        f"Ways the assistant can help:\n{step_lines}\n\n"
        "Write the system prompt in plain text using exactly these sections, "
        "in this order, each starting with its heading:\n"
        f"{sections}\n\n"
        "Role: who the assistant is and that it assists the person.\n"
        "Context: the workflow and what the person is trying to achieve.\n"
        "Instructions: concrete guidance covering each of the ways listed above.\n"
        "Constraints: limits that keep the person in control and the output "
        "reviewable.\n"
        "Respond with the system prompt only."
    )
