"""HTML email bodies. Every interpolated value is escaped."""

from html import escape
from typing import Any, Optional

from workflow_helper.services.step_extractor import coerce_steps


def _esc(value: Any) -> str:
    return escape(value if isinstance(value, str) else str(value), quote=True)


def render_steps_html(steps: Any) -> str:
    """Unordered list of steps; handles empty and non-list values."""
    if not isinstance(steps, list):
        return "<ul><li>Could not retrieve specific steps.</li></ul>"
    if not steps:
        return "<p>No specific AI steps were suggested for this workflow.</p>"

    items = "".join(f"<li>{_esc(step)}</li>" for step in coerce_steps(steps))
    return f"<ul>{items}</ul>"


def render_steps_email(original_text: Optional[str], steps: Any) -> str:
    """Simple variant: the original workflow followed by the suggested steps."""
    return f"""
      <h1>Your AI Workflow Instructions</h1>
      <p>Hi there,</p>
      <p>Here are the AI-suggested steps based on your workflow:</p>
      <p><strong>Original Workflow:</strong></p>
      <p>{_esc(original_text or "")}</p>
      <p><strong>Suggested AI Steps:</strong></p>
      {render_steps_html(steps)}
      <p>Use these steps to guide your AI implementation.</p>
      <p>Best regards,<br>Your AI Workflow Helper</p>
    """


def render_system_prompt_email(original_text: Optional[str], steps: Any, system_prompt: str) -> str:
    """Enriched variant: the synthesized system prompt plus the steps it came from."""
    return f"""
      <h1>Your AI Assistant System Prompt</h1>
      <p>Hi there,</p>
      <p>Below is a system prompt you can paste into your AI assistant. It sets the
      assistant up to help you with your workflow while you stay in charge.</p>
      <p><strong>Original Workflow:</strong></p>
      <p>{_esc(original_text or "")}</p>
      <p><strong>System Prompt:</strong></p>
      <pre style="white-space: pre-wrap; font-family: inherit;">{_esc(system_prompt)}</pre>
      <p><strong>Suggested AI Steps:</strong></p>
      {render_steps_html(steps)}
      <p>Best regards,<br>Your AI Workflow Helper</p>
    """
