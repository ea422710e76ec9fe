"""
Step extraction - recovers the JSON array of suggested steps from model text.

Models are asked for a bare JSON array but regularly wrap it in a markdown
code fence or surround it with prose. The extractor tolerates both and
rejects anything that does not decode to a JSON array.
"""

import json
import logging
import re
from typing import Any, Iterable, List

from workflow_helper.errors import MalformedResponse

logger = logging.getLogger(__name__)

# A fenced block (optional "json" tag) anywhere in the text wins over a bare
# bracketed array, which is only searched for when no fence is present.
FENCE_PATTERN = re.compile(r"```(?:json)?\n([\s\S]*?)\n```")
BARE_ARRAY_PATTERN = re.compile(r"(\[.*?\])")


def _looks_like_array(text: str) -> bool:
    return text.startswith("[") and text.endswith("]")


def extract_steps(raw_text: str) -> List[Any]:
    """
    Extract the list of steps from a generation response.

    Args:
        raw_text: The text content returned by the generation API

    Returns:
        The decoded array, order preserved. Elements are returned as decoded;
        use ``coerce_steps`` before rendering them.

    Raises:
        MalformedResponse: if no JSON array can be recovered
    """
    if raw_text is None:
        raise MalformedResponse("", "empty response")

    text = raw_text.strip()

    if _looks_like_array(text):
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            # Brackets but not valid JSON as a whole; fall back to the search
            logger.debug("Direct array parse failed, searching for embedded array")
        else:
            return _require_list(parsed, raw_text)

    match = FENCE_PATTERN.search(text) or BARE_ARRAY_PATTERN.search(text)
    if not match:
        raise MalformedResponse(raw_text, "no JSON array found")

    candidate = match.group(1)
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise MalformedResponse(raw_text, f"invalid JSON: {e.msg}") from e

    return _require_list(parsed, raw_text)


def _require_list(parsed: Any, raw_text: str) -> List[Any]:
    if not isinstance(parsed, list):
        raise MalformedResponse(raw_text, f"expected a JSON array, got {type(parsed).__name__}")
    return parsed


def coerce_steps(steps: Iterable[Any]) -> List[str]:
    """String form of every step, for display and email paths."""
    return [step if isinstance(step, str) else _to_text(step) for step in steps]


def _to_text(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)
