import re
import json
import logging
from typing import Any, Dict, Optional
from reposhow.errors import MalformedGenerationError

logger = logging.getLogger(__name__)

FENCE_PATTERN = re.compile(r"```json\n?|```\n?")
# Greedy: first '{' through the last '}'
OBJECT_SPAN_PATTERN = re.compile(r"\{.*\}", re.DOTALL)

MALFORMED_MESSAGE = "Failed to generate properly formatted presentation content"


def has_outline_shape(data: Any) -> bool:
    return (
        isinstance(data, dict)
        and bool(data.get("title"))
        and bool(data.get("overview"))
        and isinstance(data.get("sections"), list)
    )


def _parse_fenced(text: str) -> Optional[Dict[str, Any]]:
    """
    Stage 1: drop code fences, parse the remainder, and require the outline shape.
    """
    cleaned = FENCE_PATTERN.sub("", text).strip()
    try:
        data = json.loads(cleaned)
    except ValueError:
        return None
    return data if has_outline_shape(data) else None


def _parse_embedded(text: str) -> Optional[Dict[str, Any]]:
    """
    Stage 2: parse the outermost brace span found anywhere in the text.
    The shape is deliberately not re-checked here.
    """
    match = OBJECT_SPAN_PATTERN.search(text)
    if not match:
        return None
    try:
        data = json.loads(match.group(0))
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    if not has_outline_shape(data):
        logger.warning("Accepted a run of show without title/overview/sections from the fallback parser")
    return data


def parse_run_of_show(raw_text: str) -> Dict[str, Any]:
    """
    Turns the model's free-text reply into the outline dict.
    Raises MalformedGenerationError when neither stage yields a JSON object.
    """
    for stage in (_parse_fenced, _parse_embedded):
        data = stage(raw_text)
        if data is not None:
            return data
    raise MalformedGenerationError(MALFORMED_MESSAGE)
