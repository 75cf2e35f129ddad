"""
Tolerant JSON parsing for language-model output.

Models are asked for JSON only but regularly wrap it in Markdown fences or
surround it with prose. parse_model_json strips the fences, locates the
first balanced object and decodes it; callers validate the shape.
"""
import json
import re
from typing import Any, Dict, Optional

from ..core.logging_config import get_logger

logger = get_logger(__name__)

_FENCE_PATTERN = re.compile(r"```(?:json|JSON)?\s*")


def strip_code_fences(raw: str) -> str:
    """Remove ``` and ```json markers, keeping the enclosed content."""
    return _FENCE_PATTERN.sub("", raw or "").strip()


def find_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced {...} substring of text.

    Braces inside JSON strings (including escaped quotes) are ignored.

    Args:
        text: Text that may contain a JSON object

    Returns:
        The object substring, or None when no balanced object exists
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:index + 1]
        # Unbalanced from this brace; try the next one
        start = text.find("{", start + 1)
    return None


def parse_model_json(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Parse a JSON object out of raw model output.

    Args:
        raw: Model response text

    Returns:
        Decoded dict, or None when nothing parseable is found
    """
    if not raw:
        return None

    candidate = find_json_object(strip_code_fences(raw))
    if candidate is None:
        logger.debug("No JSON object found in model output")
        return None

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.debug(f"Model output JSON decode error: {e}")
        return None

    return parsed if isinstance(parsed, dict) else None
