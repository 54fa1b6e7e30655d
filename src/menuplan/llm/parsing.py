"""Helpers for turning free-form generated text into JSON."""

import json
import re
from typing import Any

_FENCE_OPEN = re.compile(r"^```[a-zA-Z0-9_-]*\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


def strip_code_fence(text: str) -> str:
    """Remove a leading ```json fence and the trailing ``` if present."""
    txt = text.strip()
    if txt.startswith("```"):
        txt = _FENCE_OPEN.sub("", txt, count=1)
        txt = _FENCE_CLOSE.sub("", txt, count=1).strip()
    return txt


def parse_json_text(text: str) -> Any:
    """
    Decode JSON from generated text.

    Tolerates code fences and leading/trailing chatter around the outermost
    object or array. Raises ValueError when nothing decodes.
    """
    cleaned = strip_code_fence(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    starts = [i for i in (cleaned.find("{"), cleaned.find("[")) if i >= 0]
    if not starts:
        raise ValueError("no JSON found in generated text")
    start = min(starts)
    end = max(cleaned.rfind("}"), cleaned.rfind("]"))
    if end <= start:
        raise ValueError("no JSON found in generated text")
    try:
        return json.loads(cleaned[start : end + 1])
    except json.JSONDecodeError as e:
        raise ValueError(f"invalid JSON in generated text: {e}") from e
