"""Parsing of JSON-object completions."""

import json
from typing import Any, Dict, Optional

_FENCE = "```"


def _fenced_block(content: str) -> Optional[str]:
    start = content.find(_FENCE + "json")
    offset = len(_FENCE) + 4
    if start == -1:
        start = content.find(_FENCE)
        offset = len(_FENCE)
    if start == -1:
        return None
    start += offset
    end = content.find(_FENCE, start)
    if end == -1:
        return None
    return content[start:end].strip()


def parse_completion_json(content: Optional[str]) -> Dict[str, Any]:
    """Parse a completion body that should be a single JSON object.

    Accepts bare JSON or JSON wrapped in a markdown code fence. Raises
    ValueError when no JSON object can be read.
    """
    if content is None or not content.strip():
        raise ValueError("empty completion content")
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        block = _fenced_block(content)
        if block is None:
            raise ValueError(f"invalid JSON: {exc.msg}") from exc
        try:
            data = json.loads(block)
        except json.JSONDecodeError as inner:
            raise ValueError(f"invalid JSON in code block: {inner.msg}") from inner
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data
