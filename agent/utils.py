"""Helpers for turning chat model output into structured data."""

from __future__ import annotations

import json
import re
from typing import Any, Iterable, Mapping

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class JSONExtractionError(ValueError):
    """Raised when a model response holds no parsable JSON object."""


def coerce_content_to_text(content: Any) -> str:
    """Convert structured message content into plain text."""

    if isinstance(content, str):
        return content

    if isinstance(content, Iterable) and not isinstance(content, (dict, bytes, str)):
        # LangChain's list-of-blocks format (e.g. [{"type": "text", "text": "..."}])
        parts = []
        for item in content:
            if isinstance(item, Mapping):
                text = item.get("text")
                if text:
                    parts.append(str(text))
            else:
                parts.append(str(item))
        if parts:
            return "\n".join(parts)

    try:
        return json.dumps(content, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(content)


def extract_json_object(text: str) -> dict[str, Any]:
    """Return the first JSON object in `text`, tolerating Markdown fences and preambles."""

    cleaned = _FENCE_RE.sub("", text.strip())
    if not cleaned.startswith("{"):
        match = _OBJECT_RE.search(cleaned)
        if not match:
            raise JSONExtractionError("Response does not contain a JSON object")
        cleaned = match.group(0)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise JSONExtractionError(f"Response JSON is malformed: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise JSONExtractionError("Response JSON is not an object")
    return data


def to_prompt_json(payload: Any) -> str:
    """Serialize prompt data, rendering datetimes and other objects as strings."""

    return json.dumps(payload, indent=2, default=str, ensure_ascii=False)
