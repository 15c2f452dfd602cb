"""
Parsing of server-sent event lines.

OpenAI-compatible endpoints stream `data: <json>` lines terminated by
`data: [DONE]`. Line assembly and UTF-8 decoding are left to httpx
(`Response.aiter_lines`); these helpers only interpret single lines.
"""

import json
from typing import Any, Dict, Optional

from ..exceptions import StreamParseError

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


def is_done_line(line: str) -> bool:
    """True for the `data: [DONE]` terminator."""
    stripped = line.strip()
    return stripped.startswith(DATA_PREFIX) and stripped[len(DATA_PREFIX):].strip() == DONE_SENTINEL


def parse_data_line(line: str) -> Optional[Dict[str, Any]]:
    """
    Parse one SSE line into its JSON payload.

    Args:
        line: Decoded line

    Returns:
        The JSON object for `data:` lines, None for lines that carry no data
        (blank lines, comments, other fields)

    Raises:
        StreamParseError: If a `data:` line does not hold a JSON object
    """
    stripped = line.strip()
    if not stripped.startswith(DATA_PREFIX):
        return None

    body = stripped[len(DATA_PREFIX):].strip()
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as e:
        raise StreamParseError(f"Malformed stream line: {body[:80]!r} ({e})")
    if not isinstance(payload, dict):
        raise StreamParseError(f"Unexpected stream payload: {body[:80]!r}")
    return payload


def extract_delta_content(payload: Dict[str, Any]) -> str:
    """Return `choices[0].delta.content`, or an empty string when absent."""
    choices = payload.get("choices") or []
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    delta = choices[0].get("delta")
    if not isinstance(delta, dict):
        return ""
    content = delta.get("content")
    return content if isinstance(content, str) else ""
