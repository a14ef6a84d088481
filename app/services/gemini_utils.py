"""Shared helpers for Gemini responses, parsing, and debugging."""

from __future__ import annotations

import base64
import json
import logging
import re
from typing import Any, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


def extract_first_json_value(text: str) -> str:
    """
    Best-effort extraction of a single JSON object/array from a model response.

    Handles:
    - markdown fences
    - leading/trailing prose
    """
    t = (text or "").strip()
    if not t:
        return t

    t = re.sub(r"^```(?:json)?\s*", "", t, flags=re.IGNORECASE | re.MULTILINE)
    t = re.sub(r"\s*```\s*$", "", t, flags=re.MULTILINE).strip()

    if (t.startswith("{") and t.endswith("}")) or (t.startswith("[") and t.endswith("]")):
        return t

    first_obj = t.find("{")
    first_arr = t.find("[")
    if first_obj == -1 and first_arr == -1:
        return t

    start = first_obj
    if start == -1 or (first_arr != -1 and first_arr < start):
        start = first_arr

    end = max(t.rfind("}"), t.rfind("]"))
    if end > start:
        return t[start : end + 1].strip()

    return t


def safe_json_loads(text: str) -> Any:
    """
    Parse a JSON object or array out of model text.
    Raises json.JSONDecodeError if it is still invalid.
    """
    json_text = extract_first_json_value(text)
    try:
        return json.loads(json_text)
    except json.JSONDecodeError:
        # trailing commas: [1,2,] -> [1,2]
        return json.loads(re.sub(r",(\s*[}\]])", r"\1", json_text))


def _first_candidate(response: Any) -> Any:
    candidates = getattr(response, "candidates", None) or []
    return candidates[0] if candidates else None


def iter_response_parts(response: Any) -> Iterator[Any]:
    """Yield the content parts of the first candidate."""
    candidate = _first_candidate(response)
    content = getattr(candidate, "content", None)
    for part in getattr(content, "parts", None) or []:
        yield part


def get_response_text(response: Any) -> str:
    """
    Robust extraction of text from google-genai responses.

    Tries response.text first, then the text parts of the first candidate.
    """
    try:
        t = getattr(response, "text", None)
        if isinstance(t, str) and t.strip():
            return t
    except Exception:
        # .text raises on some non-text candidates; fall through to the parts
        pass

    for part in iter_response_parts(response):
        pt = getattr(part, "text", None)
        if isinstance(pt, str) and pt.strip():
            return pt

    return ""


def find_inline_image(response: Any) -> Optional[Tuple[str, str]]:
    """
    Return (mime_type, base64_data) for the first inline image part, if any.

    The SDK hands inline data back as raw bytes; older payloads may already be
    base64 text.
    """
    for part in iter_response_parts(response):
        inline = getattr(part, "inline_data", None)
        if inline is None or not getattr(inline, "data", None):
            continue
        mime_type = getattr(inline, "mime_type", None) or "image/png"
        data = inline.data
        if isinstance(data, (bytes, bytearray)):
            encoded = base64.b64encode(bytes(data)).decode("ascii")
        else:
            encoded = str(data)
        return mime_type, encoded
    return None


def to_data_uri(mime_type: str, base64_data: str) -> str:
    return f"data:{mime_type};base64,{base64_data}"


def extract_map_places(response: Any) -> List[Tuple[str, str]]:
    """(title, uri) pairs from Google Maps grounding chunks, in response order."""
    candidate = _first_candidate(response)
    metadata = getattr(candidate, "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    places: List[Tuple[str, str]] = []
    for chunk in chunks:
        maps = getattr(chunk, "maps", None)
        if maps is None:
            continue
        title = getattr(maps, "title", None)
        uri = getattr(maps, "uri", None)
        if title and uri:
            places.append((title, uri))
    return places


def response_debug_summary(response: Any) -> Dict[str, Any]:
    """
    Safe, compact debug info (no huge dumps).
    Helps explain "HTTP 200 but empty text".
    """
    out: Dict[str, Any] = {}

    try:
        candidates = getattr(response, "candidates", None) or []
        out["candidates"] = len(candidates)
        if candidates:
            c0 = candidates[0]
            out["finish_reason"] = str(getattr(c0, "finish_reason", None))
            out["has_grounding_metadata"] = getattr(c0, "grounding_metadata", None) is not None
            out["parts"] = sum(1 for _ in iter_response_parts(response))
        feedback = getattr(response, "prompt_feedback", None)
        if feedback is not None:
            out["block_reason"] = str(getattr(feedback, "block_reason", None))
    except Exception as e:
        out["summary_error"] = str(e)

    return out


def log_empty_response(prefix: str, response: Any) -> None:
    summary = response_debug_summary(response)
    logger.warning(f"{prefix} empty response. summary={summary}")
