"""Extract the JSON payload from free-form LLM replies.

Models frequently wrap the requested JSON in markdown fences or add a sentence
before or after it. The extraction here is deliberately lenient: it slices from
the first opening bracket to the *last* matching closing bracket in the text
rather than scanning for balanced nesting. Replies that contain several
top-level JSON fragments can therefore be mis-sliced, in which case the slice
fails to parse and :class:`MalformedResponseError` is raised.
"""
from __future__ import annotations

import json
import re
from typing import Any

from .errors import MalformedResponseError

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers and surrounding whitespace."""

    return _FENCE_RE.sub("", text or "").strip()


def extract_json_slice(text: str) -> str:
    """Return the bracketed JSON substring of ``text``.

    An object is preferred when its ``{`` opens before the first ``[``.
    """

    cleaned = strip_code_fences(text)
    obj_start = cleaned.find("{")
    obj_end = cleaned.rfind("}")
    arr_start = cleaned.find("[")
    arr_end = cleaned.rfind("]")

    if obj_start != -1 and obj_end > obj_start and (arr_start == -1 or obj_start < arr_start):
        return cleaned[obj_start : obj_end + 1]
    if arr_start != -1 and arr_end > arr_start:
        return cleaned[arr_start : arr_end + 1]
    raise MalformedResponseError("No JSON object or array found in LLM reply")


def parse_json_object_or_array(text: str) -> Any:
    """Parse the JSON object or array embedded in an LLM reply."""

    candidate = extract_json_slice(text)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"LLM reply is not valid JSON: {exc.msg}") from exc


__all__ = ["extract_json_slice", "parse_json_object_or_array", "strip_code_fences"]
