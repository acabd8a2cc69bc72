from __future__ import annotations  # Re-export llm_gateway public API

from .errors import LlmGatewayError, MalformedResponseError, UpstreamError
from .json_extract import extract_json_slice, parse_json_object_or_array, strip_code_fences
from .llm_gateway import HttpClient, HttpResponse, call_json, complete
from .retry import with_retry

__all__ = [
    "HttpClient",
    "HttpResponse",
    "LlmGatewayError",
    "MalformedResponseError",
    "UpstreamError",
    "call_json",
    "complete",
    "extract_json_slice",
    "parse_json_object_or_array",
    "strip_code_fences",
    "with_retry",
]
