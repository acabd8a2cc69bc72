from __future__ import annotations  # LLM request gateway module

import logging
import os
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

from config import LlmRoute
from observability import span
from .errors import MalformedResponseError, UpstreamError
from .json_extract import parse_json_object_or_array


logger = logging.getLogger(__name__)  # Module logger setup


class HttpClient(Protocol):  # Minimal HTTP client protocol
    def post(self, url: str, *, json: Dict[str, Any], headers: Dict[str, str], timeout: float) -> "HttpResponse": ...


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    def json(self) -> Any: ...

    @property
    def text(self) -> str: ...


def complete(
    prompt: str,
    operation: str,
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
) -> str:  # Send a single-message chat completion and return the raw reply text
    payload: Dict[str, Any] = {
        "model": cfg.model,
        "messages": [{"role": "user", "content": prompt}],
        "max_tokens": cfg.max_tokens,
    }
    headers = {"Content-Type": "application/json"}
    if cfg.api_key_env:
        api_key = os.getenv(cfg.api_key_env)
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
    headers.update(cfg.extra_headers)
    logger.info("[%s] Starting LLM request route=%s model=%s", operation, cfg.name, cfg.model)
    with span() as watch:
        try:
            response, close_cb = _post(f"{cfg.base_url}{cfg.endpoint}", payload, headers, cfg.timeout_s, client)
        except Exception as exc:  # noqa: BLE001
            logger.error("[%s] LLM transport failure: %s", operation, exc)
            raise UpstreamError(f"{operation}: LLM transport failed") from exc
        try:
            if not 200 <= response.status_code < 300:
                logger.error("[%s] LLM error status %s: %s", operation, response.status_code, _body_preview(response))
                raise UpstreamError(
                    f"{operation}: LLM returned status {response.status_code}",
                    status_code=response.status_code,
                )
            try:
                data = response.json()
            except ValueError as exc:
                logger.error("[%s] LLM payload was not JSON: %s", operation, exc)
                raise MalformedResponseError(f"{operation}: LLM payload was not JSON") from exc
            content = _extract_content(data, operation)
        finally:
            _close_safely(close_cb)
    logger.info("[%s] Completed in %.2fs", operation, watch.seconds)
    return content


def call_json(
    prompt: str,
    operation: str,
    *,
    cfg: LlmRoute,
    client: Optional[HttpClient] = None,
) -> Any:  # Complete a prompt and extract the JSON object or array from the reply
    raw = complete(prompt, operation, cfg=cfg, client=client)
    try:
        return parse_json_object_or_array(raw)
    except MalformedResponseError:
        logger.warning("[%s] Reply did not contain parseable JSON: %s", operation, _preview(raw))
        raise


def _post(url: str, payload: Dict[str, Any], headers: Dict[str, str], timeout: float, client: Optional[HttpClient]) -> Tuple[HttpResponse, Optional[Callable[[], None]]]:  # Dispatch HTTP request
    if client is not None:
        response = client.post(url, json=payload, headers=headers, timeout=timeout)
        return response, None
    import httpx

    http_client = httpx.Client(timeout=timeout)
    try:
        response = http_client.post(url, json=payload, headers=headers)
    except Exception:
        http_client.close()
        raise
    return response, http_client.close


def _close_safely(close_cb: Optional[Callable[[], None]]) -> None:  # Close HTTP client callback when provided
    if close_cb is not None:
        close_cb()


def _extract_content(data: Any, operation: str) -> str:  # Pull choices[0].message.content from the reply
    if isinstance(data, dict):
        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            message = choices[0].get("message") if isinstance(choices[0], dict) else None
            content = message.get("content") if isinstance(message, dict) else None
            if isinstance(content, str):
                return content
    raise MalformedResponseError(f"{operation}: LLM response missing content")


def _body_preview(response: HttpResponse) -> str:
    try:
        return _preview(response.text)
    except Exception:  # noqa: BLE001
        return "(unreadable body)"


def _preview(text: str, limit: int = 120) -> str:  # Single-line preview for logging
    line = " ".join((text or "").split())
    if len(line) > limit:
        return line[: limit - 3] + "..."
    return line
