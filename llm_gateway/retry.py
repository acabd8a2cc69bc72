from __future__ import annotations  # Bounded retry combinator for gateway calls

import logging
import time
from typing import Callable, Tuple, Type, TypeVar

from .errors import LlmGatewayError


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRY_ON: Tuple[Type[BaseException], ...] = (LlmGatewayError, ValueError)


def with_retry(
    fn: Callable[[], T],
    *,
    attempts: int = 3,
    delay_s: float = 1.0,
    operation: str = "LLM call",
    retry_on: Tuple[Type[BaseException], ...] = DEFAULT_RETRY_ON,
    sleep: Callable[[float], None] = time.sleep,
) -> T:  # Invoke fn up to `attempts` times, sleeping a fixed delay between failures
    if attempts < 1:
        raise ValueError("attempts must be at least 1")
    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except retry_on as exc:
            logger.error("[%s] attempt %d/%d failed: %s", operation, attempt, attempts, exc)
            if attempt >= attempts:
                raise
            sleep(delay_s)
    raise AssertionError("unreachable")  # pragma: no cover


__all__ = ["DEFAULT_RETRY_ON", "with_retry"]
