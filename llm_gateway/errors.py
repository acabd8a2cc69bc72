from __future__ import annotations  # Gateway error taxonomy


class LlmGatewayError(RuntimeError):  # Base gateway error
    pass


class UpstreamError(LlmGatewayError):  # Transport failure, timeout or non-2xx status
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(LlmGatewayError):  # Reply content missing or not parseable JSON
    pass


__all__ = ["LlmGatewayError", "MalformedResponseError", "UpstreamError"]
