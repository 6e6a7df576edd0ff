"""Error taxonomy for llmkit.

Every failure surfaced by the generation pipeline is an :class:`LLMError`.
Per-attempt errors (:class:`RequestError`, :class:`ResponseError`,
:class:`APIError`) are recovered by the retry loop in
:mod:`llmkit.llm`; once the retry budget is spent the caller receives a
:class:`GenerationError` wrapping the last of them.
"""

from typing import Optional


class LLMError(Exception):
    """Base exception for LLM-related errors."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class RequestError(LLMError):
    """Raised when a request could not be built or transmitted."""


class ResponseError(LLMError):
    """Raised when a successful response body could not be read or decoded."""


class APIError(LLMError):
    """Raised when the API answers with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str = "", cause: Optional[BaseException] = None) -> None:
        super().__init__(f"API error: status code {status_code}", cause)
        self.status_code = status_code
        self.body = body


class ProviderResolutionError(LLMError):
    """Raised when the registry cannot produce a provider."""


class EncodingError(LLMError):
    """Raised when a provider cannot serialise a request payload."""


class DecodingError(LLMError):
    """Raised when a provider cannot decode a response payload."""


class CancellationError(LLMError):
    """Raised when the calling context ends before the work completes."""


class Cancelled(CancellationError):
    def __init__(self) -> None:
        super().__init__("context canceled")


class DeadlineExceeded(CancellationError):
    def __init__(self) -> None:
        super().__init__("context deadline exceeded")


class GenerationError(LLMError):
    """Raised after every attempt of a generation call has failed."""

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        super().__init__(f"failed to generate after {attempts} attempts", last_error)
        self.attempts = attempts
        self.last_error = last_error


__all__ = [
    "LLMError",
    "RequestError",
    "ResponseError",
    "APIError",
    "ProviderResolutionError",
    "EncodingError",
    "DecodingError",
    "CancellationError",
    "Cancelled",
    "DeadlineExceeded",
    "GenerationError",
]
