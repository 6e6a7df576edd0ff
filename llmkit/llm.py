"""Generation engine.

:func:`new_llm` turns a :class:`~llmkit.config.Config` into an object
satisfying the :class:`LLM` protocol:

* for ``"ollama"`` the resolved :class:`~llmkit.providers.ollama_provider.OllamaProvider`
  is returned as is, since it already implements :class:`LLM` (one
  request per call, no retries);
* for every other provider the resolved provider is wrapped in a
  :class:`GenerationEngine`, which owns the HTTP exchange and the retry
  loop.

Example usage:

>>> from llmkit import Config, Context, Prompt, new_llm, DEFAULT_REGISTRY, get_logger
>>> cfg = Config(provider="openai", model="gpt-4o-mini", api_keys={"openai": "sk-..."})
>>> llm = new_llm(cfg, get_logger(), DEFAULT_REGISTRY)
>>> text, rendered = llm.generate(Context.background(), Prompt("Say hi"))
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Tuple, runtime_checkable

import requests

from .api_registry import ProviderRegistry
from .config import Config
from .context import Context
from .errors import (
    APIError,
    CancellationError,
    GenerationError,
    LLMError,
    ProviderResolutionError,
    RequestError,
    ResponseError,
)
from .logger import Logger, LogLevel
from .prompt import Prompt
from .providers.provider import Provider
from .transport import is_success, post
from .utils.http_proxy import get_session_with_proxy

OLLAMA = "ollama"


@runtime_checkable
class LLM(Protocol):
    """Anything that can turn a prompt into text."""

    def generate(self, ctx: Context, prompt: Prompt) -> Tuple[str, str]:
        """Return ``(text, rendered_prompt)`` or raise an :class:`LLMError`."""
        ...

    def set_option(self, key: str, value: Any) -> None: ...

    def set_debug_level(self, level: LogLevel) -> None: ...

    def set_endpoint(self, endpoint: str) -> None: ...


@dataclass
class GenerationResult:
    """Outcome of one generation call; ``error`` is None on success."""
    text: str = ""
    prompt: str = ""
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class GenerationEngine:
    """Retrying generation over a single :class:`Provider`."""

    def __init__(
        self,
        provider: Provider,
        logger: Logger,
        timeout: float = 60.0,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.provider = provider
        self.logger = logger
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._options: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._session = session if session is not None else get_session_with_proxy()

    def set_option(self, key: str, value: Any) -> None:
        with self._lock:
            self._options[key] = value
        self.logger.debug("Option set", key, value)

    def options(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._options)

    def set_endpoint(self, endpoint: str) -> None:
        # Only Ollama has a mutable endpoint.
        self.logger.debug("SetEndpoint called on non-Ollama provider", "endpoint", endpoint)

    def set_debug_level(self, level: LogLevel) -> None:
        self.logger.debug("Setting internal LLM debug level", "new_level", level)
        self.logger.set_level(level)

    def generate(self, ctx: Context, prompt: Prompt) -> Tuple[str, str]:
        """Generate text, retrying failed attempts up to ``max_retries`` times.

        Returns
        -------
        tuple of (str, str)
            The generated text and the rendered prompt.

        Raises
        ------
        CancellationError
            If ``ctx`` is cancelled or its deadline passes.
        GenerationError
            If every attempt failed; wraps the last attempt's error.
        """
        prompt_text = prompt.render()
        attempts = self.max_retries + 1
        last_error: Optional[LLMError] = None

        for attempt in range(1, attempts + 1):
            self.logger.debug(
                "Generating text", "provider", self.provider.name(), "prompt", prompt_text, "attempt", attempt
            )
            try:
                result = self._attempt_generate(ctx, prompt_text)
            except CancellationError:
                raise
            except (RequestError, ResponseError, APIError) as exc:
                last_error = exc
                self.logger.warn("Generation attempt failed", "error", exc, "attempt", attempt)
            else:
                return result, prompt_text

            if attempt < attempts:
                self.logger.debug("Retrying", "delay", self.retry_delay)
                if ctx.wait(self.retry_delay):
                    ctx.raise_if_done()

        raise GenerationError(attempts, last_error)

    def _attempt_generate(self, ctx: Context, prompt: str) -> str:
        name = self.provider.name()
        try:
            body = self.provider.prepare_request(prompt, self.options())
        except Exception as exc:
            raise RequestError("failed to prepare request", exc) from exc
        self.logger.debug("Request body", "provider", name, "body", body.decode("utf-8", errors="replace"))

        headers = self.provider.headers()
        for key, value in headers.items():
            self.logger.debug("Request header", "provider", name, "key", key, "value", value)

        status, raw = post(self._session, ctx, self.provider.endpoint(), headers, body, self.timeout)
        if not is_success(status):
            text = raw.decode("utf-8", errors="replace")
            self.logger.error("API error", "provider", name, "status", status, "body", text)
            raise APIError(status, text)

        try:
            result = self.provider.parse_response(raw)
        except Exception as exc:
            # DecodingError, or anything a misbehaving provider raises.
            raise ResponseError("failed to parse response", exc) from exc

        self.logger.debug("Text generated successfully", "result", result)
        return result


def new_llm(
    config: Config,
    logger: Logger,
    registry: ProviderRegistry,
    session: Optional[requests.Session] = None,
) -> LLM:
    """Resolve ``config.provider`` and return a ready-to-use :class:`LLM`.

    Raises
    ------
    ProviderResolutionError
        If the registry cannot produce the provider.
    """
    provider = registry.get(config.provider, config.api_key, config.model)

    logger.set_level(config.log_level)

    if config.provider == OLLAMA:
        if not isinstance(provider, LLM):
            raise ProviderResolutionError("unexpected provider type for ollama")
        set_logger = getattr(provider, "set_logger", None)
        if set_logger is not None:
            set_logger(logger)
        if config.ollama_endpoint:
            provider.set_endpoint(config.ollama_endpoint)
        if hasattr(provider, "timeout"):
            provider.timeout = config.timeout
        return provider

    engine = GenerationEngine(
        provider,
        logger,
        timeout=config.timeout,
        max_retries=config.max_retries,
        retry_delay=config.retry_delay,
        session=session,
    )
    engine.set_option("temperature", config.temperature)
    engine.set_option("max_tokens", config.max_tokens)
    return engine


def try_generate(llm: LLM, ctx: Context, prompt: Prompt) -> GenerationResult:
    """Run ``llm.generate`` and capture any :class:`LLMError` as data."""
    try:
        text, rendered = llm.generate(ctx, prompt)
    except LLMError as exc:
        return GenerationResult(prompt=prompt.render(), error=exc)
    return GenerationResult(text=text, prompt=rendered)


__all__ = ["LLM", "GenerationEngine", "GenerationResult", "new_llm", "try_generate"]
