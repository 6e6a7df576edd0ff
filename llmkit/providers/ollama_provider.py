"""Ollama provider.

This provider talks to a local Ollama server through its
``/api/generate`` endpoint.  Ollama streams its answer as a sequence of
newline-delimited JSON objects::

    {"model": "m", "response": "Hel", "done": false}
    {"model": "m", "response": "lo", "done": true}

:meth:`OllamaProvider.parse_response` concatenates the ``response``
fragments until an object reports ``done``.

Besides the :class:`~llmkit.providers.provider.Provider` operations the
class is a complete generator on its own (see :class:`llmkit.llm.LLM`):
it has a mutable base URL and option map and its :meth:`generate`
performs exactly one request, without retries.
"""

from __future__ import annotations

import json
import threading
from typing import Any, Dict, Optional, Tuple

import requests
from pydantic import BaseModel, ValidationError

from ..context import Context
from ..errors import APIError, DecodingError
from ..logger import Logger, LogLevel
from ..prompt import Prompt
from ..transport import is_success, post
from ..utils.http_proxy import get_session_with_proxy
from ..utils.json_parse import iter_json_values
from .provider import Provider, encode_json

DEFAULT_BASE_URL = "http://localhost:11434"
GENERATE_PATH = "/api/generate"


class OllamaChunk(BaseModel):
    """One object of an ``/api/generate`` response stream."""
    model: str = ""
    response: str = ""
    done: bool = False
    error: Optional[str] = None


class OllamaProvider(Provider):
    """Provider and self-contained generator for Ollama."""

    def __init__(
        self,
        api_key: str = "",
        model: str = "mistral:7b",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 300.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        # Ollama ignores API keys; accepted for registry compatibility.
        del api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger: Optional[Logger] = None
        self._options: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._session = session

    # Provider interface

    def name(self) -> str:
        return "ollama"

    def endpoint(self) -> str:
        return self.base_url + GENERATE_PATH

    def headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    def prepare_request(self, prompt: str, options: Dict[str, Any]) -> bytes:
        payload: Dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
        }
        payload.update(options)
        return encode_json(payload)

    def parse_response(self, body: bytes) -> str:
        parts = []
        decoded = 0
        try:
            for value in iter_json_values(body):
                decoded += 1
                chunk = OllamaChunk.model_validate(value)
                if chunk.error:
                    raise DecodingError(f"Ollama returned an error: {chunk.error}")
                parts.append(chunk.response)
                if chunk.done:
                    break
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
            raise DecodingError("error parsing Ollama response", exc) from exc
        if not decoded:
            raise DecodingError("empty Ollama response")
        return "".join(parts)

    # Generator interface

    def set_endpoint(self, endpoint: str) -> None:
        self.base_url = endpoint.rstrip("/")
        self._debug("Setting endpoint for Ollama", "endpoint", self.base_url)

    def set_option(self, key: str, value: Any) -> None:
        with self._lock:
            self._options[key] = value
        self._debug("Setting option for Ollama", "key", key, "value", value)

    def options(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._options)

    def set_logger(self, logger: Logger) -> None:
        self.logger = logger

    def set_debug_level(self, level: LogLevel) -> None:
        if self.logger is not None:
            self.logger.set_level(level)

    def generate(self, ctx: Context, prompt: Prompt) -> Tuple[str, str]:
        """Send one request to Ollama; return ``(text, rendered_prompt)``."""
        prompt_text = prompt.render()
        body = self.prepare_request(prompt_text, self.options())
        self._debug("Request body", "provider", self.name(), "body", body.decode("utf-8"))

        if self._session is None:
            self._session = get_session_with_proxy()
        status, raw = post(self._session, ctx, self.endpoint(), self.headers(), body, self.timeout)
        if not is_success(status):
            text = raw.decode("utf-8", errors="replace")
            if self.logger is not None:
                self.logger.error("API error", "provider", self.name(), "status", status, "body", text)
            raise APIError(status, text)

        result = self.parse_response(raw)
        self._debug("Text generated successfully", "result", result)
        return result, prompt_text

    def _debug(self, msg: str, *keyvals: Any) -> None:
        if self.logger is not None:
            self.logger.debug(msg, *keyvals)


__all__ = ["OllamaProvider", "OllamaChunk", "DEFAULT_BASE_URL"]
