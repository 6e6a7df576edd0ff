"""OpenAI-compatible chat completion providers.

OpenAI, Gemini (through its OpenAI compatibility layer), Deepseek and
Doubao (Volcengine Ark) all accept the same chat completion request::

    {"model": "...", "messages": [{"role": "user", "content": "..."}], ...}

and answer with ``choices[0].message.content``.  They differ only in
base URL, so each is a thin subclass of :class:`OpenAICompatibleProvider`.
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from ..errors import DecodingError
from .provider import Provider, encode_json

CHAT_COMPLETIONS_PATH = "/chat/completions"


class _Message(BaseModel):
    content: Optional[str] = None


class _Choice(BaseModel):
    message: _Message


class ChatCompletion(BaseModel):
    """The part of a chat completion response we read."""
    choices: List[_Choice] = []
    error: Optional[Dict[str, Any]] = None


class OpenAICompatibleProvider(Provider):
    """Provider for any OpenAI-style ``/chat/completions`` endpoint."""

    provider_name = "openai"
    base_url = "https://api.openai.com/v1"

    def __init__(self, api_key: str, model: str, base_url: Optional[str] = None) -> None:
        self.api_key = api_key
        self.model = model
        if base_url is not None:
            self.base_url = base_url
        self.base_url = self.base_url.rstrip("/")

    def name(self) -> str:
        return self.provider_name

    def endpoint(self) -> str:
        return self.base_url + CHAT_COMPLETIONS_PATH

    def headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def prepare_request(self, prompt: str, options: Dict[str, Any]) -> bytes:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        payload.update(options)
        return encode_json(payload)

    def parse_response(self, body: bytes) -> str:
        try:
            completion = ChatCompletion.model_validate(json.loads(body))
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
            raise DecodingError(f"error parsing {self.name()} response", exc) from exc
        if completion.error:
            raise DecodingError(f"{self.name()} returned an error: {completion.error.get('message', completion.error)}")
        if not completion.choices or completion.choices[0].message.content is None:
            raise DecodingError(f"{self.name()} response has no message content")
        return completion.choices[0].message.content


class OpenAIProvider(OpenAICompatibleProvider):
    """Provider for the OpenAI Chat Completions API."""
    provider_name = "openai"
    base_url = "https://api.openai.com/v1"


class GeminiProvider(OpenAICompatibleProvider):
    """Provider for Google's Gemini models via OpenAI compatibility."""
    provider_name = "gemini"
    base_url = "https://generativelanguage.googleapis.com/v1beta/openai"


class DeepseekProvider(OpenAICompatibleProvider):
    """Provider for Deepseek chat completions."""
    provider_name = "deepseek"
    base_url = "https://api.deepseek.com"


class DoubaoProvider(OpenAICompatibleProvider):
    """Provider for Doubao (Volcengine Ark) LLMs."""
    provider_name = "doubao"
    base_url = "https://ark.cn-beijing.volces.com/api/v3"


__all__ = [
    "OpenAICompatibleProvider",
    "OpenAIProvider",
    "GeminiProvider",
    "DeepseekProvider",
    "DoubaoProvider",
    "ChatCompletion",
]
