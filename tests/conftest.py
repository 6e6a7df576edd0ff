from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

import pytest
import requests

from llmkit.api_registry import ProviderRegistry
from llmkit.context import Context
from llmkit.errors import DecodingError
from llmkit.logger import LogLevel
from llmkit.providers.provider import Provider


class FakeResponse:
    """Minimal stand-in for ``requests.Response`` with a streamed body."""

    def __init__(self, status_code: int = 200, body: Union[bytes, str] = b"", chunk_size: int = 16):
        self.status_code = status_code
        self.content = body.encode("utf-8") if isinstance(body, str) else body
        self._chunk_size = chunk_size
        self.closed = False

    def iter_content(self, chunk_size: int = 1):
        del chunk_size
        for i in range(0, len(self.content), self._chunk_size):
            yield self.content[i:i + self._chunk_size]

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class FakeSession:
    """Records POSTs and replays queued outcomes (the last one repeats)."""

    def __init__(self, *outcomes: Union[FakeResponse, Exception]):
        self.outcomes = list(outcomes) or [FakeResponse(200, b"")]
        self.calls: List[Dict[str, Any]] = []

    def post(self, url, data=None, headers=None, timeout=None, stream=False):
        self.calls.append({"url": url, "data": data, "headers": headers, "timeout": timeout, "stream": stream})
        outcome = self.outcomes[min(len(self.calls), len(self.outcomes)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingLogger:
    def __init__(self):
        self.records: List[tuple] = []
        self.level = LogLevel.INFO

    def _record(self, level, msg, keyvals):
        self.records.append((level, msg, keyvals))

    def debug(self, msg, *keyvals):
        self._record("debug", msg, keyvals)

    def info(self, msg, *keyvals):
        self._record("info", msg, keyvals)

    def warn(self, msg, *keyvals):
        self._record("warn", msg, keyvals)

    def error(self, msg, *keyvals):
        self._record("error", msg, keyvals)

    def set_level(self, level):
        self.level = LogLevel.parse(level)

    def messages(self, level: Optional[str] = None) -> List[str]:
        return [msg for lvl, msg, _ in self.records if level is None or lvl == level]


class RecordingContext(Context):
    """Context whose waits return immediately and are recorded."""

    def __init__(self, cancel_on_wait: bool = False):
        super().__init__()
        self.waits: List[float] = []
        self.cancel_on_wait = cancel_on_wait

    def wait(self, seconds: float) -> bool:
        self.waits.append(seconds)
        if self.cancel_on_wait:
            self.cancel()
        return self.done()


class EchoProvider(Provider):
    """Provider with a trivial wire format: the body is the text."""

    def __init__(self, api_key: str = "", model: str = "echo-1", label: str = "echo"):
        self.api_key = api_key
        self.model = model
        self.label = label

    def name(self) -> str:
        return self.label

    def endpoint(self) -> str:
        return f"http://fake.test/{self.label}"

    def headers(self) -> Dict[str, str]:
        return {"Content-Type": "text/plain", "Authorization": f"Bearer {self.api_key}"}

    def prepare_request(self, prompt: str, options: Dict[str, Any]) -> bytes:
        return prompt.encode("utf-8")

    def parse_response(self, body: bytes) -> str:
        if not body.startswith(b"ok:"):
            raise DecodingError("bad echo body")
        return body[3:].decode("utf-8")


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")


@pytest.fixture
def echo_registry():
    registry = ProviderRegistry()
    registry.register("echo", lambda key, model: EchoProvider(key, model), requires_key=True)
    return registry
