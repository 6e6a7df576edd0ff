"""HTTP exchange shared by the generation engine and the Ollama provider.

``requests`` has no way to interrupt a call that is blocked on the
network, so :func:`post` runs the exchange on a daemon thread and waits
for either the exchange or the context.  When the context ends first the
exchange is abandoned: its response (if any) is closed and the caller
gets the context's :class:`~llmkit.errors.CancellationError` right away.
"""

import threading
from contextlib import suppress
from typing import Dict, List, Optional, Tuple

import requests

from .context import Context
from .errors import RequestError, ResponseError

CHUNK_SIZE = 8192


class _Exchange:
    """One POST and the full read of its body."""

    def __init__(self, session, url, headers, body, timeout):
        self.session = session
        self.url = url
        self.headers = headers
        self.body = body
        self.timeout = timeout
        self.finished = threading.Event()
        self.aborted = False
        self.status: Optional[int] = None
        self.content = b""
        self.send_error: Optional[Exception] = None
        self.read_error: Optional[Exception] = None
        self._response: Optional[requests.Response] = None
        self._lock = threading.Lock()

    def run(self) -> None:
        try:
            self._run()
        except Exception as exc:
            self.read_error = exc
        finally:
            self.finished.set()

    def _run(self) -> None:
        try:
            response = self.session.post(
                self.url, data=self.body, headers=self.headers, timeout=self.timeout, stream=True
            )
        except Exception as exc:
            self.send_error = exc
            return

        with self._lock:
            abandoned = self.aborted
            if not abandoned:
                self._response = response
        with response:
            if abandoned:
                return
            chunks: List[bytes] = []
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if self.aborted:
                    return
                chunks.append(chunk)
            self.status = response.status_code
            self.content = b"".join(chunks)

    def abort(self) -> None:
        with self._lock:
            if self.finished.is_set():
                return
            self.aborted = True
            response = self._response
        self.finished.set()
        if response is not None:
            # Closing the connection unblocks a pending read on the worker.
            with suppress(OSError, requests.RequestException):
                response.close()


def post(
    session: requests.Session,
    ctx: Context,
    url: str,
    headers: Dict[str, str],
    body: bytes,
    timeout: float,
) -> Tuple[int, bytes]:
    """POST ``body`` to ``url`` and return ``(status_code, response_body)``.

    The request timeout is capped by the context deadline, and the call
    returns as soon as ``ctx`` is cancelled, even while the server has
    not answered yet.

    Raises
    ------
    CancellationError
        If ``ctx`` ends before or during the exchange.
    RequestError
        If the request cannot be sent.
    ResponseError
        If the response body cannot be read.
    """
    ctx.raise_if_done()
    remaining = ctx.remaining()
    if remaining is not None:
        timeout = min(timeout, remaining)

    exchange = _Exchange(session, url, headers, body, timeout)
    worker = threading.Thread(target=exchange.run, name="llmkit-http", daemon=True)
    unregister = ctx.on_done(exchange.abort)
    try:
        worker.start()
        while not exchange.finished.wait(ctx.remaining()):
            # Deadline reached; observing it finishes ctx and aborts the exchange.
            ctx.raise_if_done()
    finally:
        unregister()

    if exchange.aborted:
        ctx.raise_if_done()
    if exchange.send_error is not None:
        ctx.raise_if_done()
        if isinstance(exchange.send_error, requests.RequestException):
            raise RequestError("failed to send request", exchange.send_error) from exchange.send_error
        raise exchange.send_error
    if exchange.read_error is not None:
        ctx.raise_if_done()
        if isinstance(exchange.read_error, requests.RequestException):
            raise ResponseError("failed to read response body", exchange.read_error) from exchange.read_error
        raise exchange.read_error
    return exchange.status, exchange.content


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


__all__ = ["post", "is_success", "CHUNK_SIZE"]
