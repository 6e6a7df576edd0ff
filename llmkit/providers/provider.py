"""Abstract interface for LLM providers.

This module defines the :class:`Provider` abstract base class used by
provider implementations.  A provider knows where to send a request
(:meth:`Provider.endpoint`), which headers to attach
(:meth:`Provider.headers`), how to encode prompt text plus generation
options into a request body (:meth:`Provider.prepare_request`) and how to
turn a raw response body back into text (:meth:`Provider.parse_response`).
It never performs I/O itself; the HTTP exchange and retries belong to
:class:`llmkit.llm.GenerationEngine`.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict

from ..errors import EncodingError


class Provider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def name(self) -> str:
        """Stable identifier used for logging and result attribution."""
        raise NotImplementedError

    @abstractmethod
    def endpoint(self) -> str:
        """Fully qualified URL requests are POSTed to."""
        raise NotImplementedError

    @abstractmethod
    def headers(self) -> Dict[str, str]:
        """HTTP headers sent with every request."""
        raise NotImplementedError

    @abstractmethod
    def prepare_request(self, prompt: str, options: Dict[str, Any]) -> bytes:
        """Encode a prompt and generation options into a request body.

        Parameters
        ----------
        prompt : str
            The rendered prompt text.
        options : dict
            Generation options such as ``temperature`` or ``max_tokens``.
            Providers decide how (and whether) each option is sent.

        Returns
        -------
        bytes
            The serialised request body.

        Raises
        ------
        EncodingError
            If the payload cannot be serialised.
        """
        raise NotImplementedError

    @abstractmethod
    def parse_response(self, body: bytes) -> str:
        """Decode a successful response body into generated text.

        Raises
        ------
        DecodingError
            If the payload is malformed.
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name()!r})"


def encode_json(payload: Dict[str, Any]) -> bytes:
    """Serialise ``payload`` as UTF-8 JSON, raising :class:`EncodingError`."""
    try:
        return json.dumps(payload).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise EncodingError("failed to encode request payload", exc) from exc


__all__ = ["Provider", "encode_json"]
