"""
JSON parsing utilities.

Some providers answer with several JSON documents back to back (one per
line for Ollama's ``/api/generate``).  :func:`iter_json_values` walks such
a body and yields each decoded value in order, raising a ValueError as
soon as one of them is malformed.
"""

import json
from typing import Any, Iterator, Union

_DECODER = json.JSONDecoder()


def iter_json_values(body: Union[str, bytes]) -> Iterator[Any]:
    """Yield each whitespace-separated JSON value contained in ``body``."""
    text = body.decode("utf-8") if isinstance(body, (bytes, bytearray)) else body
    idx = 0
    end = len(text)
    while True:
        while idx < end and text[idx].isspace():
            idx += 1
        if idx >= end:
            return
        value, idx = _DECODER.raw_decode(text, idx)
        yield value
