"""
HTTP session utilities.

Every engine owns one ``requests`` session so connections are reused
across retries.  Sessions honour the HTTP(S)_PROXY environment variables
and identify themselves with an llmkit User-Agent.
"""

from typing import Optional

import requests
from requests.adapters import HTTPAdapter

USER_AGENT = "llmkit/0.1"


def get_session_with_proxy(pool_maxsize: int = 4, user_agent: Optional[str] = USER_AGENT) -> requests.Session:
    """Create a requests Session that respects HTTP(S)_PROXY environment variables.

    Retries are handled by the generation engine, so the mounted adapters
    never retry on their own.
    """
    session = requests.Session()
    session.trust_env = True
    adapter = HTTPAdapter(pool_maxsize=pool_maxsize, max_retries=0)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    if user_agent:
        session.headers["User-Agent"] = user_agent
    return session
