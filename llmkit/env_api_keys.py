"""Environment key helpers.

Providers may require API keys to function.  This module maps each
provider to the environment variable holding its key and offers helpers
to read them.  Keys are looked up in the process environment after a
``.env`` file (if any) has been loaded with python-dotenv.
"""

import os
from typing import Dict, Optional

from dotenv import load_dotenv

# Mapping from provider identifier to the environment variable used
REQUIRED_KEYS = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "doubao": "DOUBAO_API_KEY",
    # ollama does not require an API key
}


def load_env(dotenv_path: Optional[str] = None) -> bool:
    """Load a ``.env`` file without overriding variables already set."""
    return load_dotenv(dotenv_path, override=False)


def has_api_key(provider: str) -> bool:
    """Return True if the required API key for *provider* is set."""
    env_var = REQUIRED_KEYS.get(provider)
    return bool(os.getenv(env_var)) if env_var else True


def get_api_key(provider: str) -> str:
    """Return the API key for *provider*, or an empty string."""
    env_var = REQUIRED_KEYS.get(provider)
    return os.getenv(env_var, "") if env_var else ""


def load_api_keys() -> Dict[str, str]:
    """Return every configured API key keyed by provider name."""
    return {provider: get_api_key(provider) for provider in REQUIRED_KEYS if has_api_key(provider)}


__all__ = ["REQUIRED_KEYS", "load_env", "has_api_key", "get_api_key", "load_api_keys"]
