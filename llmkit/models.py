"""Model names and default values.

This module centralises the default model name used for each provider.
The registry and :meth:`llmkit.config.Config.from_env` fall back to these
when no model is given explicitly.
"""

# Map provider identifiers to their default model identifiers
DEFAULT_MODEL = {
    "openai": "gpt-5-nano",
    "gemini": "gemini-2.5-flash",
    "deepseek": "deepseek-chat",
    "doubao": "doubao-seed-1-6-flash-250715",
    "ollama": "mistral:7b",
}

__all__ = ["DEFAULT_MODEL"]
