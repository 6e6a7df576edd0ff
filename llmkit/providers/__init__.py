"""Provider registry.

This subpackage contains one module per provider family.  The
``DEFAULT_PROVIDERS`` mapping associates short provider names (e.g.
``"openai"``) with the corresponding provider class.  External consumers
should resolve providers through :mod:`llmkit.api_registry` rather than
importing classes directly from this module.

Adding a new provider is as simple as creating a new module in this
directory that defines a class derived from
:class:`llmkit.providers.provider.Provider` and then registering it here.
"""

from .provider import Provider
from .openai_provider import OpenAIProvider, GeminiProvider, DeepseekProvider, DoubaoProvider
from .ollama_provider import OllamaProvider


# Map short provider names to their provider classes.  New providers
# should be inserted here.
DEFAULT_PROVIDERS = {
    "openai": OpenAIProvider,
    "gemini": GeminiProvider,
    "deepseek": DeepseekProvider,
    "doubao": DoubaoProvider,
    "ollama": OllamaProvider,
}

__all__ = ["DEFAULT_PROVIDERS", "Provider"]
