"""Provider registry.

This module maps a provider name, an API key and a model name to a
concrete :class:`~llmkit.providers.provider.Provider`.  It exposes:

* :class:`ProviderRegistry` – a registry instance; ``get`` resolves a
  provider and raises :class:`~llmkit.errors.ProviderResolutionError`
  when it cannot.
* :data:`DEFAULT_REGISTRY` – a registry pre-populated with
  :data:`llmkit.providers.DEFAULT_PROVIDERS`.
* :func:`list_providers` – return a list of provider identifiers.
* :func:`list_default_model` – return a mapping of provider identifiers
  to their default model names.
* :func:`get_client` – resolve a provider from the default registry,
  reading its API key from the environment when none is given.
"""

from __future__ import annotations

import threading
from typing import Callable, Dict, List, Optional

from .env_api_keys import REQUIRED_KEYS, get_api_key
from .errors import ProviderResolutionError
from .models import DEFAULT_MODEL
from .providers import DEFAULT_PROVIDERS
from .providers.provider import Provider

# factory(api_key, model) -> Provider
ProviderFactory = Callable[[str, str], Provider]


class ProviderRegistry:
    """Resolve providers by name."""

    def __init__(self) -> None:
        self._factories: Dict[str, ProviderFactory] = {}
        self._requires_key: Dict[str, bool] = {}
        self._lock = threading.Lock()

    def register(self, name: str, factory: ProviderFactory, requires_key: bool = False) -> None:
        """Register ``factory`` under ``name``, replacing any previous entry."""
        with self._lock:
            self._factories[name] = factory
            self._requires_key[name] = requires_key

    def list_providers(self) -> List[str]:
        with self._lock:
            return list(self._factories)

    def get(self, name: str, api_key: str = "", model: Optional[str] = None) -> Provider:
        """Instantiate the provider registered under ``name``.

        Parameters
        ----------
        name : str
            The provider identifier (e.g. ``"openai"``).
        api_key : str
            Key attached to outgoing requests.  Required for hosted
            providers.
        model : str, optional
            Model name; defaults to the provider's entry in
            :data:`llmkit.models.DEFAULT_MODEL`.

        Raises
        ------
        ProviderResolutionError
            If the provider is unknown, its key is missing, or its
            factory fails.
        """
        with self._lock:
            factory = self._factories.get(name)
            requires_key = self._requires_key.get(name, False)
        if factory is None:
            raise ProviderResolutionError(f"unknown provider: {name!r}")
        if requires_key and not api_key:
            raise ProviderResolutionError(f"invalid API key for provider {name!r}")
        if not model:
            model = DEFAULT_MODEL.get(name, "")
        try:
            return factory(api_key, model)
        except ProviderResolutionError:
            raise
        except Exception as exc:
            raise ProviderResolutionError(f"failed to create provider {name!r}", exc) from exc


def default_registry() -> ProviderRegistry:
    """Return a new registry holding every built-in provider."""
    registry = ProviderRegistry()
    for name, cls in DEFAULT_PROVIDERS.items():
        registry.register(name, cls, requires_key=name in REQUIRED_KEYS)
    return registry


DEFAULT_REGISTRY = default_registry()


def list_providers() -> List[str]:
    """Return the list of registered provider identifiers."""
    return DEFAULT_REGISTRY.list_providers()


def list_default_model() -> Dict[str, str]:
    """Return a mapping of provider identifiers to default model names."""
    return {name: DEFAULT_MODEL[name] for name in list_providers() if name in DEFAULT_MODEL}


def get_client(provider_name: str, model_name: Optional[str] = None, api_key: Optional[str] = None) -> Provider:
    """Resolve a provider from the default registry.

    The API key falls back to the provider's environment variable (see
    :data:`llmkit.env_api_keys.REQUIRED_KEYS`).
    """
    if api_key is None:
        api_key = get_api_key(provider_name)
    return DEFAULT_REGISTRY.get(provider_name, api_key, model_name)


__all__ = [
    "ProviderRegistry",
    "ProviderFactory",
    "DEFAULT_REGISTRY",
    "default_registry",
    "list_providers",
    "list_default_model",
    "get_client",
]
