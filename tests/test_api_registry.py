import pytest

from llmkit.api_registry import (
    ProviderRegistry,
    default_registry,
    get_client,
    list_default_model,
    list_providers,
)
from llmkit.errors import ProviderResolutionError
from llmkit.providers.ollama_provider import OllamaProvider
from llmkit.providers.openai_provider import GeminiProvider, OpenAIProvider


def test_list_providers_contains_defaults():
    providers = list_providers()
    assert "openai" in providers
    assert "ollama" in providers


def test_list_default_model_contains_mapping():
    defaults = list_default_model()
    assert defaults.get("openai") is not None
    assert defaults.get("ollama") == "mistral:7b"


def test_get_resolves_hosted_provider_with_key_and_model():
    provider = default_registry().get("gemini", "g-key", "gemini-2.5-pro")
    assert isinstance(provider, GeminiProvider)
    assert provider.api_key == "g-key"
    assert provider.model == "gemini-2.5-pro"


def test_get_uses_default_model_when_missing():
    provider = default_registry().get("ollama", "", None)
    assert isinstance(provider, OllamaProvider)
    assert provider.model == "mistral:7b"


def test_get_unknown_provider_raises():
    with pytest.raises(ProviderResolutionError, match="unknown provider"):
        default_registry().get("nope", "k", "m")


def test_hosted_provider_requires_key():
    with pytest.raises(ProviderResolutionError, match="invalid API key"):
        default_registry().get("openai", "", "gpt-4o")


def test_factory_failure_is_resolution_error():
    registry = ProviderRegistry()

    def broken(api_key, model):
        raise RuntimeError("kaput")

    registry.register("broken", broken)
    with pytest.raises(ProviderResolutionError) as excinfo:
        registry.get("broken")
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_get_client_reads_key_from_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    client = get_client("openai", "gpt-4o")
    assert isinstance(client, OpenAIProvider)
    assert client.api_key == "env-key"


def test_get_client_local_needs_no_key():
    assert isinstance(get_client("ollama"), OllamaProvider)
