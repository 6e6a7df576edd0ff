import io
import threading

from llmkit.api_registry import ProviderRegistry
from llmkit.compare import (
    ComparisonResult,
    compare_providers,
    format_comparison_results,
    print_comparison_results,
)
from llmkit.config import Config
from llmkit.context import Context
from llmkit.errors import ProviderResolutionError
from llmkit.llm import GenerationEngine
from llmkit.logger import LogLevel
from llmkit.prompt import Prompt

from conftest import EchoProvider, FakeResponse, FakeSession


def _registry_with_fake_http(monkeypatch, replies):
    """Registry of echo providers whose engines answer from ``replies``."""
    registry = ProviderRegistry()
    for name in replies:
        registry.register(name, lambda key, model, name=name: EchoProvider(key, model, label=name))

    original_init = GenerationEngine.__init__

    def init_with_fake_session(self, provider, logger, **kwargs):
        kwargs["session"] = FakeSession(replies[provider.name()])
        original_init(self, provider, logger, **kwargs)

    monkeypatch.setattr(GenerationEngine, "__init__", init_with_fake_session)
    return registry


def test_compare_returns_one_result_per_config(monkeypatch, logger):
    registry = _registry_with_fake_http(
        monkeypatch,
        {"alpha": FakeResponse(200, b"ok:from alpha"), "beta": FakeResponse(200, b"ok:from beta")},
    )
    configs = [
        Config(provider="alpha", model="a-1", max_retries=0),
        Config(provider="missing", model="m-1", max_retries=0),
        Config(provider="beta", model="b-1", max_retries=0),
    ]

    results = compare_providers(Context.background(), Prompt("Hi"), registry, logger, *configs)

    assert len(results) == 3
    by_provider = {result.provider: result for result in results}
    assert set(by_provider) == {"alpha", "missing", "beta"}
    assert by_provider["alpha"].response == "from alpha"
    assert by_provider["alpha"].model == "a-1"
    assert by_provider["alpha"].error is None
    assert by_provider["beta"].response == "from beta"
    assert isinstance(by_provider["missing"].error, ProviderResolutionError)
    assert by_provider["missing"].response == ""


def test_compare_captures_generation_failure(monkeypatch, logger):
    registry = _registry_with_fake_http(
        monkeypatch,
        {"good": FakeResponse(200, b"ok:fine"), "bad": FakeResponse(500, b"down")},
    )
    configs = [
        Config(provider="good", model="g", max_retries=0),
        Config(provider="bad", model="b", max_retries=1, retry_delay=0),
    ]

    results = compare_providers(Context.background(), Prompt("Hi"), registry, logger, *configs)

    by_provider = {result.provider: result for result in results}
    assert by_provider["good"].response == "fine"
    assert "2 attempts" in str(by_provider["bad"].error)


def test_compare_runs_configs_concurrently(monkeypatch, logger):
    barrier = threading.Barrier(3, timeout=5)

    class BarrierProvider(EchoProvider):
        def prepare_request(self, prompt, options):
            # Every unit must be in flight at the same time to pass.
            barrier.wait()
            return super().prepare_request(prompt, options)

    registry = ProviderRegistry()
    registry.register("slow", lambda key, model: BarrierProvider(key, model, label="slow"))
    configs = [Config(provider="slow", model=f"m{i}", max_retries=0) for i in range(3)]

    original_init = GenerationEngine.__init__

    def init_with_fake_session(self, provider, logger, **kwargs):
        kwargs["session"] = FakeSession(FakeResponse(200, b"ok:together"))
        original_init(self, provider, logger, **kwargs)

    monkeypatch.setattr(GenerationEngine, "__init__", init_with_fake_session)
    results = compare_providers(Context.background(), Prompt("Hi"), registry, logger, *configs)

    assert sorted(result.model for result in results) == ["m0", "m1", "m2"]
    assert all(result.response == "together" for result in results)


def test_compare_with_no_configs(logger):
    assert compare_providers(Context.background(), Prompt("Hi"), ProviderRegistry(), logger) == []


def test_format_comparison_results():
    results = [
        ComparisonResult(provider="openai", model="gpt", response="hello"),
        ComparisonResult(provider="nope", model="x", error=ProviderResolutionError("unknown provider: 'nope'")),
    ]
    text = format_comparison_results(results)
    assert text == (
        "Provider: openai, Model: gpt\n"
        "Response: hello\n"
        + "-" * 40 + "\n"
        "Provider: nope, Model: x\n"
        "Error: unknown provider: 'nope'\n"
        + "-" * 40 + "\n"
    )


def test_print_comparison_results_writes_to_stream(capsys):
    results = [ComparisonResult(provider="p", model="m", response="r")]
    print_comparison_results(results)
    assert capsys.readouterr().out.startswith("Provider: p, Model: m\nResponse: r\n")

    buffer = io.StringIO()
    print_comparison_results(results, file=buffer)
    assert buffer.getvalue().endswith("-" * 40 + "\n")


def test_compare_units_do_not_change_shared_logger_level(monkeypatch, logger):
    registry = _registry_with_fake_http(
        monkeypatch,
        {"loud": FakeResponse(200, b"ok:a"), "quiet": FakeResponse(200, b"ok:b")},
    )
    configs = [
        Config(provider="loud", model="l", max_retries=0, log_level="debug"),
        Config(provider="quiet", model="q", max_retries=0, log_level="error"),
    ]

    compare_providers(Context.background(), Prompt("Hi"), registry, logger, *configs)

    assert logger.level is LogLevel.INFO
    # Only the debug-level unit lets its option debug records through.
    assert logger.messages("debug").count("Option set") == 2
