from .prompt import Prompt, PromptSection, new_prompt
from .config import Config
from .context import Context
from .logger import LeveledLogger, LogLevel, Logger, LoguruLogger, NopLogger, get_logger, scoped_logger
from .errors import (
    LLMError,
    RequestError,
    ResponseError,
    APIError,
    ProviderResolutionError,
    EncodingError,
    DecodingError,
    CancellationError,
    GenerationError,
)
from .providers.provider import Provider
from .providers.ollama_provider import OllamaProvider
from .api_registry import ProviderRegistry, DEFAULT_REGISTRY, get_client, list_providers
from .llm import LLM, GenerationEngine, GenerationResult, new_llm, try_generate
from .compare import ComparisonResult, compare_providers, format_comparison_results, print_comparison_results

__all__ = [
    "Prompt",
    "PromptSection",
    "new_prompt",
    "Config",
    "Context",
    "LogLevel",
    "Logger",
    "LoguruLogger",
    "NopLogger",
    "get_logger",
    "scoped_logger",
    "LeveledLogger",
    "LLMError",
    "RequestError",
    "ResponseError",
    "APIError",
    "ProviderResolutionError",
    "EncodingError",
    "DecodingError",
    "CancellationError",
    "GenerationError",
    "Provider",
    "OllamaProvider",
    "ProviderRegistry",
    "DEFAULT_REGISTRY",
    "get_client",
    "list_providers",
    "LLM",
    "GenerationEngine",
    "GenerationResult",
    "new_llm",
    "try_generate",
    "ComparisonResult",
    "compare_providers",
    "format_comparison_results",
    "print_comparison_results",
]
