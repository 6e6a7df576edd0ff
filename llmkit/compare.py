"""Side-by-side comparison of several provider configurations.

:func:`compare_providers` sends the same prompt to every given
:class:`~llmkit.config.Config` in parallel, one worker thread per config,
and returns one :class:`ComparisonResult` per config in the order the
workers finished.  Failures (including an unknown provider) are recorded
in the result instead of being raised.
"""

from __future__ import annotations

import queue
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, TextIO

from .api_registry import ProviderRegistry
from .config import Config
from .context import Context
from .llm import new_llm
from .logger import Logger, scoped_logger
from .prompt import Prompt

RULE = "-" * 40


@dataclass
class ComparisonResult:
    provider: str
    model: str
    response: str = ""
    error: Optional[BaseException] = None


def _run_one(
    ctx: Context,
    prompt: Prompt,
    registry: ProviderRegistry,
    logger: Logger,
    config: Config,
    results: "queue.Queue[ComparisonResult]",
) -> None:
    result = ComparisonResult(provider=config.provider, model=config.model)
    try:
        # Each unit owns its logger so its config's level stays its own.
        llm = new_llm(config, scoped_logger(logger, config.provider), registry)
        result.response, _ = llm.generate(ctx, prompt)
    except Exception as exc:
        result.error = exc
    results.put(result)


def compare_providers(
    ctx: Context,
    prompt: Prompt,
    registry: ProviderRegistry,
    logger: Logger,
    *configs: Config,
) -> List[ComparisonResult]:
    """Run ``prompt`` against every config concurrently.

    Returns
    -------
    list of ComparisonResult
        Exactly one entry per config, ordered by completion time.
    """
    if not configs:
        return []

    results: "queue.Queue[ComparisonResult]" = queue.Queue()
    with ThreadPoolExecutor(max_workers=len(configs), thread_name_prefix="llmkit-compare") as executor:
        for config in configs:
            executor.submit(_run_one, ctx, prompt, registry, logger, config, results)

    collected: List[ComparisonResult] = []
    while not results.empty():
        collected.append(results.get_nowait())
    return collected


def format_comparison_results(results: List[ComparisonResult]) -> str:
    """Render comparison results as plain text."""
    lines = []
    for result in results:
        lines.append(f"Provider: {result.provider}, Model: {result.model}")
        if result.error is not None:
            lines.append(f"Error: {result.error}")
        else:
            lines.append(f"Response: {result.response}")
        lines.append(RULE)
    return "\n".join(lines) + ("\n" if lines else "")


def print_comparison_results(results: List[ComparisonResult], file: Optional[TextIO] = None) -> None:
    """Write :func:`format_comparison_results` output to ``file`` (stdout by default)."""
    print(format_comparison_results(results), end="", file=file)


__all__ = [
    "ComparisonResult",
    "compare_providers",
    "format_comparison_results",
    "print_comparison_results",
]
