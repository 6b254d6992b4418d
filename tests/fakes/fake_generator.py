"""Instrumented generation collaborator for testing."""

from __future__ import annotations

from typing import Any

from response_cache.entities import Artifact


class CountingGenerator:
    """Async generate function that records every call, no LLM needed.

    Args:
        text: Text returned in each result; ``{n}`` is replaced by the call number.
        model: Model name reported in the usage info.
        cost_usd: Cost reported in the usage info.
        error: If set, raised on every call instead of returning.
    """

    def __init__(
        self,
        *,
        text: str = "generated #{n}",
        model: str = "x",
        cost_usd: float = 0.002,
        error: Exception | None = None,
    ) -> None:
        self._text = text
        self._model = model
        self._cost_usd = cost_usd
        self._error = error
        self.calls: list[tuple[str, Any]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def __call__(self, mode: str, context: Any) -> Artifact:
        self.calls.append((mode, context))
        if self._error is not None:
            raise self._error
        return Artifact.from_generation(
            {
                "text": self._text.format(n=self.call_count),
                "model": self._model,
                "input_tokens": 120,
                "output_tokens": 80,
                "cost_usd": self._cost_usd,
            }
        )
