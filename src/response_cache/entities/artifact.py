"""Generation artifact and usage entities."""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from response_cache.pricing import estimate_cost

# Fields of a generation result that describe usage rather than content
_USAGE_FIELDS = ("model", "input_tokens", "output_tokens", "cost_usd")


@dataclass(frozen=True)
class UsageInfo:
    """Model usage attached to an artifact, used for cost reporting.

    Attributes:
        model: Upstream model identifier
        tokens_used: Total tokens (input + output)
        cost_usd: Cost of producing the artifact in USD
    """

    model: str | None = None
    tokens_used: int | None = None
    cost_usd: float | None = None

    @classmethod
    def from_tokens(
        cls,
        model: str | None,
        input_tokens: int = 0,
        output_tokens: int = 0,
        cost_usd: float | None = None,
    ) -> "UsageInfo":
        """Build usage from token counts, estimating cost when it was not reported."""
        if cost_usd is None:
            cost_usd = estimate_cost(model, input_tokens, output_tokens)
        return cls(model=model, tokens_used=input_tokens + output_tokens, cost_usd=cost_usd)

    def to_dict(self) -> dict[str, Any]:
        return {"model": self.model, "tokens_used": self.tokens_used, "cost_usd": self.cost_usd}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UsageInfo":
        return cls(
            model=data.get("model"),
            tokens_used=data.get("tokens_used"),
            cost_usd=data.get("cost_usd"),
        )


@dataclass(frozen=True)
class Artifact:
    """The result of a generation call, as cached and returned to callers.

    Content is stored as JSON, so it comes back from the cache in JSON
    form: tuples as lists, mapping keys as strings. ``normalized()`` applies
    the same conversion to a freshly generated artifact.

    Attributes:
        content: JSON-serializable payload (e.g. ``{"text": ...}``)
        usage: Optional usage info; None when the generator reported none
    """

    content: Any
    usage: UsageInfo | None = None

    @classmethod
    def from_generation(cls, result: Any) -> "Artifact":
        """Build an artifact from a generation result.

        Accepts the ``{text, model, input_tokens, output_tokens, cost_usd}``
        shape; usage fields are lifted into UsageInfo and everything else
        becomes the content. Any other result (a string, a list) becomes the
        content as-is, with no usage.
        """
        if not isinstance(result, Mapping):
            return cls(content=result)

        content = {key: value for key, value in result.items() if key not in _USAGE_FIELDS}
        if not any(key in result for key in _USAGE_FIELDS):
            return cls(content=content)

        usage = UsageInfo.from_tokens(
            model=result.get("model"),
            input_tokens=int(result.get("input_tokens") or 0),
            output_tokens=int(result.get("output_tokens") or 0),
            cost_usd=result.get("cost_usd"),
        )
        return cls(content=content, usage=usage)

    @property
    def text(self) -> str | None:
        """Shortcut for ``content["text"]`` when the content is a text payload."""
        if isinstance(self.content, Mapping):
            return self.content.get("text")
        return None

    def normalized(self) -> "Artifact":
        """Return the artifact as it will read back from the cache.

        Content that cannot be encoded as JSON is returned unchanged; the
        store will refuse to cache it anyway.
        """
        try:
            content = json.loads(json.dumps(self.content, ensure_ascii=False, allow_nan=False))
        except (TypeError, ValueError):
            return self
        return Artifact(content=content, usage=self.usage)

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "usage": self.usage.to_dict() if self.usage else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Artifact":
        usage = data.get("usage")
        return cls(
            content=data.get("content"),
            usage=UsageInfo.from_dict(usage) if usage else None,
        )
