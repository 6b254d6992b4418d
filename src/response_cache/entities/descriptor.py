"""Request descriptor domain entity."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RequestDescriptor:
    """What was asked of the generator: the input to fingerprinting.

    Attributes:
        mode: Kind of generation (e.g. "summary", "quiz", "review")
        model_hint: Upstream model family servicing this mode
        context: Nested request parameters (topic ids, user text, options)
    """

    mode: str
    model_hint: str
    context: Any = None
