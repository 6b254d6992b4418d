"""Fingerprint derivation for request descriptors.

A fingerprint is the SHA-256 hex digest of the compact JSON encoding of
``{"mode", "modelHint", "context"}`` where the context has been
canonicalized: mapping keys sorted, sequence order kept, integral floats
folded to ints. Nothing machine-local or time-dependent enters the digest.
"""

import hashlib
import json
import math
from collections.abc import Mapping
from typing import Any

from response_cache.config import Settings, settings as default_settings
from response_cache.entities import RequestDescriptor
from response_cache.exceptions import MalformedDescriptorError


def canonicalize(value: Any) -> Any:
    """Return a canonical copy of ``value`` suitable for hashing.

    Raises:
        MalformedDescriptorError: On circular references, non-string mapping
            keys, non-finite floats or values JSON cannot represent.
    """
    return _canonicalize(value, ())


def _canonicalize(value: Any, path: tuple[int, ...]) -> Any:
    if value is None or isinstance(value, (str, bool)):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise MalformedDescriptorError(f"Non-finite number in context: {value!r}")
        return int(value) if value.is_integer() else value

    if isinstance(value, (Mapping, list, tuple)):
        if id(value) in path:
            raise MalformedDescriptorError("Circular reference in context")
        path = path + (id(value),)

        if isinstance(value, Mapping):
            for key in value:
                if not isinstance(key, str):
                    raise MalformedDescriptorError(f"Context keys must be strings, got {key!r}")
            return {key: _canonicalize(value[key], path) for key in sorted(value)}
        return [_canonicalize(item, path) for item in value]

    raise MalformedDescriptorError(
        f"Unsupported value of type {type(value).__name__} in context"
    )


def resolve_model_hint(mode: str, settings: Settings | None = None) -> str:
    """Resolve the model hint for a mode from configuration only."""
    settings = settings or default_settings
    overrides = dict(settings.model_hint_overrides)
    if mode in overrides:
        return overrides[mode]
    if mode in settings.high_yield_modes:
        return settings.high_yield_model_hint
    return settings.default_model_hint


def build_descriptor(mode: str, context: Any, settings: Settings | None = None) -> RequestDescriptor:
    """Create a descriptor for ``mode``/``context`` with the configured model hint."""
    return RequestDescriptor(
        mode=mode,
        model_hint=resolve_model_hint(mode, settings),
        context=context,
    )


def serialize_descriptor(descriptor: RequestDescriptor) -> str:
    """Encode a descriptor as the exact string that gets hashed."""
    record = {
        "mode": descriptor.mode,
        "modelHint": descriptor.model_hint,
        "context": canonicalize(descriptor.context),
    }
    return json.dumps(record, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def compute_fingerprint(descriptor: RequestDescriptor) -> str:
    """Compute the 64-character hex fingerprint of a descriptor."""
    return hashlib.sha256(serialize_descriptor(descriptor).encode("utf-8")).hexdigest()
