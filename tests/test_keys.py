"""Tests for fingerprint derivation: determinism and sensitivity."""

from __future__ import annotations

import pytest

from response_cache.config import Settings
from response_cache.entities import RequestDescriptor
from response_cache.exceptions import MalformedDescriptorError
from response_cache.keys import (
    build_descriptor,
    canonicalize,
    compute_fingerprint,
    resolve_model_hint,
    serialize_descriptor,
)


def fp(context, mode: str = "summary", hint: str = "anthropic:claude-sonnet-4") -> str:
    return compute_fingerprint(RequestDescriptor(mode=mode, model_hint=hint, context=context))


class TestCanonicalize:
    """Mappings are key-sorted, sequences keep their order."""

    def test_sorts_nested_mapping_keys(self) -> None:
        result = canonicalize({"b": 1, "a": {"d": 2, "c": 3}})
        assert list(result) == ["a", "b"]
        assert list(result["a"]) == ["c", "d"]

    def test_preserves_sequence_order(self) -> None:
        assert canonicalize([3, 1, 2]) == [3, 1, 2]

    def test_canonicalizes_mappings_inside_sequences(self) -> None:
        result = canonicalize([{"z": 1, "y": 2}])
        assert list(result[0]) == ["y", "z"]

    def test_tuples_become_lists(self) -> None:
        assert canonicalize((1, 2)) == [1, 2]

    def test_integral_floats_become_ints(self) -> None:
        result = canonicalize({"n": 1.0, "m": 2.5})
        assert result == {"m": 2.5, "n": 1}
        assert type(result["n"]) is int

    def test_booleans_are_not_numbers(self) -> None:
        assert canonicalize(True) is True
        assert canonicalize({"flag": False}) == {"flag": False}

    def test_none_and_empty_mapping_are_distinct(self) -> None:
        assert canonicalize(None) is None
        assert canonicalize({}) == {}

    def test_shared_references_are_not_circular(self) -> None:
        shared = {"id": 1}
        assert canonicalize({"a": shared, "b": shared}) == {"a": {"id": 1}, "b": {"id": 1}}

    def test_circular_reference_raises(self) -> None:
        context: dict = {"a": 1}
        context["self"] = context
        with pytest.raises(MalformedDescriptorError):
            canonicalize(context)

    @pytest.mark.parametrize(
        "context",
        [
            {"value": float("nan")},
            {"value": float("inf")},
            {1: "non-string key"},
            {"tags": {"a", "b"}},
            {"when": object()},
        ],
    )
    def test_unrepresentable_values_raise(self, context) -> None:
        with pytest.raises(MalformedDescriptorError):
            canonicalize(context)

    def test_malformed_descriptor_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            canonicalize({"value": float("nan")})


class TestComputeFingerprint:
    """Fingerprints should be deterministic and collision-resistant."""

    def test_returns_hex_sha256(self) -> None:
        key = fp({"topicIds": [1, 2, 3]})
        assert len(key) == 64
        int(key, 16)  # Should not raise if valid hex

    def test_deterministic(self) -> None:
        assert fp({"topicIds": [1, 2, 3]}) == fp({"topicIds": [1, 2, 3]})

    def test_key_order_does_not_matter(self) -> None:
        first = {"topic": "cardiology", "options": {"length": "short", "language": "cs"}}
        second = {"options": {"language": "cs", "length": "short"}, "topic": "cardiology"}
        assert fp(first) == fp(second)

    def test_sequence_order_matters(self) -> None:
        assert fp({"topicIds": [1, 2, 3]}) != fp({"topicIds": [3, 2, 1]})

    def test_identical_elements_in_any_order_match(self) -> None:
        assert fp({"ids": [7, 7]}) == fp({"ids": [7, 7]})

    def test_model_hint_matters(self) -> None:
        context = {"topicIds": [1]}
        assert fp(context, hint="anthropic:claude-sonnet-4") != fp(context, hint="google:gemini-1.5-flash")

    def test_mode_matters(self) -> None:
        assert fp({"topicIds": [1]}, mode="summary") != fp({"topicIds": [1]}, mode="quiz")

    def test_numeric_formatting_is_normalized(self) -> None:
        assert fp({"difficulty": 1}) == fp({"difficulty": 1.0})

    def test_none_and_empty_context_differ(self) -> None:
        assert fp(None) != fp({})

    def test_serialized_form_is_compact_and_ordered(self) -> None:
        descriptor = RequestDescriptor(mode="quiz", model_hint="h", context={"b": 1, "a": "č"})
        assert serialize_descriptor(descriptor) == '{"mode":"quiz","modelHint":"h","context":{"a":"č","b":1}}'

    def test_null_context_serialization(self) -> None:
        descriptor = RequestDescriptor(mode="summary", model_hint="anthropic:claude-sonnet-4", context=None)
        assert serialize_descriptor(descriptor) == (
            '{"mode":"summary","modelHint":"anthropic:claude-sonnet-4","context":null}'
        )


class TestResolveModelHint:
    """Model hints come from configuration, never from runtime values."""

    def test_default_hint(self) -> None:
        settings = Settings(default_model_hint="anthropic:claude-sonnet-4")
        assert resolve_model_hint("summary", settings) == "anthropic:claude-sonnet-4"

    def test_high_yield_modes_use_gemini(self) -> None:
        settings = Settings(
            gemini_model="gemini-2.5-flash",
            high_yield_modes=("topic_generate_high_yield",),
        )
        assert resolve_model_hint("topic_generate_high_yield", settings) == "google:gemini-2.5-flash"

    def test_explicit_override_wins(self) -> None:
        settings = Settings(
            high_yield_modes=("topic_generate_high_yield",),
            model_hint_overrides=(("topic_generate_high_yield", "openai:gpt-4o"),),
        )
        assert resolve_model_hint("topic_generate_high_yield", settings) == "openai:gpt-4o"

    def test_changing_configuration_changes_fingerprint(self) -> None:
        before = build_descriptor("quiz", {"topicId": 4}, Settings(default_model_hint="anthropic:claude-sonnet-4"))
        after = build_descriptor("quiz", {"topicId": 4}, Settings(default_model_hint="openai:gpt-4o"))
        assert compute_fingerprint(before) != compute_fingerprint(after)
