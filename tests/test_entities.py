"""Tests for artifacts, usage info and cost bookkeeping."""

from __future__ import annotations

import pytest

from response_cache.entities import Artifact, CacheStatsEntity, UsageInfo
from response_cache.pricing import estimate_cost


class TestEstimateCost:
    def test_known_model(self) -> None:
        # 1M input at $2.50 + 1M output at $10.00
        assert estimate_cost("gpt-4o", 1_000_000, 1_000_000) == pytest.approx(12.5)

    def test_unknown_model_is_free(self) -> None:
        assert estimate_cost("some-local-model", 5000, 5000) == 0.0
        assert estimate_cost(None, 5000, 5000) == 0.0


class TestArtifact:
    def test_from_generation_splits_usage_from_content(self) -> None:
        artifact = Artifact.from_generation(
            {
                "text": "Beta blockers reduce...",
                "model": "claude-sonnet-4-20250514",
                "input_tokens": 300,
                "output_tokens": 700,
                "cost_usd": 0.0114,
            }
        )

        assert artifact.content == {"text": "Beta blockers reduce..."}
        assert artifact.text == "Beta blockers reduce..."
        assert artifact.usage == UsageInfo(
            model="claude-sonnet-4-20250514", tokens_used=1000, cost_usd=0.0114
        )

    def test_missing_cost_is_estimated(self) -> None:
        artifact = Artifact.from_generation(
            {"text": "t", "model": "gemini-2.5-flash", "input_tokens": 1_000_000, "output_tokens": 0}
        )

        assert artifact.usage is not None
        assert artifact.usage.cost_usd == pytest.approx(0.15)

    def test_reported_zero_cost_is_kept(self) -> None:
        artifact = Artifact.from_generation({"text": "t", "model": "gpt-4o", "input_tokens": 10, "cost_usd": 0})

        assert artifact.usage is not None
        assert artifact.usage.cost_usd == 0

    def test_no_usage_fields_means_no_usage(self) -> None:
        artifact = Artifact.from_generation({"questions": [1, 2]})

        assert artifact.usage is None
        assert artifact.text is None

    def test_non_mapping_result_becomes_content(self) -> None:
        assert Artifact.from_generation("an answer") == Artifact(content="an answer")
        assert Artifact.from_generation(["q1", "q2"]) == Artifact(content=["q1", "q2"])

    def test_normalized_uses_json_form(self) -> None:
        usage = UsageInfo(model="m", tokens_used=3, cost_usd=0.1)
        artifact = Artifact(content={"ids": (1, 2), 7: "x"}, usage=usage)

        assert artifact.normalized() == Artifact(content={"ids": [1, 2], "7": "x"}, usage=usage)

    def test_normalized_keeps_unencodable_content(self) -> None:
        artifact = Artifact(content={"when": object()})

        assert artifact.normalized() is artifact

    def test_dict_round_trip(self) -> None:
        artifact = Artifact(content={"text": "x"}, usage=UsageInfo(model="m", tokens_used=3, cost_usd=0.1))

        assert Artifact.from_dict(artifact.to_dict()) == artifact
        assert Artifact.from_dict(Artifact(content=[1]).to_dict()) == Artifact(content=[1])


class TestHitRate:
    def test_zero_when_empty(self) -> None:
        assert CacheStatsEntity().hit_rate == 0.0

    def test_unread_entries_count_as_misses(self) -> None:
        assert CacheStatsEntity(total_entries=4, total_hits=0).hit_rate == 0.0

    def test_percentage_rounded(self) -> None:
        assert CacheStatsEntity(total_entries=1, total_hits=2).hit_rate == 66.67
