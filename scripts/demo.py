#!/usr/bin/env python3
"""
Demo script for the AI response cache.

Walks through a miss, a hit, an order-sensitive miss and the admin
statistics against a live Redis (REDIS_URL), using a stand-in generator
instead of a real model call.
"""

import asyncio
import time

from response_cache import Artifact, RedisResponseCacheRepository, ResponseCacheService
from response_cache.logging_config import configure_logging


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def fake_generate(mode: str, context: dict) -> Artifact:
    """Pretend to call an LLM: slow, and reports usage."""
    await asyncio.sleep(0.5)
    topics = ", ".join(str(topic_id) for topic_id in context.get("topicIds", []))
    return Artifact.from_generation(
        {
            "text": f"{mode} of topics {topics}",
            "model": "claude-sonnet-4-20250514",
            "input_tokens": 1200,
            "output_tokens": 800,
        }
    )


async def demo_invoke(cache: ResponseCacheService) -> None:
    """Demonstrate the cache-aware invocation path."""
    print_section("Cache-aware invocation")

    for context in (
        {"topicIds": [1, 2, 3]},
        {"topicIds": [1, 2, 3]},
        {"topicIds": [3, 2, 1]},
    ):
        start = time.time()
        result = await cache.invoke("summary", context, fake_generate)
        elapsed_ms = (time.time() - start) * 1000

        status = "HIT " if result.cached else "MISS"
        print(f"  {status} {context} -> {result.artifact.text!r} ({elapsed_ms:.0f} ms)")
        print(f"       metadata: {result.metadata.to_dict()}")


def demo_stats(cache: ResponseCacheService) -> None:
    """Show aggregate statistics."""
    print_section("Statistics")

    stats = cache.get_stats()
    print(f"  Entries:    {stats.total_entries}")
    print(f"  Hits:       {stats.total_hits}")
    print(f"  Cost saved: ${stats.total_cost_saved:.4f}")
    print(f"  Hit rate:   {stats.hit_rate}%")
    for mode, mode_stats in stats.by_mode.items():
        print(f"  - {mode}: {mode_stats.count} entries, {mode_stats.hits} hits, ${mode_stats.cost_saved:.4f} saved")


async def main() -> None:
    configure_logging(level="WARNING")

    cache = ResponseCacheService.create(repository=RedisResponseCacheRepository.create(key_prefix="demo_cache"))
    if not cache.is_healthy():
        print("Redis is not reachable; every call will be a miss.")
        await demo_invoke(cache)
        return

    cache.clear()
    await demo_invoke(cache)
    demo_stats(cache)

    print_section("Cleanup")
    print(f"  Cleared {cache.clear('summary')} summary entries")


if __name__ == "__main__":
    asyncio.run(main())
