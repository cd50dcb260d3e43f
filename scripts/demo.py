#!/usr/bin/env python3
"""
Demo script for the logo agent.

This script demonstrates brand recognition, candidate scoring and the
cache lifecycle with brands written in English, abbreviations and Chinese.
Fetching uses the network; brands whose sources are unreachable are reported
as failures.
"""

import asyncio
import tempfile
from pathlib import Path

from logo_agent.config import configure_logging
from logo_agent.entities import FetchCandidate
from logo_agent.repositories import JsonIndexRepository
from logo_agent.services import BrandResolver, LogoAgentService, QualityEvaluator


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def demo_recognition() -> None:
    """Demonstrate brand recognition."""
    print_section("Brand Recognition")

    resolver = BrandResolver()
    for name in ["McDonald's", "麦当劳", "sbux", "瑞幸", "Kentucky Fried Chicken", "doesnotexist"]:
        identity = resolver.resolve(name)
        resolved = identity.name if identity else "not found"
        print(f"  {name:<25} -> {resolved}")


def demo_scoring() -> None:
    """Demonstrate heuristic candidate scoring."""
    print_section("Candidate Scoring")

    png_header = b"\x89PNG\r\n\x1a\n"
    candidates = [
        FetchCandidate(data=png_header + b"\x00" * (5 * 1024), source="small.png"),
        FetchCandidate(data=png_header + b"\x00" * (300 * 1024), source="large.png"),
        FetchCandidate(data=b"not an image" * 200, source="bogus.bin"),
    ]

    evaluator = QualityEvaluator()
    for scored in evaluator.rank(candidates):
        q = scored.quality
        print(
            f"  {scored.source:<10} overall={q.overall:.3f} "
            f"resolution={q.resolution:.1f} color={q.color:.1f}"
        )


async def demo_cache(workdir: Path) -> None:
    """Demonstrate acquisition and the cache lifecycle."""
    print_section("Acquisition and Cache")

    agent = LogoAgentService.create(
        index_store=JsonIndexRepository.create(workdir / "index.json"),
        cache_dir=str(workdir / "logos"),
    )

    try:
        print("\n🔍 Preloading brands...")
        summary = await agent.preload(["mcdonalds", "sbux", "瑞幸", "kfc"])
        print(f"  ✓ Loaded: {', '.join(summary.loaded) or '-'}")
        for name, error in summary.failed.items():
            print(f"  ✗ {name}: {error}")

        print("\n📦 Second request (served from cache when loaded):")
        for name in summary.loaded:
            ref = await agent.acquire(name)
            print(f"  {name:<10} {ref.url} (cached={ref.from_cache}, score={ref.quality_score:.3f})")

        stats = agent.stats()
        print(f"\n📊 {stats.total_count} entries, {stats.total_size} / {stats.max_size} bytes")
        print(f"   Metrics: {agent.metrics.to_dict()}")

        print(f"\n🧹 Cleared {agent.clear_all()} entries")
    finally:
        await agent.aclose()


def main() -> None:
    """Run all demos."""
    configure_logging("WARNING")
    demo_recognition()
    demo_scoring()
    with tempfile.TemporaryDirectory() as tmp:
        asyncio.run(demo_cache(Path(tmp)))


if __name__ == "__main__":
    main()
