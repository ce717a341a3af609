#!/usr/bin/env python3
"""
Script to check which search providers and completion backends are configured.

Optionally runs a live query against every configured search provider.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path to import researchproxy modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from researchproxy.config import COMPLETION_BACKENDS, SEARCH_PROVIDER_CONFIG, settings, validate_config
from researchproxy.exceptions import ResearchProxyError
from researchproxy.search import SearchAggregator


def check_configuration() -> list[str]:
    """Print the configuration report and return the servable provider names."""
    report = validate_config(settings)

    print("Search providers:")
    for name, config in SEARCH_PROVIDER_CONFIG.items():
        if name in report.search_providers:
            print(f"  ✅ {name:<8} {config['label']}  -> POST /api/{name}")
        elif config["credential"] is None:
            print(f"  ⚪ {name:<8} {config['label']}  (set ENABLE_DUCKDUCKGO=true to enable)")
        else:
            print(f"  ❌ {name:<8} {config['label']}  ({config['credential'].upper()} not set)")

    print("\nCompletion backends:")
    for name, backend in COMPLETION_BACKENDS.items():
        marker = "✅" if name in report.completion_backends else "❌"
        print(f"  {marker} {name:<8} {backend['label']}")

    if not report.completion_available:
        print("\n⚠️  No completion backend is configured; the server will refuse to start.")

    return list(report.search_providers)


async def probe_providers(providers: list[str], query: str) -> None:
    """Run one live query against each provider and summarize the outcome."""
    aggregator = SearchAggregator(settings)
    for name in providers:
        try:
            response = await aggregator.handle(name, query)
        except ResearchProxyError as e:
            print(f"  ❌ {name}: {type(e).__name__}: {e}")
            continue
        answer = " (with answer)" if response.answer else ""
        print(f"  ✅ {name}: {len(response.results)} results, {len(response.images)} images{answer}")


def main():
    parser = argparse.ArgumentParser(description="Check search provider and completion backend configuration")
    parser.add_argument(
        "--probe",
        metavar="QUERY",
        help="Run QUERY against every configured search provider",
    )
    args = parser.parse_args()

    providers = check_configuration()
    if args.probe:
        if not providers:
            print("\nNo search provider to probe.")
            return 1
        print(f"\nProbing providers with '{args.probe}':")
        asyncio.run(probe_providers(providers, args.probe))
    return 0


if __name__ == "__main__":
    sys.exit(main())
