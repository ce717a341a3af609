#!/usr/bin/env python3
"""
Run one research query from the command line.

Searches with the chosen provider, streams the report from the chosen model and
prints it. Ctrl+C aborts both the search and the stream.

Usage:
    python scripts/research.py "capital of France" --provider serper --model gpt-4o-mini
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

# Add parent directory to path to import researchproxy modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from researchproxy.config import DEFAULT_MODEL, settings
from researchproxy.exceptions import EmptyResultError, ResearchProxyError
from researchproxy.llm import CompletionProxy
from researchproxy.search import SearchAggregator
from researchproxy.services import ResearchReport, ResearchSession


def print_report(report: ResearchReport, show_reasoning: bool, show_sources: bool) -> None:
    if show_sources:
        print(f"Sources ({len(report.search.results)}):")
        for i, result in enumerate(report.search.results, 1):
            print(f"  {i}. {result.title} - {result.url}")
        print()

    if show_reasoning and report.reasoning.strip():
        print("Reasoning:")
        print(report.reasoning.strip())
        print()

    print(report.content.strip())


async def run(args: argparse.Namespace) -> int:
    session = ResearchSession(SearchAggregator(settings), CompletionProxy(settings))

    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, session.cancel)
    except NotImplementedError:
        # Windows event loops have no signal handlers; Ctrl+C then raises KeyboardInterrupt
        pass

    try:
        report = await session.run(args.query, provider=args.provider, model=args.model)
    except EmptyResultError as e:
        print(str(e), file=sys.stderr)
        return 2
    except ResearchProxyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if report is None:
        print("Aborted.", file=sys.stderr)
        return 130

    print_report(report, args.reasoning, args.sources)
    return 0


def main():
    parser = argparse.ArgumentParser(description="Search the web and stream a research report")
    parser.add_argument("query", type=str, help="Research question")
    parser.add_argument(
        "--provider",
        type=str,
        default="serper",
        help="Search provider name (serper, gnews, gbrains, bing, mojeek, scraper)",
    )
    parser.add_argument("--model", type=str, default=DEFAULT_MODEL, help="Completion model")
    parser.add_argument("--reasoning", action="store_true", help="Print the model's reasoning")
    parser.add_argument("--sources", action="store_true", help="Print the search results used")
    parser.add_argument("--verbose", action="store_true", help="Enable INFO logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
