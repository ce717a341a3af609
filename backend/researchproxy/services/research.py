"""Research session service - runs search, prompt composition and completion for one query."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime

from ..config.constants import DEFAULT_MODEL
from ..llm.consumer import ReportAccumulator
from ..llm.prompt import build_messages, build_research_prompt
from ..llm.streaming import CompletionProxy
from ..search.aggregator import SearchAggregator
from ..search.base import SearchResponse

logger = logging.getLogger(__name__)


@dataclass
class ResearchReport:
    """Outcome of one completed research run."""

    query: str
    provider: str
    model: str
    search: SearchResponse
    prompt: str
    content: str
    reasoning: str
    started_at: datetime


class ResearchSession:
    """
    One query end to end: search, prompt, streamed report.

    ``cancel()`` is the single abort signal for the run. It stops the search if
    it is still in flight and the completion stream if it has started; the
    aborted run returns None instead of raising.
    """

    def __init__(self, aggregator: SearchAggregator, proxy: CompletionProxy):
        self.aggregator = aggregator
        self.proxy = proxy
        self.accumulator = ReportAccumulator()
        self._task: asyncio.Task | None = None
        self._cancel_requested = False

    def cancel(self) -> None:
        """Abort the run in progress (no-op when nothing is running)."""
        self._cancel_requested = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def run(
        self, query: str, provider: str = "serper", model: str = DEFAULT_MODEL
    ) -> ResearchReport | None:
        """
        Run the research flow.

        Returns:
            ResearchReport, or None if the run was aborted with ``cancel()``

        Raises:
            InputError, ConfigurationError, EmptyResultError, UpstreamError
        """
        if self._cancel_requested:
            logger.info("Research request was aborted before it started")
            return None

        self._task = asyncio.create_task(self._run(query, provider, model))
        try:
            return await self._task
        except asyncio.CancelledError:
            if not self._cancel_requested:
                # Cancelled from outside, not through this session
                raise
            logger.info(f"Research request for '{query[:50]}' was aborted")
            return None
        finally:
            self._task = None

    async def _run(self, query: str, provider: str, model: str) -> ResearchReport:
        started_at = datetime.now().astimezone()
        search = await self.aggregator.handle(provider, query)

        prompt = build_research_prompt(query, search, now=started_at)
        messages = build_messages(query, prompt)

        async for event in self.proxy.complete(messages, model):
            self.accumulator.add_event(event)

        return ResearchReport(
            query=query,
            provider=provider,
            model=model,
            search=search,
            prompt=prompt,
            content=self.accumulator.content,
            reasoning=self.accumulator.reasoning,
            started_at=started_at,
        )
