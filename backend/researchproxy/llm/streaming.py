"""
Streaming chat-completion proxy.

Selects a backend by model name, opens one streaming request, and re-frames
the upstream byte stream into normalized ``CompletionEvent`` objects that are
serialized as newline-delimited JSON for the browser.
"""

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from typing import Any

import httpx

from ..config.constants import COMPLETION_TEMPERATURE, DEFAULT_MODEL, THINK_OPEN
from ..config.settings import Settings, settings
from ..exceptions import StreamParseError, UpstreamError
from ..schemas import ChatMessage
from ..types import CompletionChunkDict, DeltaDict
from ..utils.error_handling import extract_error_message
from .backends import CompletionBackend, is_reasoning_model, select_backend
from .framing import LineBuffer, extract_payload, parse_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletionEvent:
    """One unit of new model output."""

    id: str
    content_delta: str = ""
    reasoning_delta: str = ""

    def to_wire(self, include_reasoning: bool = False) -> CompletionChunkDict:
        delta: DeltaDict = {"content": self.content_delta}
        if include_reasoning or self.reasoning_delta:
            delta["reasoning_content"] = self.reasoning_delta
        return {"id": self.id, "choices": [{"delta": delta}]}

    def to_line(self, include_reasoning: bool = False) -> str:
        return json.dumps(self.to_wire(include_reasoning)) + "\n"


def split_delta(text: str, reasoning_capable: bool) -> tuple[str, str]:
    """
    Route one delta to the content or reasoning channel.

    Returns ``(content, reasoning)``. For reasoning-capable models a delta that
    starts with ``<think>`` goes entirely to reasoning; anything else goes
    entirely to content. Decided per delta, with no carried-over mode.
    """
    if reasoning_capable and text.startswith(THINK_OPEN):
        return "", text
    return text, ""


def event_from_payload(payload: dict[str, Any], model: str) -> CompletionEvent:
    """Build a CompletionEvent from one parsed upstream chunk."""
    choices = payload.get("choices") or []
    if not isinstance(choices, list):
        raise StreamParseError("Stream chunk 'choices' is not a list")

    delta: dict[str, Any] = {}
    if choices and isinstance(choices[0], dict):
        delta = choices[0].get("delta") or {}
    if not isinstance(delta, dict):
        raise StreamParseError("Stream chunk 'delta' is not an object")

    text = delta.get("content") or ""
    if not isinstance(text, str):
        raise StreamParseError("Stream chunk content is not text")

    reasoning_capable = is_reasoning_model(model)
    content, reasoning = split_delta(text, reasoning_capable)

    # DeepSeek's reasoner streams its thinking in a dedicated field with empty content
    native_reasoning = delta.get("reasoning_content")
    if reasoning_capable and not text and isinstance(native_reasoning, str):
        reasoning = native_reasoning

    return CompletionEvent(id=str(payload.get("id") or ""), content_delta=content, reasoning_delta=reasoning)


def serialize_messages(messages: Sequence[ChatMessage | dict[str, Any]]) -> list[dict[str, Any]]:
    serialized = []
    for message in messages:
        if isinstance(message, ChatMessage):
            serialized.append(message.model_dump())
        else:
            serialized.append({"role": message["role"], "content": message["content"]})
    return serialized


class CompletionStream:
    """
    Async iterator over the normalized events of one open upstream stream.

    Owns the line buffer and the upstream response for a single request; both
    are released when iteration finishes, fails or is cancelled.
    """

    def __init__(
        self,
        response: httpx.Response,
        model: str,
        backend: CompletionBackend,
        deadline: float,
        timeout: float,
        owned_client: httpx.AsyncClient | None = None,
    ):
        self.model = model
        self.backend = backend
        self.reasoning_capable = is_reasoning_model(model)
        self._response = response
        self._deadline = deadline
        self._timeout = timeout
        self._owned_client = owned_client
        self._buffer = LineBuffer()
        self._closed = False

    def __aiter__(self) -> AsyncIterator[CompletionEvent]:
        return self._events()

    async def __aenter__(self) -> "CompletionStream":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._response.aclose()
        if self._owned_client is not None:
            await self._owned_client.aclose()

    async def _events(self) -> AsyncIterator[CompletionEvent]:
        chunks = self._response.aiter_bytes()
        count = 0
        try:
            while True:
                try:
                    async with asyncio.timeout_at(self._deadline):
                        chunk = await anext(chunks)
                except StopAsyncIteration:
                    break
                except TimeoutError as e:
                    logger.error(f"{self.backend.label} stream exceeded {self._timeout}s for {self.model}")
                    raise UpstreamError(
                        f"{self.backend.label} response timed out after {self._timeout}s",
                        provider=self.backend.name,
                    ) from e
                except httpx.HTTPError as e:
                    logger.error(f"Error reading {self.backend.label} stream: {e}")
                    raise UpstreamError(
                        f"Error reading {self.backend.label} stream: {e}", provider=self.backend.name
                    ) from e

                for line in self._buffer.feed(chunk):
                    event = self._event_from_line(line)
                    if event is not None:
                        count += 1
                        yield event

            remainder = self._buffer.flush()
            if remainder is not None:
                event = self._event_from_line(remainder, trailing=True)
                if event is not None:
                    count += 1
                    yield event

            logger.info(f"{self.backend.label} stream for {self.model} finished after {count} events")
        except asyncio.CancelledError:
            logger.info(f"{self.backend.label} stream for {self.model} was aborted by the caller")
            raise
        finally:
            await self.aclose()

    def _event_from_line(self, line: str, trailing: bool = False) -> CompletionEvent | None:
        payload = extract_payload(line)
        if payload is None:
            return None
        try:
            return event_from_payload(parse_payload(payload), self.model)
        except StreamParseError as e:
            where = "final buffer" if trailing else "JSON line"
            logger.warning(f"Error parsing {where}: {e}. Problematic line: {payload[:200]}")
            return None

    async def iter_lines(self) -> AsyncIterator[str]:
        """Yield the normalized newline-delimited JSON lines sent to the browser."""
        try:
            async for event in self:
                yield event.to_line(self.reasoning_capable)
        except UpstreamError as e:
            # Headers are already sent; the only signal left is ending the stream abnormally
            logger.error(f"Error in stream processing: {e}")
            raise


class CompletionProxy:
    """Opens streaming chat completions against the backend a model maps to."""

    def __init__(self, app_settings: Settings | None = None, client: httpx.AsyncClient | None = None):
        self.settings = app_settings or settings
        self._client = client

    async def open(
        self, messages: Sequence[ChatMessage | dict[str, Any]], model: str = DEFAULT_MODEL
    ) -> CompletionStream:
        """
        Start a streaming completion.

        Args:
            messages: Ordered conversation sent to the model
            model: Model identifier; selects the backend

        Returns:
            CompletionStream ready to iterate

        Raises:
            ConfigurationError: If the selected backend has no credential (nothing is sent)
            UpstreamError: If the upstream refuses the request or cannot be reached
        """
        backend = select_backend(model)
        api_key = backend.api_key(self.settings)

        timeout = max(1, self.settings.completion_timeout)
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        body = {
            "model": model,
            "messages": serialize_messages(messages),
            "temperature": COMPLETION_TEMPERATURE,
            "stream": True,
            **backend.extra_params,
        }
        headers = {"Content-Type": "application/json", "Authorization": f"Bearer {api_key}"}

        owned_client = None
        client = self._client
        if client is None:
            owned_client = client = httpx.AsyncClient(timeout=httpx.Timeout(timeout))

        logger.info(f"Opening {backend.label} stream for model {model} ({len(body['messages'])} messages)")
        request = client.build_request("POST", backend.url, json=body, headers=headers)
        try:
            async with asyncio.timeout_at(deadline):
                response = await client.send(request, stream=True)
        except (TimeoutError, httpx.TimeoutException) as e:
            await _close(owned_client)
            logger.error(f"{backend.label} did not respond within {timeout}s")
            raise UpstreamError(f"{backend.label} request timed out", provider=backend.name) from e
        except httpx.RequestError as e:
            await _close(owned_client)
            logger.error(f"{backend.label} request error: {e}")
            raise UpstreamError(f"Failed to connect to {backend.label}: {e}", provider=backend.name) from e
        except BaseException:
            await _close(owned_client)
            raise

        if not response.is_success:
            try:
                await response.aread()
                detail = extract_error_message(response)
            except httpx.HTTPError:
                detail = None
            finally:
                await response.aclose()
                await _close(owned_client)
            logger.error(f"{backend.label} API error: {response.status_code} - {detail}")
            raise UpstreamError(
                detail or f"Failed to get response from {backend.label}",
                provider=backend.name,
                status_code=response.status_code,
            )

        return CompletionStream(response, model, backend, deadline, timeout, owned_client)

    async def complete(
        self, messages: Sequence[ChatMessage | dict[str, Any]], model: str = DEFAULT_MODEL
    ) -> AsyncIterator[CompletionEvent]:
        """Stream the completion events for ``messages``."""
        stream = await self.open(messages, model)
        async with stream:
            async for event in stream:
                yield event


async def _close(client: httpx.AsyncClient | None) -> None:
    if client is not None:
        await client.aclose()
