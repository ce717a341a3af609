"""
Unit tests for the streaming completion proxy.

Tests cover:
- Content / reasoning channel split
- Backend selection and request body
- Stream re-framing (sentinels, malformed lines, chunk boundaries, trailing data)
- Failures before and after the stream starts
- Total-duration timeout
"""

import asyncio
import json

import httpx
import pytest

from researchproxy.exceptions import ConfigurationError, UpstreamError
from researchproxy.llm.backends import is_reasoning_model, select_backend
from researchproxy.llm.streaming import (
    CompletionEvent,
    CompletionProxy,
    event_from_payload,
    split_delta,
)
from researchproxy.schemas import ChatMessage
from tests.factories import (
    UpstreamStub,
    build_settings,
    completion_chunk,
    sse_body,
    split_bytes,
    streaming_handler,
)

DEEPSEEK_URL = "https://api.deepseek.com/chat/completions"
OPENAI_URL = "https://api.openai.com/v1/chat/completions"
GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"

MESSAGES = [ChatMessage(role="user", content="capital of France")]


async def collect(proxy: CompletionProxy, model: str) -> list[CompletionEvent]:
    return [event async for event in proxy.complete(MESSAGES, model)]


@pytest.mark.unit
class TestSplitDelta:
    """Test per-event routing between content and reasoning."""

    def test_think_prefix_goes_to_reasoning(self):
        assert split_delta("<think>partial", reasoning_capable=True) == ("", "<think>partial")

    def test_plain_text_goes_to_content(self):
        assert split_delta("answer text", reasoning_capable=True) == ("answer text", "")

    def test_non_reasoning_model_never_splits(self):
        """Test that think markers are ordinary content for non-reasoning models."""
        assert split_delta("<think>partial", reasoning_capable=False) == ("<think>partial", "")

    def test_marker_not_at_start_is_content(self):
        """Test that the decision only looks at the delta's leading characters."""
        assert split_delta("so <think>", reasoning_capable=True) == ("so <think>", "")


@pytest.mark.unit
class TestBackendSelection:
    """Test model to backend mapping."""

    @pytest.mark.parametrize(
        "model,backend",
        [
            ("gpt-4o-mini", "openai"),
            ("gpt-4o", "openai"),
            ("deepseek-r1-distill-llama-70b", "groq"),
            ("deepseek-reasoner", "deepseek"),
            ("deepseek-chat", "deepseek"),
            ("anything-else", "deepseek"),
        ],
    )
    def test_select_backend(self, model, backend):
        assert select_backend(model).name == backend

    def test_groq_requests_max_tokens(self):
        assert select_backend("deepseek-r1-distill-llama-70b").extra_params == {"max_tokens": 8000}

    def test_reasoning_models(self):
        assert is_reasoning_model("deepseek-reasoner")
        assert is_reasoning_model("deepseek-r1-distill-llama-70b")
        assert not is_reasoning_model("gpt-4o-mini")
        assert not is_reasoning_model("deepseek-chat")


@pytest.mark.unit
class TestEventFromPayload:
    """Test normalization of one parsed upstream chunk."""

    def test_content_chunk(self):
        event = event_from_payload(completion_chunk("Paris", chunk_id="abc"), "gpt-4o-mini")
        assert event == CompletionEvent(id="abc", content_delta="Paris", reasoning_delta="")

    def test_reasoning_chunk(self):
        event = event_from_payload(completion_chunk("<think>hmm"), "deepseek-reasoner")
        assert event.content_delta == ""
        assert event.reasoning_delta == "<think>hmm"

    def test_native_reasoning_field(self):
        """Test that a dedicated reasoning field is used when content is empty."""
        payload = completion_chunk("", reasoning_content="step one")
        event = event_from_payload(payload, "deepseek-reasoner")
        assert event.content_delta == ""
        assert event.reasoning_delta == "step one"

    def test_native_reasoning_ignored_for_non_reasoning_model(self):
        payload = completion_chunk("", reasoning_content="step one")
        event = event_from_payload(payload, "deepseek-chat")
        assert event.reasoning_delta == ""

    def test_missing_choices_gives_empty_event(self):
        """Test that role-only or usage-only chunks do not fail."""
        event = event_from_payload({"id": "x"}, "gpt-4o-mini")
        assert event == CompletionEvent(id="x")


@pytest.mark.unit
class TestCompletionEventWire:
    """Test the normalized line format sent to the browser."""

    def test_content_only(self):
        event = CompletionEvent(id="1", content_delta="Hello")
        assert event.to_wire() == {"id": "1", "choices": [{"delta": {"content": "Hello"}}]}

    def test_reasoning_field_included_for_reasoning_models(self):
        event = CompletionEvent(id="1", content_delta="Hello")
        wire = event.to_wire(include_reasoning=True)
        assert wire["choices"][0]["delta"] == {"content": "Hello", "reasoning_content": ""}

    def test_line_is_newline_terminated_json(self):
        line = CompletionEvent(id="1", reasoning_delta="<think>x").to_line()
        assert line.endswith("\n")
        assert json.loads(line)["choices"][0]["delta"]["reasoning_content"] == "<think>x"


@pytest.mark.unit
class TestCompletionProxy:
    """Test the streaming proxy against a stubbed upstream."""

    @pytest.fixture
    def stub(self):
        return UpstreamStub()

    def proxy(self, stub: UpstreamStub, **overrides) -> CompletionProxy:
        return CompletionProxy(build_settings(**overrides), client=stub.client())

    @pytest.mark.asyncio
    async def test_events_in_upstream_order(self, stub):
        """Test that every chunk becomes one event, in order, and sentinels are dropped."""
        body = sse_body(
            completion_chunk("The capital"),
            ": keep-alive",
            completion_chunk(" of France"),
            completion_chunk(" is Paris."),
        )
        stub.add("POST", DEEPSEEK_URL, handler=streaming_handler([body]))

        events = await collect(self.proxy(stub), "deepseek-chat")

        assert [e.content_delta for e in events] == ["The capital", " of France", " is Paris."]
        assert all(e.reasoning_delta == "" for e in events)

    @pytest.mark.asyncio
    async def test_request_body_and_headers(self, stub):
        """Test that the upstream receives the conversation with streaming enabled."""
        stub.add("POST", DEEPSEEK_URL, handler=streaming_handler([sse_body(completion_chunk("ok"))]))

        await collect(self.proxy(stub), "deepseek-chat")

        sent = stub.json_sent(DEEPSEEK_URL)
        assert sent["model"] == "deepseek-chat"
        assert sent["stream"] is True
        assert sent["temperature"] == 0.7
        assert sent["messages"] == [{"role": "user", "content": "capital of France"}]
        assert "max_tokens" not in sent
        request = stub.calls_to(DEEPSEEK_URL)[0]
        assert request.headers["Authorization"] == "Bearer test-deepseek-key"

    @pytest.mark.asyncio
    async def test_groq_model_uses_groq_with_max_tokens(self, stub):
        stub.add("POST", GROQ_URL, handler=streaming_handler([sse_body(completion_chunk("ok"))]))

        await collect(self.proxy(stub), "deepseek-r1-distill-llama-70b")

        sent = stub.json_sent(GROQ_URL)
        assert sent["max_tokens"] == 8000
        assert stub.calls_to(GROQ_URL)[0].headers["Authorization"] == "Bearer test-groq-key"

    @pytest.mark.asyncio
    async def test_gpt_model_uses_openai(self, stub):
        stub.add("POST", OPENAI_URL, handler=streaming_handler([sse_body(completion_chunk("ok"))]))

        events = await collect(self.proxy(stub), "gpt-4o-mini")

        assert [e.content_delta for e in events] == ["ok"]
        assert len(stub.calls_to(OPENAI_URL)) == 1

    @pytest.mark.asyncio
    async def test_reasoning_split_over_stream(self, stub):
        body = sse_body(
            completion_chunk("<think>Recall geography"),
            completion_chunk("Paris is the capital."),
        )
        stub.add("POST", DEEPSEEK_URL, handler=streaming_handler([body]))

        events = await collect(self.proxy(stub), "deepseek-reasoner")

        assert [(e.content_delta, e.reasoning_delta) for e in events] == [
            ("", "<think>Recall geography"),
            ("Paris is the capital.", ""),
        ]

    @pytest.mark.asyncio
    async def test_malformed_line_is_skipped(self, stub):
        """Test that one unparseable line does not stop the stream."""
        body = sse_body(
            completion_chunk("first"),
            'data: {"id": "broken", "choices": [',
            completion_chunk("second"),
        )
        stub.add("POST", DEEPSEEK_URL, handler=streaming_handler([body]))

        events = await collect(self.proxy(stub), "deepseek-chat")

        assert [e.content_delta for e in events] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_chunk_boundaries_do_not_change_events(self, stub):
        """Test that byte-by-byte delivery yields the same events as one chunk."""
        body = sse_body(
            completion_chunk("Café "),
            completion_chunk("crème"),
            completion_chunk(" ✓"),
        )
        stub.add("POST", DEEPSEEK_URL, handler=streaming_handler([body]))
        whole = await collect(self.proxy(stub), "deepseek-chat")

        for size in (1, 5):
            chunked_stub = UpstreamStub().add(
                "POST", DEEPSEEK_URL, handler=streaming_handler(split_bytes(body, size))
            )
            chunked = await collect(self.proxy(chunked_stub), "deepseek-chat")
            assert chunked == whole, f"chunk size {size}"

        assert "".join(e.content_delta for e in whole) == "Café crème ✓"

    @pytest.mark.asyncio
    async def test_trailing_line_without_newline_is_delivered(self, stub):
        body = sse_body(completion_chunk("first"), done=False) + (
            b"data: " + json.dumps(completion_chunk("last")).encode()
        )
        stub.add("POST", DEEPSEEK_URL, handler=streaming_handler([body]))

        events = await collect(self.proxy(stub), "deepseek-chat")

        assert [e.content_delta for e in events] == ["first", "last"]

    @pytest.mark.asyncio
    async def test_missing_credential_fails_before_any_request(self, stub):
        """Test that a model whose backend has no key never reaches the network."""
        with pytest.raises(ConfigurationError, match="API key not found for OpenAI"):
            await collect(self.proxy(stub, openai_api_key=None), "gpt-4o-mini")

        assert stub.calls == []

    @pytest.mark.asyncio
    async def test_upstream_error_message_is_surfaced(self, stub):
        stub.add(
            "POST",
            DEEPSEEK_URL,
            {"error": {"message": "Authentication Fails (invalid key)", "type": "authentication_error"}},
            status_code=401,
        )

        with pytest.raises(UpstreamError) as exc_info:
            await collect(self.proxy(stub), "deepseek-chat")

        assert str(exc_info.value) == "Authentication Fails (invalid key)"
        assert exc_info.value.status_code == 401
        assert exc_info.value.provider == "deepseek"

    @pytest.mark.asyncio
    async def test_upstream_error_without_detail(self, stub):
        stub.add("POST", DEEPSEEK_URL, text="<html>Bad Gateway</html>", status_code=502)

        with pytest.raises(UpstreamError, match="Failed to get response from DeepSeek"):
            await collect(self.proxy(stub), "deepseek-chat")

    @pytest.mark.asyncio
    async def test_connection_failure(self, stub):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        stub.add("POST", DEEPSEEK_URL, handler=refuse)

        with pytest.raises(UpstreamError, match="Failed to connect to DeepSeek"):
            await collect(self.proxy(stub), "deepseek-chat")

    @pytest.mark.asyncio
    async def test_read_error_after_start_keeps_emitted_events(self, stub):
        """Test that events already delivered stay delivered when the stream breaks."""

        async def broken_stream():
            yield sse_body(completion_chunk("partial"), done=False)
            raise httpx.ReadError("connection reset")

        stub.add(
            "POST",
            DEEPSEEK_URL,
            handler=lambda request: httpx.Response(200, content=broken_stream()),
        )

        received = []
        with pytest.raises(UpstreamError, match="Error reading DeepSeek stream"):
            async for event in self.proxy(stub).complete(MESSAGES, "deepseek-chat"):
                received.append(event.content_delta)

        assert received == ["partial"]

    @pytest.mark.asyncio
    async def test_total_duration_timeout(self, stub):
        """Test that a stream outliving the configured ceiling fails with UpstreamError."""

        async def stalled_stream():
            yield sse_body(completion_chunk("started"), done=False)
            await asyncio.sleep(30)
            yield sse_body(completion_chunk("never"))

        stub.add(
            "POST",
            DEEPSEEK_URL,
            handler=lambda request: httpx.Response(200, content=stalled_stream()),
        )

        received = []
        with pytest.raises(UpstreamError, match="timed out"):
            async for event in self.proxy(stub, completion_timeout=1).complete(MESSAGES, "deepseek-chat"):
                received.append(event.content_delta)

        assert received == ["started"]

    @pytest.mark.asyncio
    async def test_stream_releases_response_when_closed_early(self, stub):
        body = sse_body(completion_chunk("one"), completion_chunk("two"))
        stub.add("POST", DEEPSEEK_URL, handler=streaming_handler([body]))

        stream = await self.proxy(stub).open(MESSAGES, "deepseek-chat")
        async with stream:
            async for event in stream:
                assert event.content_delta == "one"
                break

        assert stream._response.is_closed

    @pytest.mark.asyncio
    async def test_iter_lines_emits_normalized_json(self, stub):
        body = sse_body(completion_chunk("<think>a"), completion_chunk("b"))
        stub.add("POST", DEEPSEEK_URL, handler=streaming_handler([body]))

        stream = await self.proxy(stub).open(MESSAGES, "deepseek-reasoner")
        lines = [line async for line in stream.iter_lines()]

        assert [json.loads(line)["choices"][0]["delta"] for line in lines] == [
            {"content": "", "reasoning_content": "<think>a"},
            {"content": "b", "reasoning_content": ""},
        ]
