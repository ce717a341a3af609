"""Chat completion route - proxies one streaming completion as newline-delimited JSON."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from ..dependencies import get_completion_proxy
from ..llm.streaming import CompletionProxy
from ..schemas import ChatRequest, ErrorResponse

router = APIRouter(tags=["Chat"])
logger = logging.getLogger(__name__)

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


@router.post(
    "/chat",
    responses={
        400: {"model": ErrorResponse, "description": "Malformed request body"},
        500: {"model": ErrorResponse, "description": "Backend not configured or unreachable"},
    },
)
async def chat(body: ChatRequest, proxy: CompletionProxy = Depends(get_completion_proxy)):
    """
    Stream a chat completion.

    The upstream request is opened before the response starts, so credential
    and connection failures still produce a JSON error with status 500. Once
    streaming has begun, a failure can only end the stream early.
    """
    stream = await proxy.open(body.messages, body.model)
    logger.info(f"Streaming {body.model} completion via {stream.backend.label}")

    return StreamingResponse(
        stream.iter_lines(),
        media_type="text/event-stream",
        headers=STREAM_HEADERS,
    )
