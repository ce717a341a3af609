"""
Centralized error classification for upstream responses and HTTP boundary mapping.
"""

import json

import httpx

from ..exceptions import (
    ConfigurationError,
    EmptyResultError,
    InputError,
    ResearchProxyError,
    UpstreamError,
)

MAX_ERROR_DETAIL = 200


def extract_error_message(response: httpx.Response) -> str | None:
    """
    Extract the upstream's own error message from a non-success response.

    Handles the OpenAI-style ``{"error": {"message": ...}}`` body, a flat
    ``{"message": ...}`` body, ``{"error": "..."}`` and plain-text bodies.
    Returns None when nothing useful can be recovered.
    """
    try:
        body = response.json()
    except (json.JSONDecodeError, ValueError, httpx.ResponseNotRead):
        try:
            text = response.text.strip()
        except httpx.ResponseNotRead:
            return None
        if not text or text.lstrip().startswith("<"):
            # HTML error pages are not useful to surface
            return None
        return text[:MAX_ERROR_DETAIL]

    message = None
    if isinstance(body, dict):
        error_obj = body.get("error")
        if isinstance(error_obj, dict):
            message = error_obj.get("message")
        elif isinstance(error_obj, str):
            message = error_obj
        if not message:
            message = body.get("message") or body.get("detail")
    elif isinstance(body, str):
        message = body

    if not message or not isinstance(message, str):
        return None
    return message[:MAX_ERROR_DETAIL]


def status_for_exception(exc: BaseException) -> int:
    """Map an exception from the taxonomy onto the HTTP status returned to the browser."""
    if isinstance(exc, InputError):
        return 400
    if isinstance(exc, EmptyResultError):
        return 404
    if isinstance(exc, (UpstreamError, ConfigurationError)):
        return 500
    return 500


def format_error_message(exc: BaseException) -> str:
    """Produce the user-facing ``error`` string for a caught exception."""
    if isinstance(exc, ResearchProxyError):
        message = str(exc) or type(exc).__name__
    else:
        message = "An unexpected error occurred"
    return message[:MAX_ERROR_DETAIL] if len(message) > MAX_ERROR_DETAIL else message
