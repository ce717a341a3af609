"""Custom exceptions for the research proxy backend."""


class ResearchProxyError(Exception):
    """Base exception for research proxy errors."""

    pass


class InputError(ResearchProxyError):
    """Raised when the caller supplied a missing or malformed input."""

    pass


class ConfigurationError(ResearchProxyError):
    """Raised when a required credential or setting is missing."""

    pass


class EmptyResultError(ResearchProxyError):
    """Raised when an upstream search succeeded but produced no usable results."""

    def __init__(self, message: str = "No search results found. Please try a different query."):
        super().__init__(message)


class UpstreamError(ResearchProxyError):
    """Raised when a third-party provider fails or returns an unexpected shape."""

    def __init__(self, message: str, provider: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class StreamParseError(ResearchProxyError):
    """Raised when a single line of an upstream stream cannot be parsed."""

    def __init__(self, message: str, line: str = ""):
        super().__init__(message)
        self.line = line
