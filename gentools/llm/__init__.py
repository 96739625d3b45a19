"""LLM Client Package"""

from gentools.llm.base import ChatClient, ChatResult
from gentools.llm.client import ChatCompletionsClient
from gentools.llm.request import (
    ChatRequest,
    Message,
    TemperaturePolicy,
    DEFAULT_TEMPERATURE,
    DEFAULT_TEMPERATURES,
    build_request,
)
from gentools.llm.response import parse_response, validate_response


def get_client(endpoint: str, api_key: str, timeout: float | None = None) -> ChatClient:
    """Get a chat-completions client for an endpoint."""
    return ChatCompletionsClient(endpoint=endpoint, api_key=api_key, timeout=timeout)


__all__ = [
    "ChatClient",
    "ChatResult",
    "ChatCompletionsClient",
    "ChatRequest",
    "Message",
    "TemperaturePolicy",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_TEMPERATURES",
    "build_request",
    "parse_response",
    "validate_response",
    "get_client",
]
