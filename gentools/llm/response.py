"""Response Validator - Pull the generated text out of a chat-completions response."""

import json

from gentools.errors import ApiError, EmptyResultError, HttpError, MalformedResponseError
from gentools.llm.base import ChatResult


def parse_response(status_code: int, body: str) -> ChatResult:
    """Validate a raw response and extract choices[0].message.content.

    Checks run in order: transport status, JSON syntax, API-level error,
    message content.

    Raises:
        HttpError: status_code >= 300
        MalformedResponseError: body is not a JSON object, or content is not text
        ApiError: body has a top-level "error"
        EmptyResultError: content is absent, null, or empty
    """
    if status_code >= 300:
        raise HttpError(status_code, body)

    try:
        data = json.loads(body)
    except (TypeError, json.JSONDecodeError) as e:
        raise MalformedResponseError(f"Response is not valid JSON: {e}", body)

    if not isinstance(data, dict):
        raise MalformedResponseError("Response is not a JSON object.", body)

    if data.get("error") is not None:
        raise ApiError(data["error"])

    content = _first_message_content(data)
    if content is None or content == "":
        raise EmptyResultError(body=body)
    if not isinstance(content, str):
        raise MalformedResponseError(f"Message content is {type(content).__name__}, expected text.", body)

    return ChatResult(
        content=content,
        model=data.get("model") or "",
        tokens_used=_total_tokens(data),
    )


def validate_response(status_code: int, body: str) -> str:
    """Return the generated text or raise the matching GenError."""
    return parse_response(status_code, body).content


def _first_message_content(data: dict):
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    if not isinstance(choice, dict):
        return None
    message = choice.get("message")
    if not isinstance(message, dict):
        return None
    return message.get("content")


def _total_tokens(data: dict) -> int:
    usage = data.get("usage")
    if not isinstance(usage, dict):
        return 0
    total = usage.get("total_tokens")
    return total if isinstance(total, int) else 0
