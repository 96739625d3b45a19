"""LLM Base Classes and Shared Code"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from gentools.llm.request import ChatRequest


@dataclass
class ChatResult:
    """Validated content of a chat-completions response."""
    content: str
    model: str = ""
    tokens_used: int = 0


class ChatClient(ABC):
    """Abstract base for chat-completion clients."""

    @abstractmethod
    def send(self, request: ChatRequest) -> tuple[int, str]:
        """POST the request and return (status_code, body) without interpreting them."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    def complete(self, request: ChatRequest) -> ChatResult:
        """Send the request and validate the response."""
        from gentools.llm.response import parse_response

        status_code, body = self.send(request)
        return parse_response(status_code, body)
