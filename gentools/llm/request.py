"""Request Builder - Turn a payload into a chat-completions request body."""

import json
from dataclasses import dataclass, field

from gentools import DEFAULT_MODEL
from gentools.errors import EmptyInputError
from gentools.prompts import Task

# Reasoning models reject anything but their fixed temperature
DEFAULT_TEMPERATURES = {
    "o4-mini": 1.0,
}
DEFAULT_TEMPERATURE = 0.3


@dataclass(frozen=True)
class TemperaturePolicy:
    """Maps a model id to the temperature it is called with."""
    overrides: dict = field(default_factory=lambda: dict(DEFAULT_TEMPERATURES))
    default: float = DEFAULT_TEMPERATURE

    def select(self, model: str) -> float:
        return float(self.overrides.get(model, self.default))


@dataclass(frozen=True)
class Message:
    role: str
    content: str


@dataclass(frozen=True)
class ChatRequest:
    """One system message followed by one user message."""
    model: str
    temperature: float
    messages: tuple[Message, ...]

    def to_dict(self) -> dict:
        return {
            "model": self.model,
            "temperature": self.temperature,
            "messages": [{"role": m.role, "content": m.content} for m in self.messages],
        }

    def to_json(self) -> bytes:
        # json.dumps escapes quotes, backslashes and control characters
        return json.dumps(self.to_dict(), ensure_ascii=False).encode('utf-8')


def build_request(
    payload: str,
    task: Task,
    model: str | None = None,
    temperature: float | None = None,
    policy: TemperaturePolicy | None = None,
) -> ChatRequest:
    """Build the request for a task.

    The temperature comes from the policy unless given explicitly.
    """
    if not payload or not payload.strip():
        raise EmptyInputError("Nothing to send: the input is empty.")

    model = model or DEFAULT_MODEL
    if temperature is None:
        temperature = (policy or TemperaturePolicy()).select(model)
    if not 0 <= temperature <= 1:
        raise ValueError(f"Temperature must be between 0 and 1, got {temperature}")

    return ChatRequest(
        model=model,
        temperature=float(temperature),
        messages=(
            Message(role="system", content=task.system_prompt),
            Message(role="user", content=task.user_content(payload)),
        ),
    )
