"""Request/response DTOs exchanged between the gateway and the routing core."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any


# ---------------------------------------------------------------------------
# Chat request — what the gateway forwards upstream
# ---------------------------------------------------------------------------


@dataclass
class ChatRequest:
    """An OpenAI-style chat completion request as seen by the gateway."""

    model: str = ""  # Client-facing id on entry, concrete id after resolution
    messages: list[dict[str, Any]] = field(default_factory=list)
    max_tokens: int | None = None
    temperature: float | None = None
    stream: bool = False
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:16])

    # Unrecognised body fields, forwarded untouched
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, body: dict[str, Any]) -> ChatRequest:
        """Build from a decoded JSON request body."""
        known = {"model", "messages", "max_tokens", "temperature", "stream"}
        return cls(
            model=body.get("model", ""),
            messages=list(body.get("messages", [])),
            max_tokens=body.get("max_tokens"),
            temperature=body.get("temperature"),
            stream=bool(body.get("stream", False)),
            extra={k: v for k, v in body.items() if k not in known},
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the upstream request body. Unset parameters are omitted."""
        body: dict[str, Any] = {**self.extra, "model": self.model, "messages": self.messages}
        if self.max_tokens is not None:
            body["max_tokens"] = self.max_tokens
        if self.temperature is not None:
            body["temperature"] = self.temperature
        if self.stream:
            body["stream"] = True
        return body


# ---------------------------------------------------------------------------
# Responses — unary and streaming shapes
# ---------------------------------------------------------------------------


@dataclass
class Usage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class ChatCompletion:
    """Unary chat completion response."""

    id: str = ""
    object: str = "chat.completion"
    created: int = field(default_factory=lambda: int(time.time()))
    model: str = ""
    choices: list[dict[str, Any]] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "object": self.object,
            "created": self.created,
            "model": self.model,
            "choices": self.choices,
            "usage": {
                "prompt_tokens": self.usage.prompt_tokens,
                "completion_tokens": self.usage.completion_tokens,
                "total_tokens": self.usage.total_tokens,
            },
        }


@dataclass
class ChatCompletionChunk:
    """One streamed chunk of a chat completion."""

    id: str = ""
    object: str = "chat.completion.chunk"
    created: int = field(default_factory=lambda: int(time.time()))
    model: str = ""
    choices: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "object": self.object,
            "created": self.created,
            "model": self.model,
            "choices": self.choices,
        }


# ---------------------------------------------------------------------------
# Routing record — carried through one request's lifetime
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RoutingRecord:
    """What the response stage needs to undo the routing decision.

    ``overloaded`` is the single overload snapshot taken at entry; both the
    degrade policy and the clamp use it.
    """

    original_model: str
    concrete_model: str
    was_virtual: bool
    overloaded: bool = False
