"""
Core message, prompt and response types for the generation provider.

These primitives are backend-agnostic. Providers read prompts and produce
responses built from them; nothing here knows about a particular vendor.
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, MutableSequence, Optional, Protocol, Union

MessageContent = Union[str, List[float]]


class Role(str, Enum):
    """Conversation role."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"


@dataclass
class ActionCall:
    """A tool/function call requested by the model."""

    id: str
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": json.dumps(self.arguments)},
        }


@dataclass
class Message:
    """
    One conversation turn, or an embedding vector on the embedding path.

    `metadata` carries backend details that are not part of the turn itself,
    such as the `finish_reason` of a completion.
    """

    role: Role
    content: MessageContent = ""
    requested_actions: List[ActionCall] = field(default_factory=list)
    tool_call_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def action_requested(self) -> bool:
        return bool(self.requested_actions)

    @property
    def finish_reason(self) -> Optional[str]:
        return self.metadata.get("finish_reason")

    def to_payload(self) -> Dict[str, Any]:
        """Render the message in chat-completions wire form."""
        payload: Dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.requested_actions:
            payload["tool_calls"] = [action.to_payload() for action in self.requested_actions]
        if self.tool_call_id:
            payload["tool_call_id"] = self.tool_call_id
        return payload


class PromptLike(Protocol):
    """
    What a provider needs from a prompt.

    Providers read `messages`, `actions` and `options`, read `message` as the
    embedding target, and write the model's reply back into `message` while
    appending it to `messages`.
    """

    messages: MutableSequence[Union[Message, Dict[str, Any]]]
    actions: Optional[List[Dict[str, Any]]]
    options: Mapping[str, Any]
    message: Optional[Message]


@dataclass
class Prompt:
    """
    Caller-owned conversation state for a single generation call.

    `actions=None` means the prompt exposes no tools at all, which is
    different from an empty tool list.
    """

    messages: List[Union[Message, Dict[str, Any]]] = field(default_factory=list)
    actions: Optional[List[Dict[str, Any]]] = None
    options: Dict[str, Any] = field(default_factory=dict)
    message: Optional[Message] = None
    lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    @property
    def stream(self) -> bool:
        return bool(self.options.get("stream"))


@dataclass
class Response:
    """Normalized result of a generation or embedding call."""

    prompt: Optional[PromptLike]
    message: Message
    raw_response: Any = None

    @property
    def content(self) -> MessageContent:
        return self.message.content

    @property
    def role(self) -> Role:
        return self.message.role


__all__ = [
    "ActionCall",
    "Message",
    "MessageContent",
    "Prompt",
    "PromptLike",
    "Response",
    "Role",
]
