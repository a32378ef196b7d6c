"""
Request parameter construction for chat completion and embedding calls.

Both builders are pure: the same prompt and config always produce the same
parameters, and neither touches the prompt.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional

from .config import PRIVATE_KEYS, ProviderConfig
from .models import DEFAULT_EMBEDDING_MODEL
from .types import Message, PromptLike

Parameters = Dict[str, Any]
ChunkHandler = Callable[[Mapping[str, Any]], None]

# Only the prompt and the named config fields may set these.
PROMPT_KEYS = frozenset({"messages", "tools", "model", "stream"})


def discard_chunk(chunk: Mapping[str, Any]) -> None:
    """Stream handler used when the caller does not consume chunks."""
    return None


def _render_messages(prompt: PromptLike) -> List[Any]:
    return [
        message.to_payload() if isinstance(message, Message) else message
        for message in prompt.messages
    ]


def build_completion_parameters(
    prompt: PromptLike,
    config: ProviderConfig,
    stream_handler: Optional[ChunkHandler] = None,
) -> Parameters:
    """
    Build the chat completion request body for `prompt`.

    Pass-through options from the config go in first so the keys set here
    always take precedence. `tools` is left out entirely when the prompt has
    no actions capability, and `stream` is only present when the prompt asks
    for streaming; its value is the chunk handler, never a boolean.

    Args:
        prompt: Prompt to read messages, actions and options from
        config: Provider configuration
        stream_handler: Callable invoked with each streamed chunk

    Returns:
        Dictionary of backend request parameters
    """
    parameters: Parameters = {
        key: value
        for key, value in config.options.items()
        if key not in PRIVATE_KEYS and key not in PROMPT_KEYS
    }
    parameters["messages"] = _render_messages(prompt)
    if config.temperature is not None:
        parameters["temperature"] = config.temperature
    if prompt.actions is not None:
        parameters["tools"] = prompt.actions
    parameters["model"] = config.resolved_model
    if (prompt.options or {}).get("stream"):
        parameters["stream"] = stream_handler or discard_chunk
    return parameters


def build_embedding_parameters(
    prompt: PromptLike,
    config: ProviderConfig,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Parameters:
    """
    Build the embedding request body: exactly `model` and `input`.

    The input is the content of `prompt.message` unless overridden.

    Raises:
        ValueError: If the prompt has no message and no input override is given
    """
    overrides = overrides or {}
    if "input" in overrides:
        text = overrides["input"]
    elif prompt.message is not None:
        text = prompt.message.content
    else:
        raise ValueError("Prompt has no message to embed; pass an 'input' override.")
    return {"model": overrides.get("model", DEFAULT_EMBEDDING_MODEL), "input": text}


__all__ = [
    "ChunkHandler",
    "Parameters",
    "build_completion_parameters",
    "build_embedding_parameters",
    "discard_chunk",
]
