"""
Provider abstraction for backend-agnostic generation and embedding.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, runtime_checkable

from ..types import PromptLike, Response

logger = logging.getLogger(__name__)

HookCallable = Callable[..., None]
Hooks = Dict[str, HookCallable]

RawResult = Any


@runtime_checkable
class BackendClient(Protocol):
    """
    The vendor transport a provider delegates to.

    `chat` returns the raw completion result. When `parameters["stream"]` is
    callable, `chat` instead calls it once per chunk, in delivery order, and
    returns only after the stream is exhausted. Both methods raise on any
    transport or API failure.
    """

    def chat(self, parameters: Dict[str, Any]) -> Optional[RawResult]:
        ...

    def embeddings(self, parameters: Dict[str, Any]) -> RawResult:
        ...


@runtime_checkable
class AsyncBackendClient(Protocol):
    """Async variant of BackendClient with the same contract."""

    async def chat(self, parameters: Dict[str, Any]) -> Optional[RawResult]:
        ...

    async def embeddings(self, parameters: Dict[str, Any]) -> RawResult:
        ...


class GenerationProvider(ABC):
    """
    Interface every generation provider must satisfy.

    Providers implement the synchronous `generate` and `embed`; `agenerate`
    and `aembed` are the async facade over the same behavior.

    Hooks are optional callables keyed by name:
        - 'on_request': Called before a backend call with (kind, parameters)
        - 'on_response': Called with (kind, response) after normalization
        - 'on_chunk': Called with (chunk,) for every streamed chunk
        - 'on_error': Called with (kind, error) when a call fails
    `kind` is "completion" or "embedding".
    """

    name: str = "base"

    def __init__(self, hooks: Optional[Mapping[str, HookCallable]] = None):
        self.hooks: Hooks = dict(hooks or {})

    def _call_hook(self, hook_name: str, *args: Any) -> None:
        """Call a hook if it exists; hook failures are logged, not raised."""
        hook = self.hooks.get(hook_name)
        if hook is None:
            return
        try:
            hook(*args)
        except Exception as exc:  # noqa: BLE001
            logger.warning(f"Hook '{hook_name}' on {self.name} provider failed: {exc}")

    @abstractmethod
    def generate(self, prompt: PromptLike) -> Response:
        """
        Run a chat completion for `prompt` and return the normalized reply.

        The reply is also written to `prompt.message` and appended to
        `prompt.messages`.
        """

    @abstractmethod
    def embed(self, prompt: PromptLike) -> Response:
        """Embed the content of `prompt.message`."""

    @abstractmethod
    async def agenerate(self, prompt: PromptLike) -> Response:
        """Async version of generate()."""

    @abstractmethod
    async def aembed(self, prompt: PromptLike) -> Response:
        """Async version of embed()."""


__all__ = ["AsyncBackendClient", "BackendClient", "GenerationProvider", "HookCallable", "Hooks"]
