"""
OpenAI provider: chat completions and embeddings behind GenerationProvider.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from ..config import ProviderConfig
from ..exceptions import GenerationProviderError, MalformedResponseError, ProviderConfigurationError
from ..normalizer import StreamAccumulator, StreamObserver, completion_response, embedding_response
from ..parameters import (
    ChunkHandler,
    Parameters,
    build_completion_parameters,
    build_embedding_parameters,
)
from ..types import Message, PromptLike, Response
from .base import AsyncBackendClient, BackendClient, GenerationProvider, HookCallable
from .openai_client import AsyncOpenAIClient, OpenAIClient

logger = logging.getLogger(__name__)


class OpenAIProvider(GenerationProvider):
    """
    Adapter that speaks to OpenAI's Chat Completions and Embeddings APIs.

    The provider owns an immutable ProviderConfig and a bound backend client.
    Nothing touches the network until `generate` or `embed` is called.

    Example:
        >>> provider = OpenAIProvider({"api_key": "sk-...", "temperature": 0.2})
        >>> prompt = Prompt(messages=[Message(role=Role.USER, content="Hi")])
        >>> provider.generate(prompt).message.content
        'Hello! How can I help?'
    """

    name = "openai"

    def __init__(
        self,
        config: Union[ProviderConfig, Mapping[str, Any]],
        client: Optional[BackendClient] = None,
        async_client: Optional[AsyncBackendClient] = None,
        hooks: Optional[Mapping[str, HookCallable]] = None,
        on_stream: Optional[StreamObserver] = None,
        **client_kwargs: Any,
    ):
        """
        Args:
            config: ProviderConfig, or a plain mapping passed to ProviderConfig.from_mapping
            client: Pre-built backend client. Built from `config.api_key` when omitted.
            async_client: Pre-built async backend client for agenerate/aembed
            hooks: Lifecycle hooks, see GenerationProvider
            on_stream: Default observer for streamed replies, called with
                (message_so_far, delta, finished)
            **client_kwargs: Extra arguments for the OpenAI SDK client (base_url, timeout, ...)

        Raises:
            ProviderConfigurationError: If no client is given and the config has no api_key
        """
        super().__init__(hooks=hooks)
        if not isinstance(config, ProviderConfig):
            config = ProviderConfig.from_mapping(config)
        self.config = config
        self.model_name = config.resolved_model
        self.on_stream = on_stream
        self.prompt: Optional[PromptLike] = None

        self._owns_client = client is None
        if client is None:
            if not config.api_key:
                raise ProviderConfigurationError(
                    "OpenAI", "api_key is not set", env_var="OPENAI_API_KEY"
                )
            client = OpenAIClient(api_key=config.api_key, **client_kwargs)
        self.client = client
        self._async_client = async_client
        self._client_kwargs = client_kwargs

    # Parameter building and normalization

    def prompt_parameters(
        self,
        prompt: Optional[PromptLike] = None,
        stream_handler: Optional[ChunkHandler] = None,
    ) -> Parameters:
        return build_completion_parameters(self._current(prompt), self.config, stream_handler)

    def embeddings_parameters(self, prompt: Optional[PromptLike] = None, **overrides: Any) -> Parameters:
        return build_embedding_parameters(self._current(prompt), self.config, overrides)

    def completion_response(self, raw: Any, prompt: Optional[PromptLike] = None) -> Response:
        return completion_response(prompt or self.prompt, raw)

    def embeddings_response(self, raw: Any, prompt: Optional[PromptLike] = None) -> Response:
        return embedding_response(prompt or self.prompt, raw)

    def _current(self, prompt: Optional[PromptLike]) -> PromptLike:
        prompt = prompt if prompt is not None else self.prompt
        if prompt is None:
            raise ValueError("No prompt given and no prompt recorded on the provider.")
        return prompt

    # Synchronous API

    def generate(self, prompt: PromptLike, on_stream: Optional[StreamObserver] = None) -> Response:
        self.prompt = prompt
        accumulator = self._accumulator(prompt, on_stream)
        parameters = self.prompt_parameters(prompt, self._chunk_handler(accumulator))

        raw = self._call("completion", self.client.chat, parameters)
        return self._complete(prompt, raw, accumulator)

    def embed(self, prompt: PromptLike) -> Response:
        self.prompt = prompt
        parameters = self.embeddings_parameters(prompt)

        raw = self._call("embedding", self.client.embeddings, parameters)
        response = embedding_response(prompt, raw)
        self._call_hook("on_response", "embedding", response)
        return response

    # Async API

    async def agenerate(
        self, prompt: PromptLike, on_stream: Optional[StreamObserver] = None
    ) -> Response:
        client = self._get_async_client()
        if client is None:
            return await asyncio.to_thread(self.generate, prompt, on_stream)

        self.prompt = prompt
        accumulator = self._accumulator(prompt, on_stream)
        parameters = self.prompt_parameters(prompt, self._chunk_handler(accumulator))

        raw = await self._acall("completion", client.chat, parameters)
        return self._complete(prompt, raw, accumulator)

    async def aembed(self, prompt: PromptLike) -> Response:
        client = self._get_async_client()
        if client is None:
            return await asyncio.to_thread(self.embed, prompt)

        self.prompt = prompt
        parameters = self.embeddings_parameters(prompt)

        raw = await self._acall("embedding", client.embeddings, parameters)
        response = embedding_response(prompt, raw)
        self._call_hook("on_response", "embedding", response)
        return response

    # Internals

    def _get_async_client(self) -> Optional[AsyncBackendClient]:
        """Return the async client, building one only when this provider built its sync client."""
        if self._async_client is None and self._owns_client:
            self._async_client = AsyncOpenAIClient(
                api_key=self.config.api_key, **self._client_kwargs
            )
        return self._async_client

    def _accumulator(
        self, prompt: PromptLike, on_stream: Optional[StreamObserver]
    ) -> Optional[StreamAccumulator]:
        if not (prompt.options or {}).get("stream"):
            return None
        return StreamAccumulator(prompt, observer=on_stream or self.on_stream)

    def _chunk_handler(self, accumulator: Optional[StreamAccumulator]) -> Optional[ChunkHandler]:
        if accumulator is None:
            return None

        def handle(chunk: Any) -> None:
            self._call_hook("on_chunk", chunk)
            accumulator.feed(chunk)

        return handle

    def _complete(
        self, prompt: PromptLike, raw: Any, accumulator: Optional[StreamAccumulator]
    ) -> Response:
        if accumulator is None:
            response = completion_response(prompt, raw)
        else:
            # finish() runs the caller's observer one last time
            try:
                response = accumulator.finish()
            except MalformedResponseError:
                raise
            except Exception as exc:  # noqa: BLE001
                raise self._wrap_error("completion", exc) from exc
        self._commit(prompt, response.message)
        self._call_hook("on_response", "completion", response)
        return response

    def _commit(self, prompt: PromptLike, message: Message) -> None:
        """Write the reply into the prompt as one step."""
        lock = getattr(prompt, "lock", None)
        with lock if lock is not None else contextlib.nullcontext():
            prompt.message = message
            prompt.messages.append(message)

    def _before_call(self, kind: str, parameters: Dict[str, Any]) -> None:
        logger.debug(
            f"{self.name} {kind} request: model={parameters.get('model')} "
            f"stream={'stream' in parameters} keys={sorted(parameters)}"
        )
        self._call_hook("on_request", kind, parameters)

    def _wrap_error(self, kind: str, exc: Exception) -> GenerationProviderError:
        logger.warning(f"{self.name} {kind} failed: {type(exc).__name__}: {exc}")
        self._call_hook("on_error", kind, exc)
        return GenerationProviderError(str(exc))

    def _call(
        self, kind: str, operation: Callable[[Dict[str, Any]], Any], parameters: Dict[str, Any]
    ) -> Any:
        self._before_call(kind, parameters)
        try:
            return operation(parameters)
        except MalformedResponseError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise self._wrap_error(kind, exc) from exc

    async def _acall(
        self,
        kind: str,
        operation: Callable[[Dict[str, Any]], Awaitable[Any]],
        parameters: Dict[str, Any],
    ) -> Any:
        self._before_call(kind, parameters)
        try:
            return await operation(parameters)
        except MalformedResponseError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise self._wrap_error(kind, exc) from exc


__all__ = ["OpenAIProvider"]
