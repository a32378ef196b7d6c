"""
OpenAI SDK bindings for the BackendClient protocol.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..exceptions import ProviderConfigurationError


def _dump(obj: Any) -> Any:
    return obj.model_dump() if hasattr(obj, "model_dump") else obj


def _split_stream(parameters: Dict[str, Any]):
    """Return (request kwargs, chunk handler or None)."""
    request = dict(parameters)
    handler = request.pop("stream", None)
    if handler is not None and not callable(handler):
        raise TypeError("'stream' parameter must be a chunk handler callable")
    return request, handler


class OpenAIClient:
    """Synchronous chat and embeddings calls over `openai.OpenAI`."""

    def __init__(self, api_key: str, **client_kwargs: Any):
        try:
            from openai import OpenAI
        except ImportError as exc:
            raise ProviderConfigurationError(
                "openai", "openai package not installed (pip install openai)"
            ) from exc

        self._client = OpenAI(api_key=api_key, **client_kwargs)

    def chat(self, parameters: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        request, handler = _split_stream(parameters)
        if handler is None:
            return _dump(self._client.chat.completions.create(**request))

        with self._client.chat.completions.create(stream=True, **request) as stream:
            for chunk in stream:
                handler(_dump(chunk))
        return None

    def embeddings(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        return _dump(self._client.embeddings.create(**parameters))


class AsyncOpenAIClient:
    """Async chat and embeddings calls over `openai.AsyncOpenAI`."""

    def __init__(self, api_key: str, **client_kwargs: Any):
        try:
            from openai import AsyncOpenAI
        except ImportError as exc:
            raise ProviderConfigurationError(
                "openai", "openai package not installed (pip install openai)"
            ) from exc

        self._client = AsyncOpenAI(api_key=api_key, **client_kwargs)

    async def chat(self, parameters: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        request, handler = _split_stream(parameters)
        if handler is None:
            return _dump(await self._client.chat.completions.create(**request))

        response = await self._client.chat.completions.create(stream=True, **request)
        async with response as stream:
            async for chunk in stream:
                handler(_dump(chunk))
        return None

    async def embeddings(self, parameters: Dict[str, Any]) -> Dict[str, Any]:
        return _dump(await self._client.embeddings.create(**parameters))


__all__ = ["AsyncOpenAIClient", "OpenAIClient"]
