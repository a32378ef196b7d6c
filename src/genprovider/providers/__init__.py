"""Provider implementations and backend client bindings."""

from .base import AsyncBackendClient, BackendClient, GenerationProvider
from .openai_client import AsyncOpenAIClient, OpenAIClient
from .openai_provider import OpenAIProvider

__all__ = [
    "AsyncBackendClient",
    "AsyncOpenAIClient",
    "BackendClient",
    "GenerationProvider",
    "OpenAIClient",
    "OpenAIProvider",
]
