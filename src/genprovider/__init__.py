"""Public exports for the genprovider package."""

from .config import ProviderConfig
from .exceptions import (
    GenerationProviderError,
    GenProviderError,
    MalformedResponseError,
    ProviderConfigurationError,
)
from .models import DEFAULT_EMBEDDING_MODEL, DEFAULT_MODEL
from .normalizer import StreamAccumulator, completion_response, embedding_response
from .parameters import build_completion_parameters, build_embedding_parameters
from .providers.base import AsyncBackendClient, BackendClient, GenerationProvider
from .providers.openai_provider import OpenAIProvider
from .types import ActionCall, Message, Prompt, PromptLike, Response, Role

__version__ = "0.1.0"

__all__ = [
    "ActionCall",
    "Message",
    "Prompt",
    "PromptLike",
    "Response",
    "Role",
    "ProviderConfig",
    "DEFAULT_MODEL",
    "DEFAULT_EMBEDDING_MODEL",
    "build_completion_parameters",
    "build_embedding_parameters",
    "completion_response",
    "embedding_response",
    "StreamAccumulator",
    "AsyncBackendClient",
    "BackendClient",
    "GenerationProvider",
    "OpenAIProvider",
    # Exceptions
    "GenProviderError",
    "GenerationProviderError",
    "MalformedResponseError",
    "ProviderConfigurationError",
]
