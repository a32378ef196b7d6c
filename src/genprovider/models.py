"""
Model registry for the OpenAI backend.

Only the models the provider falls back to are listed here; any other model
identifier can still be passed through configuration.

Example:
    >>> from genprovider.models import OpenAI
    >>> OpenAI.GPT_4O_MINI.id
    'gpt-4o-mini'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ModelType = Literal["chat", "embedding"]


@dataclass(frozen=True)
class ModelInfo:
    """
    Metadata for a backend model.

    Attributes:
        id: Model identifier sent to the backend
        provider: Provider name ("openai")
        type: Model type (chat or embedding)
    """

    id: str
    provider: str
    type: ModelType


class OpenAI:
    """OpenAI models used as provider defaults."""

    GPT_4O_MINI = ModelInfo(id="gpt-4o-mini", provider="openai", type="chat")
    GPT_4O = ModelInfo(id="gpt-4o", provider="openai", type="chat")

    class Embeddings:
        TEXT_EMBEDDING_ADA_002 = ModelInfo(
            id="text-embedding-ada-002", provider="openai", type="embedding"
        )
        TEXT_EMBEDDING_3_SMALL = ModelInfo(
            id="text-embedding-3-small", provider="openai", type="embedding"
        )


DEFAULT_MODEL = OpenAI.GPT_4O_MINI.id
DEFAULT_EMBEDDING_MODEL = OpenAI.Embeddings.TEXT_EMBEDDING_ADA_002.id


__all__ = ["ModelInfo", "ModelType", "OpenAI", "DEFAULT_MODEL", "DEFAULT_EMBEDDING_MODEL"]
