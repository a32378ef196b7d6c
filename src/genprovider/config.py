"""
Provider configuration.

A config has five recognized keys and an open set of pass-through options.
`api_key`, `service` and `instructions` are consumed by the provider itself
and are never sent to the backend; `model` and `temperature` become request
parameters; everything else is forwarded to the backend unchanged.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from .exceptions import ProviderConfigurationError
from .models import DEFAULT_MODEL

RECOGNIZED_KEYS = ("api_key", "model", "temperature", "service", "instructions")

# Keys that must never reach the backend, whatever the config holds.
PRIVATE_KEYS = frozenset({"api_key", "service", "instructions"})


def read_env_file(candidate_paths: Iterable[Path]) -> Dict[str, str]:
    """Parse key=value pairs from the first .env-style file that exists."""
    for env_path in candidate_paths:
        if not env_path.is_file():
            continue
        values: Dict[str, str] = {}
        for line in env_path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or "=" not in stripped:
                continue
            key, value = stripped.split("=", 1)
            key = key.strip()
            if key:
                values[key] = value.strip().strip("'\"")
        return values
    return {}


@dataclass(frozen=True)
class ProviderConfig:
    """
    Immutable configuration for a generation provider.

    Attributes:
        api_key: Backend credential. Used once to build the client.
        model: Chat model identifier. Falls back to DEFAULT_MODEL when unset.
        temperature: Sampling temperature in [0, 2]. Omitted from requests when unset.
        service: Name of the backend service this config targets.
        instructions: System instructions handled upstream of the provider.
        options: Extra backend options forwarded to every completion request.
    """

    api_key: Optional[str] = None
    model: Optional[str] = None
    temperature: Optional[float] = None
    service: Optional[str] = None
    instructions: Optional[str] = None
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.model is not None and (not isinstance(self.model, str) or not self.model):
            raise ProviderConfigurationError(
                self.service or "openai",
                f"model must be a non-empty string, got {self.model!r}",
                "OPENAI_MODEL",
            )
        if self.temperature is not None:
            if isinstance(self.temperature, bool) or not isinstance(self.temperature, (int, float)):
                raise ProviderConfigurationError(
                    self.service or "openai",
                    f"temperature must be a number, got {self.temperature!r}",
                    "OPENAI_TEMPERATURE",
                )
            if not 0 <= self.temperature <= 2:
                raise ProviderConfigurationError(
                    self.service or "openai",
                    f"temperature must be between 0 and 2, got {self.temperature}",
                    "OPENAI_TEMPERATURE",
                )
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @property
    def resolved_model(self) -> str:
        return self.model or DEFAULT_MODEL

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "ProviderConfig":
        """
        Build a config from a plain mapping.

        Recognized keys go to their fields; any other key is kept as a
        pass-through option.

        Example:
            >>> config = ProviderConfig.from_mapping(
            ...     {"api_key": "sk-...", "model": "gpt-4", "max_tokens": 256}
            ... )
            >>> dict(config.options)
            {'max_tokens': 256}
        """
        recognized = {key: mapping[key] for key in RECOGNIZED_KEYS if key in mapping}
        options = {key: value for key, value in mapping.items() if key not in RECOGNIZED_KEYS}
        return cls(**recognized, options=options)

    @classmethod
    def from_env(
        cls,
        prefix: str = "OPENAI_",
        env_file: Optional[Union[str, Path]] = None,
        **overrides: Any,
    ) -> "ProviderConfig":
        """
        Build a config from environment variables.

        Reads `<prefix>API_KEY`, `<prefix>MODEL` and `<prefix>TEMPERATURE`.
        Values in the process environment win over the .env file, which is
        `env_file` when given, otherwise `.env` in the working directory.
        Keyword overrides win over both.
        """
        candidates = [Path(env_file)] if env_file else [Path.cwd() / ".env"]
        values = read_env_file(candidates)
        values.update({key: value for key, value in os.environ.items() if key.startswith(prefix)})

        settings: Dict[str, Any] = {}
        if values.get(f"{prefix}API_KEY"):
            settings["api_key"] = values[f"{prefix}API_KEY"]
        if values.get(f"{prefix}MODEL"):
            settings["model"] = values[f"{prefix}MODEL"]
        raw_temperature = values.get(f"{prefix}TEMPERATURE")
        if raw_temperature:
            try:
                settings["temperature"] = float(raw_temperature)
            except ValueError as exc:
                raise ProviderConfigurationError(
                    "openai",
                    f"temperature must be a number, got {raw_temperature!r}",
                    f"{prefix}TEMPERATURE",
                ) from exc
        settings.update(overrides)
        return cls.from_mapping(settings)


__all__ = ["ProviderConfig", "PRIVATE_KEYS", "RECOGNIZED_KEYS", "read_env_file"]
