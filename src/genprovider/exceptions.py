"""
Exceptions raised by generation providers.

Callers only ever see three kinds of failure from `generate`/`embed`:

- GenerationProviderError: the backend call itself failed (network, auth,
  rate limit, invalid request, vendor error). The vendor's error class is
  not exposed; its message text is kept.
- MalformedResponseError: the backend answered, but with nothing usable.
- ProviderConfigurationError: the provider could not be constructed.
"""

from __future__ import annotations


class GenProviderError(Exception):
    """Base exception for all genprovider errors."""

    pass


class GenerationProviderError(GenProviderError):
    """Raised when the backend client fails during a completion or embedding call."""


class MalformedResponseError(GenProviderError):
    """Raised when a backend result is missing the entries a response is built from."""

    def __init__(self, message: str, raw: object = None):
        self.raw = raw
        super().__init__(message)


class ProviderConfigurationError(GenProviderError):
    """Raised when provider configuration is missing or invalid."""

    def __init__(self, provider_name: str, missing_config: str, env_var: str = ""):
        self.provider_name = provider_name
        self.missing_config = missing_config
        self.env_var = env_var

        message = f"\n{'='*60}\n"
        message += f"❌ Provider Configuration Error: '{provider_name}'\n"
        message += f"{'='*60}\n\n"
        message += f"Problem: {missing_config}\n"
        if env_var:
            message += "\n💡 How to fix:\n"
            message += "  1. Set the environment variable:\n"
            message += f"     export {env_var}='...'\n"
            message += "  2. Or put it in the provider config:\n"
            message += f"     ProviderConfig({env_var.split('_', 1)[-1].lower()}=...)\n"
        message += f"\n{'='*60}\n"

        super().__init__(message)


__all__ = [
    "GenProviderError",
    "GenerationProviderError",
    "MalformedResponseError",
    "ProviderConfigurationError",
]
