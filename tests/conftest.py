"""
Pytest configuration for genprovider tests.

Registers the e2e/openai markers, the --run-e2e option, and the shared
prompt and backend-payload fixtures.
"""

import os

import pytest

from genprovider import Message, Prompt, ProviderConfig, Role


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="Run end-to-end tests with real API calls",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "e2e: mark test as end-to-end (requires real API keys, use --run-e2e to run)"
    )
    config.addinivalue_line("markers", "openai: mark test as requiring OpenAI API key")


def pytest_collection_modifyitems(config, items):
    """Skip e2e tests unless --run-e2e is passed and a key is available."""
    if config.getoption("--run-e2e"):
        if os.getenv("OPENAI_API_KEY"):
            return
        reason = "OPENAI_API_KEY is not set"
    else:
        reason = "Need --run-e2e option to run end-to-end tests"

    skip_e2e = pytest.mark.skip(reason=reason)
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def config_mapping():
    return {
        "api_key": "test-api-key",
        "model": "gpt-4",
        "temperature": 0.5,
        "service": "openai",
    }


@pytest.fixture
def config(config_mapping):
    return ProviderConfig.from_mapping(config_mapping)


@pytest.fixture
def actions():
    return [{"name": "test_action", "parameters": {}}]


@pytest.fixture
def prompt(actions):
    """Non-streaming prompt whose target message is 'Hello'."""
    return Prompt(
        messages=[{"role": "user", "content": "Hello"}],
        actions=actions,
        options={"stream": False},
        message=Message(role=Role.USER, content="Hello"),
    )


@pytest.fixture
def streaming_prompt(actions):
    return Prompt(
        messages=[{"role": "user", "content": "Hello"}],
        actions=actions,
        options={"stream": True},
        message=Message(role=Role.USER, content="Hello"),
    )


@pytest.fixture
def chat_result():
    """Raw synchronous chat completion result."""
    return {
        "choices": [
            {
                "message": {
                    "content": "Test response",
                    "role": "assistant",
                    "finish_reason": "stop",
                }
            }
        ]
    }


@pytest.fixture
def embedding_result():
    return {"data": [{"embedding": [0.1, 0.2, 0.3]}]}


@pytest.fixture
def stream_chunks():
    """Chunks of a streamed completion, ending with a usage trailer."""
    return [
        {"choices": [{"index": 0, "delta": {"role": "assistant", "content": ""}}]},
        {"choices": [{"index": 0, "delta": {"content": "Hel"}}]},
        {"choices": [{"index": 0, "delta": {"content": "lo"}}]},
        {"choices": [{"index": 0, "delta": {"content": " world"}, "finish_reason": None}]},
        {"choices": [{"index": 0, "delta": {}, "finish_reason": "stop"}]},
        {"choices": [], "usage": {"prompt_tokens": 5, "completion_tokens": 3}},
    ]
