"""
End-to-end tests against the real OpenAI API.

Skipped by default; run explicitly with an API key:

    pytest tests/providers/test_e2e_openai.py -v --run-e2e

Required environment variables:
    - OPENAI_API_KEY
"""

from __future__ import annotations

import pytest

from genprovider import Message, OpenAIProvider, Prompt, ProviderConfig, Role

pytestmark = [pytest.mark.e2e, pytest.mark.openai]


@pytest.fixture
def live_provider():
    return OpenAIProvider(ProviderConfig.from_env(temperature=0))


def test_generate(live_provider):
    prompt = Prompt(messages=[Message(role=Role.USER, content="Reply with the single word: pong")])
    response = live_provider.generate(prompt)

    assert "pong" in response.content.lower()
    assert response.role == Role.ASSISTANT
    assert prompt.message is response.message


def test_generate_streaming(live_provider):
    deltas = []
    prompt = Prompt(
        messages=[Message(role=Role.USER, content="Count from 1 to 5, separated by spaces.")],
        options={"stream": True},
    )
    response = live_provider.generate(
        prompt, on_stream=lambda message, delta, finished: deltas.append(delta)
    )

    assert "5" in response.content
    assert deltas[-1] is None
    assert response.message.finish_reason == "stop"


def test_embed(live_provider):
    prompt = Prompt(message=Message(role=Role.USER, content="Hello"))
    response = live_provider.embed(prompt)

    assert len(response.content) == 1536
    assert all(isinstance(x, float) for x in response.content)
