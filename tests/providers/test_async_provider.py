"""
Tests for the async facade: agenerate() and aembed().
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from genprovider import GenerationProviderError, MalformedResponseError, OpenAIProvider, Prompt


class AsyncStreamingClient:
    """Async backend client that yields control between chunks."""

    def __init__(self, chunks):
        self.chunks = chunks

    async def chat(self, parameters):
        handler = parameters["stream"]
        for chunk in self.chunks:
            await asyncio.sleep(0)
            handler(chunk)
        return None

    async def embeddings(self, parameters):
        return {"data": [{"embedding": [1.0]}]}


@pytest.fixture
def async_client(chat_result, embedding_result):
    client = MagicMock()
    client.chat = AsyncMock(return_value=chat_result)
    client.embeddings = AsyncMock(return_value=embedding_result)
    return client


class TestNativeAsyncClient:
    @pytest.mark.asyncio
    async def test_agenerate(self, config, async_client, prompt):
        provider = OpenAIProvider(config, client=MagicMock(), async_client=async_client)
        response = await provider.agenerate(prompt)

        assert response.message.content == "Test response"
        assert prompt.messages[-1] is response.message
        parameters = async_client.chat.await_args.args[0]
        assert parameters["model"] == "gpt-4"
        assert "stream" not in parameters

    @pytest.mark.asyncio
    async def test_aembed(self, config, async_client, prompt):
        provider = OpenAIProvider(config, client=MagicMock(), async_client=async_client)
        response = await provider.aembed(prompt)

        assert response.message.content == [0.1, 0.2, 0.3]
        async_client.embeddings.assert_awaited_once_with(
            {"model": "text-embedding-ada-002", "input": "Hello"}
        )

    @pytest.mark.asyncio
    async def test_errors_are_wrapped(self, config, async_client, prompt):
        async_client.chat.side_effect = RuntimeError("API Error")
        async_client.embeddings.side_effect = RuntimeError("API Error")
        provider = OpenAIProvider(config, client=MagicMock(), async_client=async_client)

        with pytest.raises(GenerationProviderError, match="API Error"):
            await provider.agenerate(prompt)
        with pytest.raises(GenerationProviderError, match="API Error"):
            await provider.aembed(prompt)

    @pytest.mark.asyncio
    async def test_malformed_result(self, config, async_client, prompt):
        async_client.chat.return_value = {"choices": []}
        provider = OpenAIProvider(config, client=MagicMock(), async_client=async_client)
        with pytest.raises(MalformedResponseError):
            await provider.agenerate(prompt)

    @pytest.mark.asyncio
    async def test_concurrent_streams_do_not_interleave(self, config, stream_chunks):
        provider = OpenAIProvider(
            config, client=MagicMock(), async_client=AsyncStreamingClient(stream_chunks)
        )
        shared = Prompt(options={"stream": True})

        first, second = await asyncio.gather(provider.agenerate(shared), provider.agenerate(shared))

        assert first.content == second.content == "Hello world"
        assert len(shared.messages) == 2
        assert {id(m) for m in shared.messages} == {id(first.message), id(second.message)}


class TestFallbacks:
    @pytest.mark.asyncio
    async def test_sync_client_runs_in_thread(self, config, chat_result, embedding_result, prompt):
        client = MagicMock()
        client.chat.return_value = chat_result
        client.embeddings.return_value = embedding_result
        provider = OpenAIProvider(config, client=client)

        assert (await provider.agenerate(prompt)).content == "Test response"
        assert (await provider.aembed(prompt)).content == [0.1, 0.2, 0.3]
        client.chat.assert_called_once()

    @pytest.mark.asyncio
    async def test_builds_async_openai_client_lazily(self, config_mapping, chat_result, prompt):
        with patch("openai.OpenAI"), patch("openai.AsyncOpenAI") as MockAsync:
            provider = OpenAIProvider(config_mapping)
            MockAsync.assert_not_called()

            dumped = MagicMock()
            dumped.model_dump.return_value = chat_result
            MockAsync.return_value.chat.completions.create = AsyncMock(return_value=dumped)

            response = await provider.agenerate(prompt)

        MockAsync.assert_called_once_with(api_key="test-api-key")
        assert response.content == "Test response"
