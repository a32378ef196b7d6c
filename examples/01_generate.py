"""
Generate: chat completion, streaming, and embeddings with OpenAIProvider.

Prerequisites:
    pip install genprovider
    export OPENAI_API_KEY=sk-...

Run:
    python examples/01_generate.py
"""

import logging

from genprovider import Message, OpenAIProvider, Prompt, ProviderConfig, Role


def print_delta(message: Message, delta, finished: bool) -> None:
    if finished:
        print()
    else:
        print(delta, end="", flush=True)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    provider = OpenAIProvider(ProviderConfig.from_env(temperature=0.2))

    prompt = Prompt(messages=[Message(role=Role.USER, content="Name three prime numbers.")])
    response = provider.generate(prompt)
    print(f"Reply: {response.content} (finish_reason={response.message.finish_reason})")

    prompt.messages.append(Message(role=Role.USER, content="Now explain why 1 is not prime."))
    prompt.options["stream"] = True
    print("Streaming: ", end="")
    provider.generate(prompt, on_stream=print_delta)
    print(f"Conversation now has {len(prompt.messages)} messages")

    embedding = provider.embed(Prompt(message=Message(role=Role.USER, content="prime numbers")))
    print(f"Embedding dimension: {len(embedding.content)}")


if __name__ == "__main__":
    main()
