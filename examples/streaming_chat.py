"""
Example: Streaming Chat

This example streams one reply from OpenRouter and one from a local
KoboldCPP server, printing only the new part of each fragment, and
shows how a stream that disconnects part-way reports what it received.
"""

import asyncio

from relay_llm_sdk import (
    ChatMessage,
    GenerationConfig,
    ProviderError,
    RelayLLMClient,
    StreamingOptions,
)


async def print_stream(session):
    """Print a stream as it arrives. Returns the final text."""
    printed = 0
    text = ""
    try:
        async with session:
            async for fragment in session:
                text = fragment.text or ""
                print(text[printed:], end="", flush=True)
                printed = len(text)
    except ProviderError as e:
        partial = e.partial.text if e.partial else ""
        print(f"\n[stream ended early: {e.kind.value}, kept {len(partial)} chars]")
        return partial
    print()
    return text


async def example_openrouter_stream():
    """Stream a chat reply from OpenRouter."""
    print("=== OpenRouter ===\n")

    config = GenerationConfig.for_openrouter(
        "openai/gpt-4o-mini",
        [
            ChatMessage.system("You are a concise poet."),
            ChatMessage.user("Write a haiku about Python programming"),
        ],
        max_length=100,
    )
    async with RelayLLMClient.openrouter() as client:
        options = StreamingOptions(log_streaming_metrics=True)
        await print_stream(client.stream_message(config, options))


async def example_kobold_stream():
    """Stream a completion from a local KoboldCPP server."""
    print("\n=== KoboldCPP ===\n")

    config = GenerationConfig.for_kobold(
        "User: Count from 1 to 5\nBot:",
        memory="The bot answers briefly.\n",
        max_length=50,
    )
    async with RelayLLMClient.kobold() as client:
        print(f"Model: {await client.connect()}")
        print(f"Prompt tokens: {await client.count_tokens(config.prompt)}")
        await print_stream(client.stream_message(config))


async def main():
    for example in (example_openrouter_stream, example_kobold_stream):
        try:
            await example()
        except ProviderError as e:
            print(f"Error: {e}")


if __name__ == "__main__":
    asyncio.run(main())
