"""CLI entry point for Relay LLM SDK."""

import argparse
import asyncio
import sys
from typing import Optional

from .api.client import RelayLLMClient
from .errors import ProviderError
from .importers import ChubImporter
from .models.conversation_types import ChatMessage
from .models.generation import BackendType, GenerationConfig


def build_client(backend: str, host: Optional[str] = None, port: Optional[int] = None) -> RelayLLMClient:
    """Create a client for the chosen backend."""
    if backend == BackendType.KOBOLD.value:
        return RelayLLMClient.kobold(host=host, port=port)
    return RelayLLMClient.openrouter()


def build_config(backend: str, prompt: str, model: Optional[str] = None,
                 max_length: Optional[int] = None, temperature: Optional[float] = None) -> GenerationConfig:
    """Build a generation config for a single prompt."""
    overrides = {}
    if max_length is not None:
        overrides["max_length"] = max_length
    if temperature is not None:
        overrides["temperature"] = temperature

    if backend == BackendType.KOBOLD.value:
        return GenerationConfig.for_kobold(prompt, **overrides)
    if model:
        overrides["model"] = model
    return GenerationConfig(messages=[ChatMessage.user(prompt)], **overrides)


async def connect(args) -> None:
    async with build_client(args.backend, args.host, args.port) as client:
        name = await client.connect()
        print(f"Connected to {args.backend}: {name}")


async def send(args) -> None:
    config = build_config(args.backend, args.prompt, args.model, args.max_length, args.temperature)
    async with build_client(args.backend, args.host, args.port) as client:
        result = await client.send_message(config)
        print(result.text or "")
        if result.prompt_tokens is not None or result.completion_tokens is not None:
            print(f"\nTokens used: prompt={result.prompt_tokens} completion={result.completion_tokens}")


async def stream(args) -> None:
    config = build_config(args.backend, args.prompt, args.model, args.max_length, args.temperature)
    async with build_client(args.backend, args.host, args.port) as client:
        printed = 0
        async with client.stream_message(config) as session:
            async for fragment in session:
                text = fragment.text or ""
                print(text[printed:], end="", flush=True)
                printed = len(text)
        print()  # New line at the end


async def list_models(args) -> None:
    async with build_client(args.backend) as client:
        models = await client.list_models()
        print("Available Models:")
        print("-" * 50)
        for model in models:
            print(f"{model.id} ({model.name or model.id})")
            if model.context_length:
                print(f"   Context: {int(model.context_length)} tokens")


async def import_card(args) -> None:
    importer = ChubImporter()
    try:
        card = await importer.import_from_url(args.url)
    finally:
        await importer.aclose()
    data = card.data
    print(f"Name: {data.name if data else None}")
    print(f"Avatar: {data.avatar if data else None}")
    if args.output:
        with open(args.output, "wb") as f:
            f.write(card.png_data or b"")
        print(f"Saved image to {args.output}")


COMMANDS = {
    "connect": connect,
    "send": send,
    "stream": stream,
    "models": list_models,
    "import-card": import_card,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Relay LLM SDK CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_backend_args(sub, default: str = BackendType.OPENROUTER.value):
        sub.add_argument("--backend", choices=[b.value for b in BackendType], default=default,
                         help="Backend to talk to")
        sub.add_argument("--host", help="KoboldCPP host (default from KOBOLD_HOST)")
        sub.add_argument("--port", type=int, help="KoboldCPP port (default from KOBOLD_PORT)")

    connect_parser = subparsers.add_parser("connect", help="Check that a backend is reachable")
    add_backend_args(connect_parser)

    for name, help_text in (("send", "Generate a full response"), ("stream", "Stream a response")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("prompt", help="Text prompt")
        sub.add_argument("--model", help="OpenRouter model id")
        sub.add_argument("--max-length", type=int, help="Maximum tokens to generate")
        sub.add_argument("--temperature", type=float, help="Sampling temperature")
        add_backend_args(sub)

    models_parser = subparsers.add_parser("models", help="List OpenRouter models")
    models_parser.add_argument("--backend", choices=[BackendType.OPENROUTER.value],
                               default=BackendType.OPENROUTER.value)

    import_parser = subparsers.add_parser("import-card", help="Import a character card from Chub")
    import_parser.add_argument("url", help="chub.ai or characterhub.org character page")
    import_parser.add_argument("--output", help="Write the card image to this file")
    return parser


def main(argv=None):
    """Main CLI function."""
    parser = build_parser()
    args = parser.parse_args(argv)

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return 1

    try:
        asyncio.run(command(args))
    except ProviderError as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
