"""Interactive prompt that asks a local Ollama model about shell usage."""

from __future__ import annotations

import argparse
import asyncio
import enum
import sys
from dataclasses import dataclass
from pathlib import Path

from .ai import OllamaClient
from .config import Config
from .errors import AiError, ConfigError

QUIT_WORDS = frozenset({"quit", "exit"})


class RequestKind(enum.Enum):
    GENERATE = "generate"
    EXPLAIN = "explain"
    QUESTION = "question"
    QUIT = "quit"


_PREFIXES = (
    ("generate:", RequestKind.GENERATE),
    ("explain:", RequestKind.EXPLAIN),
    ("question:", RequestKind.QUESTION),
)


@dataclass(frozen=True)
class Request:
    kind: RequestKind
    text: str = ""


def parse_request(line: str) -> Request | None:
    """Classify one line of input; None for a blank line."""
    text = line.strip()
    if not text:
        return None
    if text in QUIT_WORDS:
        return Request(RequestKind.QUIT)
    for prefix, kind in _PREFIXES:
        if text.startswith(prefix):
            return Request(kind, text[len(prefix):].strip())
    return Request(RequestKind.QUESTION, text)


async def _answer(client: OllamaClient, request: Request) -> str:
    match request.kind:
        case RequestKind.GENERATE:
            print(f"🤖 Generating command for: {request.text}")
            return await client.generate_command(request.text)
        case RequestKind.EXPLAIN:
            print(f"🤖 Explaining output: {request.text}")
            return await client.explain_output("command", request.text)
        case _:
            print(f"🤖 Answering question: {request.text}")
            return await client.answer_question(request.text)


def _print_usage() -> None:
    print("Type your questions or commands (type 'quit' to exit):")
    print("Examples:")
    print("  - 'generate: list all files in current directory'")
    print("  - 'explain: ls -la output'")
    print("  - 'question: what does the grep command do?'")
    print()


async def _session(client: OllamaClient) -> None:
    while True:
        try:
            line = await asyncio.to_thread(input, "> ")
        except EOFError:
            print()
            return
        request = parse_request(line)
        if request is None:
            continue
        if request.kind is RequestKind.QUIT:
            print("Goodbye!")
            return
        try:
            answer = await _answer(client, request)
        except AiError as exc:
            print(f"❌ Error: {exc}", file=sys.stderr)
        else:
            print("📝 Response:")
            print(answer)
        print()


async def _run(config_path: Path | None) -> int:
    print("Liminal Terminal - Ollama AI assistant")
    print("======================================\n")

    try:
        config = Config.load(config_path)
    except ConfigError as exc:
        print(f"✗ {exc}", file=sys.stderr)
        return 1

    try:
        client = await OllamaClient.create(config.ai)
    except AiError as exc:
        print(f"✗ Failed to connect to Ollama: {exc}", file=sys.stderr)
        print("Make sure Ollama is installed and running:", file=sys.stderr)
        print("  1. Install Ollama", file=sys.stderr)
        print("  2. Run: ollama serve", file=sys.stderr)
        print(f"  3. Pull a model: ollama pull {config.ai.model_name}", file=sys.stderr)
        return 1

    async with client:
        print(f"✓ Successfully connected to Ollama at {config.ai.ollama_base_url}")
        try:
            models = await client.available_models()
        except AiError as exc:
            print(f"Warning: Could not list models: {exc}", file=sys.stderr)
        else:
            print("Available models:")
            for model in models:
                print(f"  - {model}")
            print()
        _print_usage()
        await _session(client)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the interactive assistant; returns the process exit status."""
    parser = argparse.ArgumentParser(
        prog="liminal-ai",
        description="Ask a local Ollama model to generate, explain or answer shell questions.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="configuration file to use instead of the per-user one",
    )
    args = parser.parse_args(argv)
    try:
        return asyncio.run(_run(args.config))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())