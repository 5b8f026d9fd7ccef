"""Client for a local Ollama server."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from .config import AiConfig
from .errors import AiError

logger = logging.getLogger(__name__)

OLLAMA_EXECUTABLE = "ollama"

GENERATE_PROMPT = (
    "You are a helpful assistant that generates shell commands based on natural "
    "language descriptions. Only respond with the command, no explanations unless asked."
)
EXPLAIN_PROMPT = (
    "You are a helpful assistant that explains shell command output. "
    "Be concise but informative."
)
QUESTION_PROMPT = (
    "You are a helpful assistant that answers questions about shell commands, terminal "
    "usage, and system administration. Be practical and provide examples when helpful."
)


def _expect(data: Any, key: str, kind: type | tuple[type, ...]) -> Any:
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    if key not in data:
        raise ValueError(f"missing field `{key}`")
    value = data[key]
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"invalid type for `{key}`")
    return value


def _optional(data: dict[str, Any], key: str, kind: type) -> Any:
    if data.get(key) is None:
        return None
    return _expect(data, key, kind)


@dataclass
class ChatMessage:
    role: str
    content: str


def _message_from(data: Any) -> ChatMessage:
    return ChatMessage(role=_expect(data, "role", str), content=_expect(data, "content", str))


@dataclass
class ChatOptions:
    temperature: float
    num_ctx: int


@dataclass
class ChatRequest:
    model: str
    messages: list[ChatMessage]
    options: ChatOptions
    stream: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body of an ``/api/chat`` request."""
        return {
            "model": self.model,
            "messages": [dataclasses.asdict(m) for m in self.messages],
            "stream": self.stream,
            "options": dataclasses.asdict(self.options),
        }


@dataclass
class ChatResponse:
    model: str
    created_at: str
    message: ChatMessage
    done: bool

    @classmethod
    def from_dict(cls, data: Any) -> ChatResponse:
        """Parse a chat reply; raises ValueError on a missing or mistyped field."""
        return cls(
            model=_expect(data, "model", str),
            created_at=_expect(data, "created_at", str),
            message=_message_from(_expect(data, "message", dict)),
            done=_expect(data, "done", bool),
        )


@dataclass
class ModelInfo:
    name: str
    modified_at: str
    size: int | None = None
    digest: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ModelInfo:
        """Parse one entry of ``/api/tags``; raises ValueError on bad input."""
        name = _expect(data, "name", str)
        modified_at = _expect(data, "modified_at", str)
        size = _optional(data, "size", int)
        if size is not None and (isinstance(size, bool) or size < 0):
            raise ValueError("invalid value for `size`")
        return cls(
            name=name,
            modified_at=modified_at,
            size=size,
            digest=_optional(data, "digest", str),
        )


def _parse_models(data: Any) -> list[ModelInfo]:
    return [ModelInfo.from_dict(entry) for entry in _expect(data, "models", list)]


@dataclass
class OllamaClient:
    """Talks to Ollama over HTTP and manages the local server and models."""

    config: AiConfig
    client: httpx.AsyncClient = field(default_factory=lambda: httpx.AsyncClient(timeout=None))
    startup_delay: float = 3.0
    poll_interval: float = 0.5
    poll_attempts: int = 10
    _server_process: asyncio.subprocess.Process | None = field(default=None, init=False, repr=False)

    @property
    def base_url(self) -> str:
        return self.config.ollama_base_url

    @property
    def model_name(self) -> str:
        return self.config.model_name

    @classmethod
    async def create(cls, config: AiConfig) -> OllamaClient:
        """Build a client and, when AI is enabled, make sure Ollama is ready."""
        client = cls(dataclasses.replace(config))
        if config.enabled:
            try:
                await client.ensure_available()
            except BaseException:
                await client.aclose()
                raise
        return client

    async def __aenter__(self) -> OllamaClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def ensure_available(self) -> None:
        """Check installation, start the server and pull the model as needed."""
        if not await self.is_installed():
            raise AiError("Ollama is not installed. Please install Ollama and make sure it is on PATH.")
        if not await self.is_running():
            logger.info("Starting Ollama server...")
            await self.start_server()
        if not await self.is_model_available():
            logger.info("Model '%s' not found. Pulling model...", self.model_name)
            await self.pull_model()

    async def is_installed(self) -> bool:
        try:
            process = await asyncio.create_subprocess_exec(
                OLLAMA_EXECUTABLE,
                "--version",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            await process.communicate()
        except OSError:
            return False
        return True

    async def is_running(self) -> bool:
        """True if the server answers at all, whatever the status code."""
        try:
            await self.client.get(self._url("/api/tags"))
        except httpx.HTTPError:
            return False
        return True

    async def start_server(self) -> None:
        try:
            self._server_process = await asyncio.create_subprocess_exec(OLLAMA_EXECUTABLE, "serve")
        except OSError as exc:
            raise AiError(f"Failed to start Ollama server: {exc}") from exc
        await asyncio.sleep(self.startup_delay)
        for _ in range(self.poll_attempts):
            if await self.is_running():
                return
            await asyncio.sleep(self.poll_interval)
        raise AiError("Failed to start Ollama server")

    async def _fetch_models(self, action: str) -> list[ModelInfo]:
        try:
            response = await self.client.get(self._url("/api/tags"))
        except httpx.HTTPError as exc:
            raise AiError(f"Failed to {action}: {exc}") from exc
        try:
            return _parse_models(response.json())
        except ValueError as exc:
            raise AiError(f"Failed to parse models response: {exc}") from exc

    async def is_model_available(self) -> bool:
        models = await self._fetch_models("check available models")
        return any(self.model_name in model.name for model in models)

    async def pull_model(self) -> None:
        try:
            process = await asyncio.create_subprocess_exec(OLLAMA_EXECUTABLE, "pull", self.model_name)
        except OSError as exc:
            raise AiError(f"Failed to pull model: {exc}") from exc
        try:
            status = await process.wait()
        except OSError as exc:
            raise AiError(f"Failed to wait for model pull: {exc}") from exc
        if status != 0:
            raise AiError(f"Failed to pull model '{self.model_name}'")

    async def chat(self, messages: list[ChatMessage]) -> str:
        """Send a conversation and return the assistant's reply text."""
        if not self.config.enabled:
            raise AiError("AI functionality is disabled")
        request = ChatRequest(
            model=self.model_name,
            messages=list(messages),
            options=ChatOptions(
                temperature=self.config.temperature,
                num_ctx=self.config.context_length,
            ),
        )
        try:
            response = await self.client.post(self._url("/api/chat"), json=request.to_dict())
        except httpx.HTTPError as exc:
            raise AiError(f"Failed to send chat request: {exc}") from exc
        try:
            reply = ChatResponse.from_dict(response.json())
        except ValueError as exc:
            raise AiError(f"Failed to parse chat response: {exc}") from exc
        return reply.message.content

    async def generate_command(self, description: str) -> str:
        return await self.chat(
            [
                ChatMessage("system", GENERATE_PROMPT),
                ChatMessage("user", f"Generate a shell command for: {description}"),
            ]
        )

    async def explain_output(self, command: str, output: str) -> str:
        return await self.chat(
            [
                ChatMessage("system", EXPLAIN_PROMPT),
                ChatMessage("user", f"Explain the output of the command '{command}': {output}"),
            ]
        )

    async def answer_question(self, question: str, context: str | None = None) -> str:
        content = f"Answer this question about shell/terminal usage: {question}"
        if context is not None:
            content += f"\n\nContext: {context}"
        return await self.chat([ChatMessage("system", QUESTION_PROMPT), ChatMessage("user", content)])

    async def available_models(self) -> list[str]:
        models = await self._fetch_models("fetch available models")
        return [model.name for model in models]