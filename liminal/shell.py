"""Shell subprocess management with asynchronous input and output."""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .errors import ShellError

logger = logging.getLogger(__name__)

READ_CHUNK = 4096
INTERACTIVE_SHELLS = ("bash", "zsh")
DEFAULT_COLUMNS = 80
DEFAULT_LINES = 24


@dataclass(frozen=True)
class OutputEvent:
    """Bytes the shell wrote to stdout or stderr."""

    data: bytes


@dataclass(frozen=True)
class ErrorEvent:
    """A failure while reading from or waiting for the shell."""

    message: str


@dataclass(frozen=True)
class ExitEvent:
    """The shell exited; ``code`` is -1 when it was ended by a signal."""

    code: int


ShellEvent = OutputEvent | ErrorEvent | ExitEvent

_CLOSE_INPUT = object()


def detect_shell() -> str:
    """The user's shell from ``SHELL``, else the platform's usual shell."""
    shell = os.environ.get("SHELL")
    if shell is not None:
        return shell
    return "cmd" if sys.platform == "win32" else "/bin/bash"


class ShellManager:
    """Runs a shell as a subprocess, feeding it input and collecting its output."""

    def __init__(
        self,
        shell_command: str | None = None,
        working_directory: str | Path | None = None,
        environment_vars: Mapping[str, str] | None = None,
    ) -> None:
        self.shell_command = shell_command if shell_command is not None else detect_shell()
        if working_directory is None:
            try:
                working_directory = Path.cwd()
            except OSError as exc:
                raise ShellError(f"Failed to get current directory: {exc}") from exc
        self.working_directory = Path(working_directory)
        self.environment_vars: dict[str, str] = dict(environment_vars or {})
        self._process: asyncio.subprocess.Process | None = None
        self._events: asyncio.Queue[ShellEvent | None] | None = None
        self._input: asyncio.Queue[object] | None = None
        self._tasks: list[asyncio.Task[None]] = []
        self._producers = 0
        self._output_done = False
        self._input_closed = False
        self._writer_done = False

    async def __aenter__(self) -> ShellManager:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _environment(self) -> dict[str, str]:
        env = {**os.environ, **self.environment_vars}
        env["TERM"] = "xterm-256color"
        env["COLUMNS"] = str(DEFAULT_COLUMNS)
        env["LINES"] = str(DEFAULT_LINES)
        return env

    async def start_shell(self) -> None:
        """Start the shell process and the tasks that move its input and output."""
        if self._process is not None:
            raise ShellError("Shell process already running")
        args = ["-i"] if self.shell_command.endswith(INTERACTIVE_SHELLS) else []
        try:
            process = await asyncio.create_subprocess_exec(
                self.shell_command,
                *args,
                cwd=self.working_directory,
                env=self._environment(),
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ShellError(f"Failed to start shell process: {exc}") from exc

        if process.stdin is None:
            raise ShellError("Failed to get shell stdin")
        if process.stdout is None:
            raise ShellError("Failed to get shell stdout")
        if process.stderr is None:
            raise ShellError("Failed to get shell stderr")

        self._process = process
        self._events = asyncio.Queue()
        self._input = asyncio.Queue()
        self._producers = 3
        self._tasks = [
            asyncio.create_task(self._write_input(process.stdin, self._input)),
            asyncio.create_task(self._pump(process.stdout, "Stdout")),
            asyncio.create_task(self._pump(process.stderr, "Stderr")),
            asyncio.create_task(self._wait(process)),
        ]
        logger.info("Shell process started: %s", self.shell_command)

    def _emit(self, event: ShellEvent | None) -> None:
        if self._events is not None:
            self._events.put_nowait(event)

    def _producer_finished(self) -> None:
        self._producers -= 1
        if self._producers == 0:
            self._emit(None)

    async def _write_input(
        self, stdin: asyncio.StreamWriter, queue: asyncio.Queue[object]
    ) -> None:
        try:
            while (data := await queue.get()) is not _CLOSE_INPUT:
                try:
                    stdin.write(data)  # type: ignore[arg-type]
                    await stdin.drain()
                except OSError as exc:
                    logger.error("Failed to write to shell stdin: %s", exc)
                    return
            stdin.close()
        finally:
            self._writer_done = True

    async def _pump(self, stream: asyncio.StreamReader, label: str) -> None:
        try:
            while chunk := await stream.read(READ_CHUNK):
                self._emit(OutputEvent(chunk))
        except OSError as exc:
            self._emit(ErrorEvent(f"{label} read error: {exc}"))
        finally:
            self._producer_finished()

    async def _wait(self, process: asyncio.subprocess.Process) -> None:
        try:
            code = await process.wait()
        except OSError as exc:
            self._emit(ErrorEvent(f"Process wait error: {exc}"))
        else:
            self._emit(ExitEvent(code if code >= 0 else -1))
        finally:
            self._producer_finished()

    async def send_input(self, data: bytes) -> None:
        """Queue raw bytes for the shell's stdin."""
        if self._input is None:
            raise ShellError("Shell process not running")
        if self._input_closed or self._writer_done:
            raise ShellError("Failed to send input to shell")
        self._input.put_nowait(bytes(data))

    async def send_command(self, command: str) -> None:
        """Send a command line followed by a newline."""
        await self.send_input(command.encode() + b"\n")

    async def close_input(self) -> None:
        """Close the shell's stdin once the queued input has been written."""
        if self._input is None:
            raise ShellError("Shell process not running")
        if not self._input_closed:
            self._input_closed = True
            self._input.put_nowait(_CLOSE_INPUT)

    async def receive_output(self) -> ShellEvent | None:
        """Wait for the next event; None once every stream has ended or if never started."""
        if self._events is None or self._output_done:
            return None
        event = await self._events.get()
        if event is None:
            self._output_done = True
        return event

    def is_running(self) -> bool:
        return self._process is not None and self._process.returncode is None

    async def resize_terminal(self, cols: int, rows: int) -> None:
        """Record the new size and tell a running shell about it."""
        self.environment_vars["COLUMNS"] = str(cols)
        self.environment_vars["LINES"] = str(rows)
        if self.is_running():
            await self.send_input(f"export COLUMNS={cols} LINES={rows}\n".encode())

    def set_environment_variable(self, key: str, value: str) -> None:
        self.environment_vars[key] = value

    async def close(self) -> None:
        """Kill the shell if it is still running and stop the helper tasks."""
        process = self._process
        if process is not None and process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []