import asyncio
import sys
from pathlib import Path

import pytest

from liminal.errors import ShellError
from liminal.shell import (
    ErrorEvent,
    ExitEvent,
    OutputEvent,
    ShellManager,
    detect_shell,
)


async def _drain(manager, timeout=20.0):
    events = []
    while (event := await asyncio.wait_for(manager.receive_output(), timeout)) is not None:
        events.append(event)
    return events


def _output(events):
    return b"".join(e.data for e in events if isinstance(e, OutputEvent))


async def _run_script(manager, *lines):
    await manager.start_shell()
    try:
        for line in lines:
            await manager.send_command(line)
        await manager.close_input()
        return await _drain(manager)
    finally:
        await manager.close()


@pytest.mark.asyncio
async def test_runs_commands_and_reports_exit():
    manager = ShellManager(shell_command=sys.executable)
    events = await _run_script(manager, "print('hello')")
    assert b"hello" in _output(events)
    assert ExitEvent(0) in events
    assert not any(isinstance(e, ErrorEvent) for e in events)


@pytest.mark.asyncio
async def test_exit_code_is_reported():
    manager = ShellManager(shell_command=sys.executable)
    events = await _run_script(manager, "import sys", "sys.exit(3)")
    assert ExitEvent(3) in events


@pytest.mark.asyncio
async def test_send_input_passes_raw_bytes():
    manager = ShellManager(shell_command=sys.executable)
    await manager.start_shell()
    try:
        await manager.send_input(b"print('abc')\n")
        await manager.close_input()
        events = await _drain(manager)
    finally:
        await manager.close()
    assert b"abc" in _output(events)


@pytest.mark.asyncio
async def test_terminal_environment_is_set():
    manager = ShellManager(shell_command=sys.executable)
    manager.set_environment_variable("LIMINAL_TEST_VAR", "value")
    events = await _run_script(
        manager,
        "import os",
        "print(os.environ['TERM'])",
        "print(os.environ['COLUMNS'], os.environ['LINES'])",
        "print(os.environ['LIMINAL_TEST_VAR'])",
    )
    lines = _output(events).decode().split()
    assert lines == ["xterm-256color", "80", "24", "value"]


@pytest.mark.asyncio
async def test_terminal_size_variables_override_custom_ones():
    manager = ShellManager(shell_command=sys.executable, environment_vars={"COLUMNS": "132"})
    events = await _run_script(manager, "import os", "print(os.environ['COLUMNS'])")
    assert _output(events).decode().strip() == "80"


@pytest.mark.asyncio
async def test_working_directory_is_used(tmp_path):
    manager = ShellManager(shell_command=sys.executable, working_directory=tmp_path)
    events = await _run_script(manager, "import os", "print(os.getcwd())")
    assert Path(_output(events).decode().strip()).samefile(tmp_path)


@pytest.mark.asyncio
async def test_is_running_follows_process():
    manager = ShellManager(shell_command=sys.executable)
    assert manager.is_running() is False
    await manager.start_shell()
    try:
        assert manager.is_running() is True
        await manager.close_input()
        await _drain(manager)
        assert manager.is_running() is False
    finally:
        await manager.close()


@pytest.mark.asyncio
async def test_close_kills_running_shell():
    manager = ShellManager(shell_command=sys.executable)
    await manager.start_shell()
    await manager.close()
    assert manager.is_running() is False


@pytest.mark.asyncio
async def test_starting_twice_fails():
    manager = ShellManager(shell_command=sys.executable)
    await manager.start_shell()
    try:
        with pytest.raises(ShellError, match="already running"):
            await manager.start_shell()
    finally:
        await manager.close()


@pytest.mark.asyncio
async def test_send_before_start_fails():
    manager = ShellManager(shell_command=sys.executable)
    with pytest.raises(ShellError, match="Shell process not running"):
        await manager.send_command("print('x')")


@pytest.mark.asyncio
async def test_send_after_closing_input_fails():
    manager = ShellManager(shell_command=sys.executable)
    await manager.start_shell()
    try:
        await manager.close_input()
        with pytest.raises(ShellError, match="Failed to send input to shell"):
            await manager.send_input(b"x\n")
    finally:
        await manager.close()


@pytest.mark.asyncio
async def test_receive_before_start_returns_none():
    manager = ShellManager(shell_command=sys.executable)
    assert await manager.receive_output() is None


@pytest.mark.asyncio
async def test_receive_after_end_keeps_returning_none():
    manager = ShellManager(shell_command=sys.executable)
    await _run_script(manager, "pass")
    assert await manager.receive_output() is None
    assert await manager.receive_output() is None


@pytest.mark.asyncio
async def test_missing_shell_fails_to_start(tmp_path):
    manager = ShellManager(shell_command=str(tmp_path / "no-such-shell"))
    with pytest.raises(ShellError, match="Failed to start shell process"):
        await manager.start_shell()
    assert manager.is_running() is False


@pytest.mark.asyncio
async def test_resize_records_size_when_not_running():
    manager = ShellManager(shell_command=sys.executable)
    await manager.resize_terminal(100, 40)
    assert manager.environment_vars["COLUMNS"] == "100"
    assert manager.environment_vars["LINES"] == "40"


def test_detect_shell_prefers_environment(monkeypatch):
    monkeypatch.setenv("SHELL", "/usr/bin/zsh")
    assert detect_shell() == "/usr/bin/zsh"


def test_detect_shell_falls_back_by_platform(monkeypatch):
    monkeypatch.delenv("SHELL", raising=False)
    expected = "cmd" if sys.platform == "win32" else "/bin/bash"
    assert detect_shell() == expected


def test_defaults_come_from_environment(monkeypatch):
    monkeypatch.setenv("SHELL", "/usr/bin/fish")
    manager = ShellManager()
    assert manager.shell_command == "/usr/bin/fish"
    assert manager.working_directory == Path.cwd()
    assert manager.environment_vars == {}