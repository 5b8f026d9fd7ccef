# liminal

The core of a terminal emulator with local AI assistance:

- `liminal.terminal`: an ANSI/VT byte-stream interpreter that keeps a grid
  of styled cells, with cursor movement (`CSI A/B/C/D/H`), SGR bold,
  italic, underline and the eight basic foreground and background colours,
  tab stops every eight columns and a bounded scrollback;
- `liminal.shell`: a `ShellManager` that runs a shell as a subprocess,
  queues input for it and yields `OutputEvent`, `ErrorEvent` and
  `ExitEvent` values from `receive_output()`;
- `liminal.ui`: widgets (`TerminalBlock`, `Button`, `AIPanel`), a
  `LayoutEngine` (vertical, horizontal, grid, absolute and flex layouts),
  an `EventHandler` that turns window input into UI events, an
  `EventDispatcher`, a `UiManager` that routes events to widgets, and a
  theme system with dark and light themes;
- `liminal.ai`: an asynchronous `OllamaClient` for a local Ollama server
  that generates shell commands, explains command output and answers
  terminal questions;
- `liminal.config`: TOML configuration stored in the user's configuration
  directory.

## Interactive assistant

With Ollama available on the machine, start the assistant:

```
liminal
```

It loads the configuration (pass `--config PATH` to use another file),
makes sure the `ollama` executable is present, starts `ollama serve` if the
server does not answer, pulls the configured model if it is missing, lists
the installed models and then reads requests line by line:

```
> generate: list all files in current directory
> explain: ls -la output
> question: what does the grep command do?
```

A line without a prefix is treated as a question. Type `quit` or `exit`
(or send end-of-file) to leave. The command exits with status 1 if the
configuration cannot be read or Ollama cannot be reached.

## Configuration

`Config.load()` reads the file at `liminal.config.default_config_path()`;
if it does not exist, the defaults are written there first. The file has
four tables: `terminal`, `renderer`, `ai` and `shell`. Missing or mistyped
fields raise `liminal.errors.ConfigError`.

```python
from liminal.config import Config

config = Config()
text = config.to_toml()
assert Config.from_toml(text) == config
```

## Interpreting terminal output

```python
from liminal.config import Config
from liminal.terminal import Terminal

term = Terminal.from_config(Config().terminal)
term.process_data(b"\x1b[1;31mhello\x1b[0m\r\n")
print(term.cursor_position())          # (1, 0)
print(term.buffer.get_cell(0, 0))      # bold red 'h'
```

## Running a shell

```python
import asyncio
from liminal.shell import ExitEvent, OutputEvent, ShellManager

async def run() -> None:
    async with ShellManager("/bin/sh") as shell:
        await shell.start_shell()
        await shell.send_command("echo hi")
        await shell.close_input()
        while (event := await shell.receive_output()) is not None:
            if isinstance(event, OutputEvent):
                print(event.data)
            elif isinstance(event, ExitEvent):
                print("exit", event.code)

asyncio.run(run())
```

## Talking to Ollama from code

```python
import asyncio
from liminal.ai import OllamaClient
from liminal.config import Config

async def ask() -> None:
    client = await OllamaClient.create(Config().ai)
    try:
        print(await client.generate_command("show disk usage"))
    finally:
        await client.aclose()

asyncio.run(ask())
```

Failures are raised as `liminal.errors.AiError`.

## UI widgets and themes

```python
from liminal.ui.events import Click
from liminal.ui.manager import UiManager
from liminal.ui.styling import ThemeManager

ui = UiManager()
block = ui.create_terminal_block("total 0", "ls -la")
ui.layout()
ui.handle_event(Click(30.0, 30.0))     # collapses the block
print(block.is_expanded)               # False

themes = ThemeManager()
themes.switch_theme("Light")
```

## What this package does not do

There is no window and no drawing. `liminal.ui.renderer.Renderer` only
keeps the surface size and counts frames, and widgets draw through a
`WidgetRenderer` that you supply. The shell runs on plain pipes, not a
pseudo-terminal, so programs that need a real TTY behave as they would in a
pipeline, and `resize_terminal` only exports `COLUMNS` and `LINES` to the
running shell. The only command is the interactive AI assistant above.

## Running the tests

Install the `test` extra and run pytest from the project directory.