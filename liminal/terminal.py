"""Terminal screen model and the escape-sequence interpreter that drives it."""

from __future__ import annotations

import codecs
import dataclasses
import enum
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from .config import TerminalConfig

RGB = tuple[int, int, int]

DEFAULT_FOREGROUND: RGB = (200, 200, 200)
DEFAULT_BACKGROUND: RGB = (0, 0, 0)
TAB_WIDTH = 8

ANSI_COLORS: dict[int, RGB] = {
    0: (0, 0, 0),
    1: (205, 49, 49),
    2: (13, 188, 121),
    3: (229, 229, 16),
    4: (36, 114, 200),
    5: (188, 63, 188),
    6: (17, 168, 205),
    7: (229, 229, 229),
}


@dataclass(frozen=True)
class TerminalCell:
    """One character position on the screen together with its style."""

    character: str = " "
    foreground_color: RGB = DEFAULT_FOREGROUND
    background_color: RGB = DEFAULT_BACKGROUND
    bold: bool = False
    italic: bool = False
    underline: bool = False


_BLANK = TerminalCell()


def _blank_row(cols: int) -> list[TerminalCell]:
    return [_BLANK] * max(cols, 0)


Row = tuple[TerminalCell, ...]


class TerminalBuffer:
    """A grid of cells with a cursor and a bounded scrollback history."""

    def __init__(self, rows: int, cols: int, scrollback_limit: int) -> None:
        self._rows = rows
        self._cols = cols
        self._cells: list[list[TerminalCell]] = [_blank_row(cols) for _ in range(rows)]
        self._cursor_row = 0
        self._cursor_col = 0
        self._scrollback_limit = scrollback_limit
        self._scrollback: deque[list[TerminalCell]] = deque(maxlen=scrollback_limit)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def scrollback_limit(self) -> int:
        return self._scrollback_limit

    def resize(self, rows: int, cols: int) -> None:
        """Change the grid size, keeping existing content where it still fits."""
        self._rows = rows
        self._cols = cols
        del self._cells[rows:]
        self._cells.extend(_blank_row(cols) for _ in range(rows - len(self._cells)))
        for row in self._cells:
            del row[cols:]
            row.extend(_blank_row(cols - len(row)))
        self._cursor_row = min(self._cursor_row, max(rows - 1, 0))
        self._cursor_col = min(self._cursor_col, max(cols - 1, 0))

    def get_cell(self, row: int, col: int) -> TerminalCell | None:
        if 0 <= row < len(self._cells) and 0 <= col < len(self._cells[row]):
            return self._cells[row][col]
        return None

    def set_cell(self, row: int, col: int, cell: TerminalCell) -> None:
        """Store ``cell``; positions outside the grid are ignored."""
        if 0 <= row < len(self._cells) and 0 <= col < len(self._cells[row]):
            self._cells[row][col] = cell

    def cursor_position(self) -> tuple[int, int]:
        return self._cursor_row, self._cursor_col

    def move_cursor(self, row: int, col: int) -> None:
        """Move the cursor, clamping it to the grid."""
        self._cursor_row = max(min(row, self._rows - 1), 0)
        self._cursor_col = max(min(col, self._cols - 1), 0)

    def scroll_up(self, lines: int) -> None:
        """Move the top ``lines`` rows into scrollback and add blank rows below."""
        for _ in range(lines):
            if not self._cells:
                return
            self._scrollback.append(self._cells.pop(0))
            self._cells.append(_blank_row(self._cols))

    def visible_content(self) -> tuple[Row, ...]:
        return tuple(tuple(row) for row in self._cells)

    def scrollback(self) -> tuple[Row, ...]:
        """Rows that scrolled off the top, oldest first."""
        return tuple(tuple(row) for row in self._scrollback)


class _Performer(Protocol):
    def _print(self, char: str) -> None: ...

    def _execute(self, byte: int) -> None: ...

    def _csi_dispatch(
        self,
        params: tuple[tuple[int, ...], ...],
        intermediates: bytes,
        ignore: bool,
        action: str,
    ) -> None: ...


class _State(enum.Enum):
    GROUND = enum.auto()
    ESCAPE = enum.auto()
    ESCAPE_INTERMEDIATE = enum.auto()
    CSI_ENTRY = enum.auto()
    CSI_PARAM = enum.auto()
    CSI_INTERMEDIATE = enum.auto()
    CSI_IGNORE = enum.auto()
    DCS = enum.auto()
    OSC = enum.auto()
    SOS_PM_APC = enum.auto()


_MAX_PARAMS = 32
_MAX_INTERMEDIATES = 2
_PARAM_MAX = 0xFFFF


def _is_execute(byte: int) -> bool:
    return byte < 0x20 and byte not in (0x18, 0x1A, 0x1B)


class _Parser:
    """DEC-style state machine that turns a byte stream into terminal actions."""

    def __init__(self, performer: _Performer) -> None:
        self._performer = performer
        self._state = _State.GROUND
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._clear()

    def _clear(self) -> None:
        self._params: list[tuple[int, ...]] = []
        self._group: list[int] = []
        self._param = 0
        self._count = 0
        self._intermediates = bytearray()
        self._ignoring = False

    def advance(self, byte: int) -> None:
        if self._state is _State.GROUND:
            self._ground(byte)
            return
        if byte in (0x18, 0x1A):
            self._performer._execute(byte)
            self._state = _State.GROUND
            return
        if byte == 0x1B:
            self._enter_escape()
            return
        match self._state:
            case _State.ESCAPE:
                self._escape(byte)
            case _State.ESCAPE_INTERMEDIATE:
                self._escape_intermediate(byte)
            case _State.CSI_ENTRY | _State.CSI_PARAM:
                self._csi_param(byte)
            case _State.CSI_INTERMEDIATE:
                self._csi_intermediate(byte)
            case _State.CSI_IGNORE:
                self._csi_ignore(byte)
            case _State.OSC:
                if byte == 0x07:
                    self._state = _State.GROUND
            case _State.DCS | _State.SOS_PM_APC:
                pass

    def _ground(self, byte: int) -> None:
        if byte >= 0x80:
            for char in self._decoder.decode(bytes((byte,))):
                self._performer._print(char)
            return
        if self._decoder.getstate()[0]:
            self._decoder.reset()
            self._performer._print("\ufffd")
        if byte == 0x1B:
            self._enter_escape()
        elif byte < 0x20:
            self._performer._execute(byte)
        else:
            self._performer._print(chr(byte))

    def _enter_escape(self) -> None:
        self._clear()
        self._state = _State.ESCAPE

    def _collect(self, byte: int) -> None:
        if len(self._intermediates) >= _MAX_INTERMEDIATES:
            self._ignoring = True
        else:
            self._intermediates.append(byte)

    def _escape(self, byte: int) -> None:
        if _is_execute(byte):
            self._performer._execute(byte)
        elif 0x20 <= byte <= 0x2F:
            self._collect(byte)
            self._state = _State.ESCAPE_INTERMEDIATE
        elif byte == 0x5B:
            self._clear()
            self._state = _State.CSI_ENTRY
        elif byte == 0x5D:
            self._state = _State.OSC
        elif byte == 0x50:
            self._clear()
            self._state = _State.DCS
        elif byte in (0x58, 0x5E, 0x5F):
            self._state = _State.SOS_PM_APC
        elif 0x30 <= byte <= 0x7E:
            self._state = _State.GROUND

    def _escape_intermediate(self, byte: int) -> None:
        if _is_execute(byte):
            self._performer._execute(byte)
        elif 0x20 <= byte <= 0x2F:
            self._collect(byte)
        elif 0x30 <= byte <= 0x7E:
            self._state = _State.GROUND

    def _finish_value(self) -> None:
        if self._count >= _MAX_PARAMS:
            self._ignoring = True
        else:
            self._group.append(self._param)
            self._count += 1
        self._param = 0

    def _finish_param(self) -> None:
        self._finish_value()
        if self._group:
            self._params.append(tuple(self._group))
        self._group = []

    def _csi_param(self, byte: int) -> None:
        if _is_execute(byte):
            self._performer._execute(byte)
        elif 0x20 <= byte <= 0x2F:
            self._collect(byte)
            self._state = _State.CSI_INTERMEDIATE
        elif 0x30 <= byte <= 0x39:
            self._param = min(self._param * 10 + (byte - 0x30), _PARAM_MAX)
            self._state = _State.CSI_PARAM
        elif byte == 0x3A:
            self._finish_value()
            self._state = _State.CSI_PARAM
        elif byte == 0x3B:
            self._finish_param()
            self._state = _State.CSI_PARAM
        elif 0x3C <= byte <= 0x3F:
            if self._state is _State.CSI_ENTRY:
                self._collect(byte)
                self._state = _State.CSI_PARAM
            else:
                self._state = _State.CSI_IGNORE
        elif 0x40 <= byte <= 0x7E:
            self._dispatch(byte)

    def _csi_intermediate(self, byte: int) -> None:
        if _is_execute(byte):
            self._performer._execute(byte)
        elif 0x20 <= byte <= 0x2F:
            self._collect(byte)
        elif 0x30 <= byte <= 0x3F:
            self._state = _State.CSI_IGNORE
        elif 0x40 <= byte <= 0x7E:
            self._dispatch(byte)

    def _csi_ignore(self, byte: int) -> None:
        if _is_execute(byte):
            self._performer._execute(byte)
        elif 0x40 <= byte <= 0x7E:
            self._state = _State.GROUND

    def _dispatch(self, byte: int) -> None:
        self._finish_param()
        self._performer._csi_dispatch(
            tuple(self._params), bytes(self._intermediates), self._ignoring, chr(byte)
        )
        self._state = _State.GROUND


def _first(params: tuple[tuple[int, ...], ...], index: int, default: int) -> int:
    if index < len(params) and params[index]:
        return params[index][0]
    return default


class Terminal:
    """Interprets shell output and keeps the resulting screen in a buffer."""

    def __init__(self, rows: int = 24, cols: int = 80, scrollback_limit: int = 10000) -> None:
        self._buffer = TerminalBuffer(rows, cols, scrollback_limit)
        self._parser = _Parser(self)
        self._style = TerminalCell()

    @classmethod
    def from_config(cls, config: TerminalConfig) -> Terminal:
        return cls(config.rows, config.cols, config.scrollback_limit)

    @property
    def buffer(self) -> TerminalBuffer:
        return self._buffer

    @property
    def current_style(self) -> TerminalCell:
        return self._style

    def process_data(self, data: Iterable[int]) -> None:
        """Feed raw bytes from the shell through the parser."""
        for byte in data:
            self._parser.advance(byte)

    def resize(self, rows: int, cols: int) -> None:
        self._buffer.resize(rows, cols)

    def cursor_position(self) -> tuple[int, int]:
        return self._buffer.cursor_position()

    def _print(self, char: str) -> None:
        buf = self._buffer
        row, col = buf.cursor_position()
        buf.set_cell(row, col, dataclasses.replace(self._style, character=char))
        if col + 1 < buf.cols:
            buf.move_cursor(row, col + 1)
        elif row + 1 < buf.rows:
            buf.move_cursor(row + 1, 0)
        else:
            buf.scroll_up(1)
            buf.move_cursor(buf.rows - 1, 0)

    def _execute(self, byte: int) -> None:
        buf = self._buffer
        row, col = buf.cursor_position()
        if byte == 0x0A:
            if row + 1 < buf.rows:
                buf.move_cursor(row + 1, col)
            else:
                buf.scroll_up(1)
        elif byte == 0x0D:
            buf.move_cursor(row, 0)
        elif byte == 0x09:
            next_tab = (col // TAB_WIDTH + 1) * TAB_WIDTH
            buf.move_cursor(row, min(next_tab, buf.cols - 1))

    def _csi_dispatch(
        self,
        params: tuple[tuple[int, ...], ...],
        intermediates: bytes,
        ignore: bool,
        action: str,
    ) -> None:
        buf = self._buffer
        row, col = buf.cursor_position()
        match action:
            case "A":
                buf.move_cursor(max(row - _first(params, 0, 1), 0), col)
            case "B":
                buf.move_cursor(min(row + _first(params, 0, 1), buf.rows - 1), col)
            case "C":
                buf.move_cursor(row, min(col + _first(params, 0, 1), buf.cols - 1))
            case "D":
                buf.move_cursor(row, max(col - _first(params, 0, 1), 0))
            case "H":
                target_row = max(_first(params, 0, 1) - 1, 0)
                target_col = max(_first(params, 1, 1) - 1, 0)
                buf.move_cursor(target_row, target_col)
            case "m":
                for param in params:
                    for value in param:
                        self._apply_sgr(value)

    def _apply_sgr(self, value: int) -> None:
        if value == 0:
            self._style = TerminalCell()
        elif value == 1:
            self._style = dataclasses.replace(self._style, bold=True)
        elif value == 3:
            self._style = dataclasses.replace(self._style, italic=True)
        elif value == 4:
            self._style = dataclasses.replace(self._style, underline=True)
        elif 30 <= value <= 37:
            self._style = dataclasses.replace(self._style, foreground_color=ANSI_COLORS[value - 30])
        elif 40 <= value <= 47:
            self._style = dataclasses.replace(self._style, background_color=ANSI_COLORS[value - 40])