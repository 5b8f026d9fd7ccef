"""Configuration model and its TOML persistence."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import platformdirs
import tomli_w

from .errors import ConfigError

APP_NAME = "liminal"
CONFIG_FILE_NAME = "config.toml"

Color = tuple[float, float, float, float]


def default_config_path() -> Path:
    """Return the path of the user's configuration file."""
    return platformdirs.user_config_path(APP_NAME, appauthor=False) / CONFIG_FILE_NAME


def _parse_error(detail: str) -> ConfigError:
    return ConfigError(f"Failed to parse config: {detail}")


def _field(data: dict[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise _parse_error(f"missing field `{key}`") from None


def _table(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = _field(data, key)
    if not isinstance(value, dict):
        raise _parse_error(f"invalid type for `{key}`, expected a table")
    return value


def _uint(data: dict[str, Any], key: str) -> int:
    value = _field(data, key)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise _parse_error(f"invalid value for `{key}`, expected a non-negative integer")
    return value


def _float(data: dict[str, Any], key: str) -> float:
    value = _field(data, key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _parse_error(f"invalid type for `{key}`, expected a number")
    return float(value)


def _bool(data: dict[str, Any], key: str) -> bool:
    value = _field(data, key)
    if not isinstance(value, bool):
        raise _parse_error(f"invalid type for `{key}`, expected a boolean")
    return value


def _str(data: dict[str, Any], key: str) -> str:
    value = _field(data, key)
    if not isinstance(value, str):
        raise _parse_error(f"invalid type for `{key}`, expected a string")
    return value


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    return _str(data, key) if key in data else None


def _color(data: dict[str, Any], key: str) -> Color:
    value = _field(data, key)
    if (
        not isinstance(value, list)
        or len(value) != 4
        or any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in value)
    ):
        raise _parse_error(f"invalid value for `{key}`, expected an array of 4 numbers")
    return tuple(float(v) for v in value)  # type: ignore[return-value]


@dataclass
class TerminalConfig:
    rows: int = 24
    cols: int = 80
    scrollback_limit: int = 10000
    font_family: str = "JetBrains Mono"
    font_size: float = 14.0

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> TerminalConfig:
        return cls(
            rows=_uint(data, "rows"),
            cols=_uint(data, "cols"),
            scrollback_limit=_uint(data, "scrollback_limit"),
            font_family=_str(data, "font_family"),
            font_size=_float(data, "font_size"),
        )

    def _to_dict(self) -> dict[str, Any]:
        return {
            "rows": self.rows,
            "cols": self.cols,
            "scrollback_limit": self.scrollback_limit,
            "font_family": self.font_family,
            "font_size": self.font_size,
        }


@dataclass
class RendererConfig:
    vsync: bool = True
    gpu_acceleration: bool = True
    background_color: Color = (0.1, 0.1, 0.1, 1.0)
    text_color: Color = (0.9, 0.9, 0.9, 1.0)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> RendererConfig:
        return cls(
            vsync=_bool(data, "vsync"),
            gpu_acceleration=_bool(data, "gpu_acceleration"),
            background_color=_color(data, "background_color"),
            text_color=_color(data, "text_color"),
        )

    def _to_dict(self) -> dict[str, Any]:
        return {
            "vsync": self.vsync,
            "gpu_acceleration": self.gpu_acceleration,
            "background_color": list(self.background_color),
            "text_color": list(self.text_color),
        }


@dataclass
class AiConfig:
    ollama_base_url: str = "http://localhost:11434"
    model_name: str = "deepseek-r1:1.5b"
    context_length: int = 4096
    temperature: float = 0.7
    enabled: bool = True

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> AiConfig:
        return cls(
            ollama_base_url=_str(data, "ollama_base_url"),
            model_name=_str(data, "model_name"),
            context_length=_uint(data, "context_length"),
            temperature=_float(data, "temperature"),
            enabled=_bool(data, "enabled"),
        )

    def _to_dict(self) -> dict[str, Any]:
        return {
            "ollama_base_url": self.ollama_base_url,
            "model_name": self.model_name,
            "context_length": self.context_length,
            "temperature": self.temperature,
            "enabled": self.enabled,
        }


@dataclass
class ShellConfig:
    shell_command: str | None = None
    working_directory: Path | None = None
    environment_variables: dict[str, str] = field(default_factory=dict)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> ShellConfig:
        directory = _optional_str(data, "working_directory")
        env = _table(data, "environment_variables")
        if not all(isinstance(k, str) and isinstance(v, str) for k, v in env.items()):
            raise _parse_error("invalid value for `environment_variables`, expected strings")
        return cls(
            shell_command=_optional_str(data, "shell_command"),
            working_directory=Path(directory) if directory is not None else None,
            environment_variables=dict(env),
        )

    def _to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.shell_command is not None:
            result["shell_command"] = self.shell_command
        if self.working_directory is not None:
            result["working_directory"] = str(self.working_directory)
        result["environment_variables"] = dict(self.environment_variables)
        return result


@dataclass
class Config:
    """Complete application configuration."""

    terminal: TerminalConfig = field(default_factory=TerminalConfig)
    renderer: RendererConfig = field(default_factory=RendererConfig)
    ai: AiConfig = field(default_factory=AiConfig)
    shell: ShellConfig = field(default_factory=ShellConfig)

    def to_dict(self) -> dict[str, Any]:
        """Return a TOML-ready nested dictionary; unset options are omitted."""
        return {
            "terminal": self.terminal._to_dict(),
            "renderer": self.renderer._to_dict(),
            "ai": self.ai._to_dict(),
            "shell": self.shell._to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build a configuration, raising ConfigError on missing or bad fields."""
        return cls(
            terminal=TerminalConfig._from_dict(_table(data, "terminal")),
            renderer=RendererConfig._from_dict(_table(data, "renderer")),
            ai=AiConfig._from_dict(_table(data, "ai")),
            shell=ShellConfig._from_dict(_table(data, "shell")),
        )

    def to_toml(self) -> str:
        try:
            return tomli_w.dumps(self.to_dict())
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Failed to serialize config: {exc}") from exc

    @classmethod
    def from_toml(cls, text: str) -> Config:
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise _parse_error(str(exc)) from exc
        return cls.from_dict(data)

    @classmethod
    def load(cls, path: str | Path | None = None) -> Config:
        """Read the configuration file, writing the defaults if it does not exist."""
        config_path = Path(path) if path is not None else default_config_path()
        if config_path.exists():
            try:
                text = config_path.read_text(encoding="utf-8")
            except OSError as exc:
                raise ConfigError(f"Failed to read config file: {exc}") from exc
            return cls.from_toml(text)
        config = cls()
        config.save(config_path)
        return config

    def save(self, path: str | Path | None = None) -> None:
        config_path = Path(path) if path is not None else default_config_path()
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigError(f"Failed to create config directory: {exc}") from exc
        content = self.to_toml()
        try:
            config_path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Failed to write config file: {exc}") from exc