from pathlib import Path

import pytest

from liminal.config import Config, default_config_path
from liminal.errors import ConfigError


def test_default_config_round_trips_through_toml():
    config = Config()
    text = config.to_toml()
    assert Config.from_toml(text) == config


def test_default_values():
    config = Config()
    assert config.terminal.rows == 24
    assert config.terminal.cols == 80
    assert config.terminal.scrollback_limit == 10000
    assert config.terminal.font_family == "JetBrains Mono"
    assert config.renderer.background_color == (0.1, 0.1, 0.1, 1.0)
    assert config.ai.ollama_base_url == "http://localhost:11434"
    assert config.ai.model_name == "deepseek-r1:1.5b"
    assert config.ai.context_length == 4096
    assert config.shell.shell_command is None


def test_unset_options_are_omitted():
    shell = Config().to_dict()["shell"]
    assert "shell_command" not in shell
    assert "working_directory" not in shell
    assert shell["environment_variables"] == {}


def test_round_trip_with_shell_settings():
    config = Config()
    config.shell.shell_command = "/bin/zsh"
    config.shell.working_directory = Path("/tmp/work")
    config.shell.environment_variables = {"EDITOR": "vim"}
    restored = Config.from_toml(config.to_toml())
    assert restored == config
    assert restored.shell.working_directory == Path("/tmp/work")


def test_invalid_toml_raises():
    with pytest.raises(ConfigError, match="Failed to parse config"):
        Config.from_toml("[terminal\nrows = ")


def test_missing_field_raises():
    data = Config().to_dict()
    del data["ai"]["model_name"]
    with pytest.raises(ConfigError, match="model_name"):
        Config.from_dict(data)


def test_wrong_type_raises():
    data = Config().to_dict()
    data["terminal"]["rows"] = "many"
    with pytest.raises(ConfigError, match="rows"):
        Config.from_dict(data)


def test_color_must_have_four_components():
    data = Config().to_dict()
    data["renderer"]["text_color"] = [1.0, 1.0]
    with pytest.raises(ConfigError, match="text_color"):
        Config.from_dict(data)


def test_load_creates_default_file(tmp_path):
    path = tmp_path / "nested" / "config.toml"
    config = Config.load(path)
    assert config == Config()
    assert path.exists()
    assert Config.from_toml(path.read_text(encoding="utf-8")) == Config()


def test_load_reads_existing_file(tmp_path):
    path = tmp_path / "config.toml"
    config = Config()
    config.terminal.rows = 50
    config.ai.enabled = False
    config.save(path)
    loaded = Config.load(path)
    assert loaded.terminal.rows == 50
    assert loaded.ai.enabled is False


def test_load_from_directory_raises(tmp_path):
    with pytest.raises(ConfigError, match="Failed to read config file"):
        Config.load(tmp_path)


def test_default_config_path_layout():
    path = default_config_path()
    assert path.name == "config.toml"
    assert path.parent.name == "liminal"