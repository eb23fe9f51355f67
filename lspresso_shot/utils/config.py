import os
from pathlib import Path
from typing import Any

import tomli
import tomli_w

EDITOR_ENV_VAR = "LSPRESSO_NVIM"


def get_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        base = Path(xdg)
    else:
        base = Path.home() / ".config"
    return base / "lspresso-shot"


def get_config_path() -> Path:
    return get_config_dir() / "config.toml"


DEFAULT_CONFIG: dict[str, Any] = {
    "editor": {
        "command": "nvim",
        "poll_interval": 0.05,
    },
    "defaults": {
        "timeout": 1.0,
        "cleanup": False,
    },
    "formatting": {
        "tab_size": 4,
        "insert_spaces": True,
    },
    "log": {
        "level": "warning",
    },
}


def load_config() -> dict[str, Any]:
    config_path = get_config_path()
    config = _copy_config(DEFAULT_CONFIG)

    if config_path.exists():
        with open(config_path, "rb") as f:
            user_config = tomli.load(f)
            _merge_config(config, user_config)

    return config


def save_config(config: dict[str, Any]) -> None:
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)


def _copy_config(config: dict) -> dict:
    return {key: _copy_config(value) if isinstance(value, dict) else value for key, value in config.items()}


def _merge_config(base: dict, override: dict) -> None:
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_config(base[key], value)
        else:
            base[key] = value


def default_editor_command(config: dict[str, Any] | None = None) -> str:
    """Editor command for new test cases.

    The `LSPRESSO_NVIM` environment variable wins over the config file.
    """
    override = os.environ.get(EDITOR_ENV_VAR)
    if override:
        return override
    if config is None:
        config = load_config()
    return config["editor"]["command"]
