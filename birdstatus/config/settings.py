"""YAML config loader with environment variable expansion."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

from birdstatus.bird.socket import DEFAULT_SOCKET, DEFAULT_TIMEOUT

PROTOCOLS_FILENAME = "protocols.json"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _expand_env_vars(value: str) -> str:
    """Replace ${VAR_NAME} with environment variable values."""
    pattern = re.compile(r"\$\{([^}]+)\}")
    def replacer(match: re.Match) -> str:
        var = match.group(1)
        return os.environ.get(var, match.group(0))
    return pattern.sub(replacer, value)


def _walk_and_expand(obj: object) -> object:
    """Recursively expand environment variables in strings."""
    if isinstance(obj, str):
        return _expand_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _walk_and_expand(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_expand(item) for item in obj]
    return obj


class Settings(BaseModel):
    bird_socket: str = DEFAULT_SOCKET
    bird_directory: str = "/etc/bird"
    protocols_file: str | None = None   # overrides bird_directory/protocols.json
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    log_level: LogLevel = "WARNING"

    @property
    def protocols_path(self) -> Path:
        if self.protocols_file:
            return Path(self.protocols_file).expanduser()
        return Path(self.bird_directory).expanduser() / PROTOCOLS_FILENAME


def default_config_paths() -> list[Path]:
    return [
        Path("birdstatus.yaml"),
        Path.home() / ".config" / "birdstatus" / "config.yaml",
        Path("/etc/birdstatus.yaml"),
    ]


def load_config(path: str | Path | None = None) -> Settings:
    """Load configuration from a YAML file, falling back to defaults.

    Raises:
        OSError: An explicitly given file cannot be read.
        ValueError: The file is not valid YAML or does not match the schema.
    """
    if path is None:
        for candidate in default_config_paths():
            if candidate.exists():
                path = candidate
                break

    if path is None:
        return Settings()

    path = Path(path)
    with open(path) as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ValueError(
            f"Config file {path} must contain a mapping, got {type(raw).__name__}"
        )

    return Settings.model_validate(_walk_and_expand(raw))
