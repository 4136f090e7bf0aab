"""
Settings for the command line converter.

Values come from an optional YAML file (see config.example.yaml); every key
has a default so the converter runs without one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Any, List, Mapping, Optional

import yaml

from .errors import ConfigError
from .events import DEFAULT_CHUNK_SIZE
from .pipeline import DEFAULT_OUTPUT_NAME
from .sources import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_yaml(path):
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


@dataclass
class Settings:
    output_dir: str = "."
    default_output_name: str = DEFAULT_OUTPUT_NAME
    allowed_extensions: List[str] = field(default_factory=lambda: [".xml"])
    strict: bool = False
    chunk_size: int = DEFAULT_CHUNK_SIZE
    http_timeout: float = DEFAULT_TIMEOUT
    max_input_mb: Optional[float] = None
    log_level: str = "INFO"

    @property
    def max_input_bytes(self) -> Optional[int]:
        if self.max_input_mb is None:
            return None
        return int(self.max_input_mb * 1024 * 1024)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Settings":
        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                logger.warning("Ignoring unknown config key %r", key)
        settings = cls(**{k: v for k, v in data.items() if k in known})
        settings.validate()
        return settings

    def validate(self):
        if not isinstance(self.strict, bool):
            raise ConfigError(f"strict must be true or false, got {self.strict!r}")
        if isinstance(self.chunk_size, bool) or not isinstance(self.chunk_size, int) or self.chunk_size <= 0:
            raise ConfigError(f"chunk_size must be a positive integer, got {self.chunk_size!r}")
        if isinstance(self.http_timeout, bool) or not isinstance(self.http_timeout, (int, float)) or self.http_timeout <= 0:
            raise ConfigError(f"http_timeout must be a positive number, got {self.http_timeout!r}")
        if self.max_input_mb is not None and (
            isinstance(self.max_input_mb, bool)
            or not isinstance(self.max_input_mb, (int, float))
            or self.max_input_mb <= 0
        ):
            raise ConfigError(f"max_input_mb must be a positive number, got {self.max_input_mb!r}")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}")
        self.log_level = self.log_level.upper()
        if isinstance(self.allowed_extensions, str):
            self.allowed_extensions = [self.allowed_extensions]
        if not isinstance(self.allowed_extensions, list) or not self.allowed_extensions:
            raise ConfigError("allowed_extensions must list at least one extension")
        for ext in self.allowed_extensions:
            if not isinstance(ext, str) or not ext:
                raise ConfigError(f"allowed_extensions entries must be non-empty strings, got {ext!r}")
        if not isinstance(self.default_output_name, str) or not self.default_output_name:
            raise ConfigError(f"default_output_name must be a non-empty string, got {self.default_output_name!r}")
        if not isinstance(self.output_dir, str) or not self.output_dir:
            raise ConfigError(f"output_dir must be a non-empty string, got {self.output_dir!r}")


def load_settings(path=None) -> Settings:
    if path is None:
        return Settings()

    try:
        data = load_yaml(path)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")
    return Settings.from_mapping(data)
