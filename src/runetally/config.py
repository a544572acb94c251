from __future__ import annotations

import dataclasses
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Mapping

CONFIG_TABLE: Final[str] = "runetally"
LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class ReaderConfig:
    file_timeout: float | None = None
    max_concurrency: int | None = None
    recursive: bool = True
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.file_timeout is not None and float(self.file_timeout) <= 0:
            raise ConfigError(f"file_timeout must be positive, got {self.file_timeout!r}")
        if self.max_concurrency is not None and int(self.max_concurrency) < 1:
            raise ConfigError(f"max_concurrency must be at least 1, got {self.max_concurrency!r}")
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ConfigError(f"unknown log_level {self.log_level!r}")

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(str(self.log_level).upper())

    def with_overrides(self, **overrides: Any) -> ReaderConfig:
        """Return a copy with every non-None override applied."""

        changes = {key: value for key, value in overrides.items() if value is not None}
        if not changes:
            return self
        return dataclasses.replace(self, **changes)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check(key: str, value: object) -> None:
    if key == "file_timeout":
        ok = _is_number(value)
    elif key == "max_concurrency":
        ok = isinstance(value, int) and not isinstance(value, bool)
    elif key == "recursive":
        ok = isinstance(value, bool)
    else:
        ok = isinstance(value, str)
    if not ok:
        raise ConfigError(f"{CONFIG_TABLE}.{key} has wrong type: {type(value).__name__}")


def config_from_dict(data: Mapping[str, Any]) -> ReaderConfig:
    known = {f.name for f in dataclasses.fields(ReaderConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"unknown {CONFIG_TABLE} keys: {', '.join(unknown)}")
    for key, value in data.items():
        _check(key, value)
    return ReaderConfig(**dict(data))


def load_config(path: Path) -> ReaderConfig:
    try:
        raw = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    table = raw.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigError(f"{path}: [{CONFIG_TABLE}] must be a table")
    return config_from_dict(table)
