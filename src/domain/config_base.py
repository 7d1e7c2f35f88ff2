"""TOML loading shared by rating-system configs."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Sequence, TypeVar
import tomllib


@dataclass(frozen=True)
class BaseSystemConfig:
    name: str
    description: str | None
    file_path: Path


T = TypeVar("T", bound=BaseSystemConfig)


def load_system_configs(
    config_dir: Path,
    parser: Callable[[dict[str, Any], Path], T],
) -> list[T]:
    """Parse every ``*.toml`` file in ``config_dir``; system names must be unique."""
    if not config_dir.is_dir():
        raise FileNotFoundError(f"Config directory not found: {config_dir}")

    configs = [
        parser(tomllib.loads(path.read_text(encoding="utf-8")), path)
        for path in sorted(config_dir.glob("*.toml"))
    ]
    if not configs:
        raise ValueError(f"No .toml config files found in: {config_dir}")

    name_counts = Counter(config.name for config in configs)
    duplicates = sorted(name for name, count in name_counts.items() if count > 1)
    if duplicates:
        raise ValueError(f"Duplicate system names in {config_dir}: {duplicates}")
    return configs


def select_system_config(configs: Sequence[T], config_name: str | None) -> T:
    """Pick a config by file name, or the only/`default.toml` config when no name is given."""
    by_file = {config.file_path.name: config for config in configs}
    if config_name is not None:
        if config_name not in by_file:
            raise ValueError(f"No config named '{config_name}'")
        return by_file[config_name]

    if len(configs) == 1:
        return configs[0]
    if "default.toml" in by_file:
        return by_file["default.toml"]
    raise ValueError(
        "Multiple configs found and none is default.toml; pass a config name explicitly"
    )


__all__ = ["BaseSystemConfig", "load_system_configs", "select_system_config"]
