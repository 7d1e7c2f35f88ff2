"""Load race Elo system definitions from TOML files."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from domain.config_base import BaseSystemConfig, load_system_configs
from domain.ratings.race_elo.calculator import RaceEloParameters

_PARAMETER_NAMES = frozenset(field.name for field in fields(RaceEloParameters))


@dataclass(frozen=True)
class RaceEloSystemConfig(BaseSystemConfig):
    """Configuration for race result recording and recompute."""

    parameters: RaceEloParameters


def load_race_elo_system_configs(config_dir: Path) -> list[RaceEloSystemConfig]:
    """Load and validate all race Elo TOML config files in a directory."""
    return load_system_configs(config_dir, _parse_race_elo_system_config)


def _parse_race_elo_system_config(raw: dict[str, Any], file_path: Path) -> RaceEloSystemConfig:
    system_raw = raw.get("system", {})
    elo_raw = raw.get("elo", {})

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)

    # Starting ratings are a storage default, not a tunable parameter.
    unknown = sorted(set(elo_raw) - _PARAMETER_NAMES)
    if unknown:
        raise ValueError(f"{file_path}: unknown [elo] keys {unknown}")

    defaults = RaceEloParameters()
    parameters = RaceEloParameters(
        k_factor=float(elo_raw.get("k_factor", defaults.k_factor)),
        scale_factor=float(elo_raw.get("scale_factor", defaults.scale_factor)),
        field_size=int(elo_raw.get("field_size", defaults.field_size)),
        first_cpu_position=int(elo_raw.get("first_cpu_position", defaults.first_cpu_position)),
        max_cpu_elo=int(elo_raw.get("max_cpu_elo", defaults.max_cpu_elo)),
        min_cpu_elo=int(elo_raw.get("min_cpu_elo", defaults.min_cpu_elo)),
        cpu_elo_step=int(elo_raw.get("cpu_elo_step", defaults.cpu_elo_step)),
        teammate_share=float(elo_raw.get("teammate_share", defaults.teammate_share)),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)

    return RaceEloSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
    )


def _validate_parameters(*, file_path: Path, parameters: RaceEloParameters) -> None:
    if parameters.k_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].k_factor must be > 0")
    if parameters.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].scale_factor must be > 0")
    if parameters.field_size < 2:
        raise ValueError(f"{file_path}: [elo].field_size must be >= 2")
    if parameters.first_cpu_position < 1:
        raise ValueError(f"{file_path}: [elo].first_cpu_position must be >= 1")
    if parameters.min_cpu_elo <= 0:
        raise ValueError(f"{file_path}: [elo].min_cpu_elo must be > 0")
    if parameters.max_cpu_elo < parameters.min_cpu_elo:
        raise ValueError(f"{file_path}: [elo].max_cpu_elo must be >= min_cpu_elo")
    if parameters.cpu_elo_step < 0:
        raise ValueError(f"{file_path}: [elo].cpu_elo_step must be >= 0")
    if parameters.teammate_share < 0.0 or parameters.teammate_share > 1.0:
        raise ValueError(f"{file_path}: [elo].teammate_share must be between 0 and 1")
