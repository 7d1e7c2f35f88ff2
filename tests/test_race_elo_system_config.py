"""Tests for TOML-based race Elo system config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from domain.config_base import select_system_config
from domain.ratings.race_elo import load_race_elo_system_configs

ROOT_DIR = Path(__file__).resolve().parents[1]


def test_load_race_elo_system_configs_from_directory(tmp_path: Path) -> None:
    config_path = tmp_path / "default.toml"
    config_path.write_text(
        """
[system]
name = "race_elo_a"
description = "A test race Elo system"

[elo]
k_factor = 64.0
scale_factor = 420.0
field_size = 12
teammate_share = 0.25
""".strip()
    )

    configs = load_race_elo_system_configs(tmp_path)
    assert len(configs) == 1

    system = configs[0]
    assert system.name == "race_elo_a"
    assert system.description == "A test race Elo system"
    assert system.parameters.k_factor == pytest.approx(64.0)
    assert system.parameters.scale_factor == pytest.approx(420.0)
    assert system.parameters.field_size == 12
    assert system.parameters.teammate_share == pytest.approx(0.25)
    assert system.parameters.max_cpu_elo == 1400


def test_defaults_apply_when_elo_section_omitted(tmp_path: Path) -> None:
    (tmp_path / "default.toml").write_text('[system]\nname = "race_elo_defaulted"\n')

    system = load_race_elo_system_configs(tmp_path)[0]
    assert system.description is None
    assert system.parameters.k_factor == pytest.approx(100.0)
    assert system.parameters.field_size == 24
    assert system.parameters.teammate_share == pytest.approx(0.2)


def test_shipped_default_config_matches_built_in_parameters() -> None:
    configs = load_race_elo_system_configs(ROOT_DIR / "configs" / "ratings" / "race_elo")
    config = select_system_config(configs, None)

    assert config.name == "race_elo_default"
    assert config.parameters == type(config.parameters)()


@pytest.mark.parametrize(
    "elo_section",
    [
        "k_factor = 0.0",
        "field_size = 1",
        "teammate_share = 1.5",
        "max_cpu_elo = 500",
        "min_cpu_elo = 0",
    ],
)
def test_invalid_parameters_are_rejected(tmp_path: Path, elo_section: str) -> None:
    (tmp_path / "bad.toml").write_text(f'[system]\nname = "bad"\n\n[elo]\n{elo_section}\n')

    with pytest.raises(ValueError, match="bad.toml"):
        load_race_elo_system_configs(tmp_path)


def test_missing_name_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "default.toml").write_text("[elo]\nk_factor = 10.0\n")

    with pytest.raises(ValueError, match=r"\[system\]\.name"):
        load_race_elo_system_configs(tmp_path)


def test_duplicate_names_are_rejected(tmp_path: Path) -> None:
    (tmp_path / "a.toml").write_text('[system]\nname = "same"\n')
    (tmp_path / "b.toml").write_text('[system]\nname = "same"\n')

    with pytest.raises(ValueError, match="Duplicate"):
        load_race_elo_system_configs(tmp_path)


def test_select_system_config_by_name_and_default(tmp_path: Path) -> None:
    (tmp_path / "default.toml").write_text('[system]\nname = "main"\n')
    (tmp_path / "fast.toml").write_text('[system]\nname = "fast"\n\n[elo]\nk_factor = 200.0\n')
    configs = load_race_elo_system_configs(tmp_path)

    assert select_system_config(configs, None).name == "main"
    assert select_system_config(configs, "fast.toml").parameters.k_factor == pytest.approx(200.0)
    with pytest.raises(ValueError):
        select_system_config(configs, "missing.toml")


def test_starting_rating_is_not_configurable(tmp_path: Path) -> None:
    (tmp_path / "default.toml").write_text('[system]\nname = "custom"\n\n[elo]\ninitial_elo = 1000\n')

    with pytest.raises(ValueError, match="unknown \\[elo\\] keys \\['initial_elo'\\]"):
        load_race_elo_system_configs(tmp_path)
