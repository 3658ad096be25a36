from __future__ import annotations

from pathlib import Path

import pytest

from sqlgrid.shared import paths
from sqlgrid.shared.config import AppConfig, load_config
from sqlgrid.shared.exceptions import ConfigurationError


def test_load_config_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(paths.CONFIG_DIR_ENV, str(tmp_path / "config"))
    cfg = load_config(env={})

    assert isinstance(cfg, AppConfig)
    assert cfg.database.path == paths.default_database_path(env={})
    assert cfg.display.number_format == "default"
    assert cfg.display.read_lob_fields is True
    assert cfg.display.lob_start_offset == 0
    assert cfg.display.lob_read_length == 1024
    assert cfg.display.incremental is False


def test_yaml_file_overrides_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "display:\n  number_format: ',.2f'\n  incremental: true\n  lob_read_length: 64\n",
        encoding="utf-8",
    )

    cfg = load_config(config_file, env={})

    assert cfg.source_path == config_file
    assert cfg.display.number_format == ",.2f"
    assert cfg.display.incremental is True
    assert cfg.display.lob_read_length == 64
    assert cfg.display.read_lob_fields is True


def test_env_overrides_win_over_file(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text("display:\n  read_lob_fields: true\n", encoding="utf-8")
    env = {
        "SQLGRID_READ_LOB_FIELDS": "off",
        "SQLGRID_LOB_START_OFFSET": "8",
        paths.DATABASE_PATH_ENV: str(tmp_path / "grid.db"),
    }

    cfg = load_config(config_file, env=env)

    assert cfg.display.read_lob_fields is False
    assert cfg.display.lob_start_offset == 8
    assert cfg.database.path == tmp_path / "grid.db"


def test_invalid_env_override_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "missing.yaml", env={"SQLGRID_INCREMENTAL": "sometimes"})


def test_non_mapping_yaml_root_raises(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(config_file, env={})


def test_non_positive_lob_read_length_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "missing.yaml", env={"SQLGRID_LOB_READ_LENGTH": "0"})


def test_with_display_returns_validated_copy(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "missing.yaml", env={})

    updated = cfg.with_display(incremental=True)

    assert updated.display.incremental is True
    assert cfg.display.incremental is False
    with pytest.raises(ConfigurationError):
        cfg.with_display(lob_start_offset=-1)


@pytest.mark.parametrize("pattern", ["d", "not-a-spec"])
def test_unusable_number_format_is_rejected_at_load(tmp_path: Path, pattern: str) -> None:
    with pytest.raises(ConfigurationError, match="Invalid number format"):
        load_config(tmp_path / "missing.yaml", env={"SQLGRID_NUMBER_FORMAT": pattern})


def test_with_display_rejects_integer_only_number_format(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "missing.yaml", env={})

    with pytest.raises(ConfigurationError, match="float values"):
        cfg.with_display(number_format="x")


def test_quoted_yaml_booleans_are_parsed(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "display:\n  read_lob_fields: 'false'\n  incremental: 'yes'\n",
        encoding="utf-8",
    )

    cfg = load_config(config_file, env={})

    assert cfg.display.read_lob_fields is False
    assert cfg.display.incremental is True


def test_unrecognised_yaml_boolean_is_rejected(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text("display:\n  incremental: 'sometimes'\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Invalid configuration structure"):
        load_config(config_file, env={})
