"""Shared fixtures: isolate config and data directories per test."""

import json

import pytest


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point config and data paths at a temp directory.

    settings.json sets data_dir so the ledger lands in tmp_path/data.
    """
    config_dir = tmp_path / "config"
    data_dir = tmp_path / "data"
    config_dir.mkdir()
    data_dir.mkdir()

    monkeypatch.setenv("FREELANCE_TAX_CONFIG_PATH", str(config_dir))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))

    settings = {"data_dir": str(data_dir)}
    (config_dir / "settings.json").write_text(json.dumps(settings))

    return {
        "config_dir": config_dir,
        "data_dir": data_dir,
        "ledger": data_dir / "ledger.json",
        "profile": config_dir / "profile.yaml",
    }
