# tests/settings/test_config_loader.py
# -*- coding: utf-8 -*-
"""
Tests for settings precedence: defaults < environment < YAML < CLI.
"""

import argparse

import pytest

from settings.config_loader import _deep_update, load_app_settings


def cli(**overrides):
    values = {
        "log_prefix": None,
        "non_interactive": False,
        "hub_id": None,
        "api_url": None,
        "folder_id": None,
        "folder_path": None,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("HUB_DEVICE_ID", "SYNCTHING_FOLDER_ID", "SYNCTHING_API_URL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_file(tmp_path):
    settings = load_app_settings(cli(), str(tmp_path / "missing.yaml"))

    assert settings.syncthing.folder_id == "memex"
    assert settings.syncthing.api_url == "http://localhost:8384"
    assert settings.hub.device_id is None
    assert settings.interactive is True


def test_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("HUB_DEVICE_ID", "ENV-ID")
    settings = load_app_settings(None, str(tmp_path / "missing.yaml"))
    assert settings.hub.device_id == "ENV-ID"


def test_yaml_overrides_nested_values(tmp_path, monkeypatch):
    monkeypatch.setenv("SYNCTHING_FOLDER_ID", "from-env")
    config = tmp_path / "config.yaml"
    config.write_text(
        "syncthing:\n"
        "  folder_id: notes\n"
        "packages:\n"
        "  formulas: [git]\n"
    )

    settings = load_app_settings(cli(), str(config))

    assert settings.syncthing.folder_id == "notes"
    assert settings.syncthing.api_url == "http://localhost:8384"
    assert settings.packages.formulas == ["git"]
    assert settings.packages.casks


def test_cli_overrides_yaml(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("hub:\n  device_id: FROM-YAML\nsyncthing:\n  folder_id: notes\n")

    settings = load_app_settings(
        cli(hub_id="FROM-CLI", folder_id="cli-folder", non_interactive=True),
        str(config),
    )

    assert settings.hub.device_id == "FROM-CLI"
    assert settings.syncthing.folder_id == "cli-folder"
    assert settings.syncthing.folder_label == "cli-folder"
    assert settings.interactive is False


def test_invalid_value_exits(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("syncthing:\n  request_timeout: soon\n")

    with pytest.raises(SystemExit):
        load_app_settings(cli(), str(config))


def test_unparseable_yaml_ignored(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("syncthing: [unclosed\n")

    settings = load_app_settings(cli(), str(config))

    assert settings.syncthing.folder_id == "memex"


def test_deep_update_skips_none():
    source = {"hub": {"device_id": "A", "ssh_host": "n100"}}
    _deep_update(source, {"hub": {"device_id": None, "ssh_host": "hub2"}})
    assert source == {"hub": {"device_id": "A", "ssh_host": "hub2"}}
