# tests/common/test_brew_manager.py
# -*- coding: utf-8 -*-
"""
Tests for the Homebrew manager.
"""

import os
import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from common.macos.brew_manager import BrewManager, shellenv_line


@pytest.fixture
def brew(mock_logger):
    return BrewManager(mock_logger)


def test_is_installed_cask(mocker, brew, app_settings):
    mock_run = mocker.patch(
        "common.macos.brew_manager.run_command", return_value=MagicMock(returncode=0)
    )

    assert brew.is_installed("ghostty", app_settings, cask=True) is True
    assert mock_run.call_args[0][0] == ["brew", "list", "--cask", "ghostty"]


def test_is_installed_missing_brew(mocker, brew, app_settings):
    mocker.patch(
        "common.macos.brew_manager.run_command", side_effect=FileNotFoundError()
    )
    assert brew.is_installed("git", app_settings) is False


def test_install_skips_installed_and_collects_failures(mocker, brew, app_settings):
    mocker.patch.object(
        BrewManager,
        "is_installed",
        side_effect=lambda name, settings, cask=False: name == "git",
    )

    def fake_run(cmd, *args, **kwargs):
        if cmd[-1] == "jq":
            raise subprocess.CalledProcessError(1, cmd)
        return MagicMock(returncode=0)

    mock_run = mocker.patch(
        "common.macos.brew_manager.run_command", side_effect=fake_run
    )

    failed = brew.install(["git", "jq", "gh"], app_settings)

    assert failed == ["jq"]
    commands = [c[0][0] for c in mock_run.call_args_list]
    assert commands == [["brew", "install", "jq"], ["brew", "install", "gh"]]


def test_install_without_skip_check(mocker, brew, app_settings):
    is_installed = mocker.patch.object(BrewManager, "is_installed")
    mock_run = mocker.patch("common.macos.brew_manager.run_command")

    assert brew.install("1password", app_settings, cask=True, skip_installed=False) == []
    is_installed.assert_not_called()
    assert mock_run.call_args[0][0] == ["brew", "install", "--cask", "1password"]


def test_services_start(mocker, brew, app_settings):
    mock_run = mocker.patch("common.macos.brew_manager.run_command")
    assert brew.services_start("syncthing", app_settings) is True
    assert mock_run.call_args[0][0] == ["brew", "services", "start", "syncthing"]


def test_services_start_failure(mocker, brew, app_settings):
    mocker.patch(
        "common.macos.brew_manager.run_command",
        side_effect=subprocess.CalledProcessError(1, "brew"),
    )
    with pytest.raises(subprocess.CalledProcessError):
        brew.services_start("syncthing", app_settings)
    assert brew.services_start("syncthing", app_settings, raise_error=False) is False


def test_service_listed(mocker, brew, app_settings):
    mocker.patch(
        "common.macos.brew_manager.run_command",
        return_value=MagicMock(returncode=0, stdout="syncthing started user\n"),
    )
    assert brew.service_listed("syncthing", app_settings) is True
    assert brew.service_listed("postgresql", app_settings) is False


def test_ensure_on_path_persists_once(mocker, monkeypatch, brew, app_settings):
    brew_binary = Path("/opt/homebrew/bin/brew")
    mocker.patch(
        "common.macos.brew_manager.find_brew_binary", return_value=brew_binary
    )
    monkeypatch.setenv("PATH", "/usr/bin")

    assert brew.ensure_on_path(app_settings) is True
    assert brew.ensure_on_path(app_settings) is True

    assert os.environ["PATH"].split(os.pathsep)[0] == "/opt/homebrew/bin"
    zprofile = (app_settings.home_dir / ".zprofile").read_text()
    assert zprofile.splitlines().count(shellenv_line(brew_binary)) == 1


def test_ensure_on_path_without_persist(mocker, monkeypatch, brew, app_settings):
    mocker.patch(
        "common.macos.brew_manager.find_brew_binary",
        return_value=Path("/usr/local/bin/brew"),
    )
    monkeypatch.setenv("PATH", "/usr/bin")

    brew.ensure_on_path(app_settings, persist=False)

    assert not (app_settings.home_dir / ".zprofile").exists()


def test_ensure_on_path_no_install(mocker, brew, app_settings):
    mocker.patch("common.macos.brew_manager.find_brew_binary", return_value=None)
    mocker.patch("common.macos.brew_manager.command_exists", return_value=False)
    assert brew.ensure_on_path(app_settings) is False
