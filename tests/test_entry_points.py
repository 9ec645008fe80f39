# tests/test_entry_points.py
# -*- coding: utf-8 -*-
"""
Tests for the two command-line entry points.
"""

import logging
from unittest.mock import MagicMock

import pytest

import mac_bootstrap
import mac_setup
from bootstrapper.bootstrap_process import BootstrapContext, BootstrapState


@pytest.fixture(autouse=True)
def quiet_logging(mocker, monkeypatch):
    mocker.patch("mac_bootstrap.setup_logging")
    mocker.patch("mac_setup.setup_logging")
    monkeypatch.delenv("HUB_DEVICE_ID", raising=False)


class TestMacBootstrap:
    def test_parse_args(self):
        args = mac_bootstrap.parse_args(["--hub-id", "X", "--non-interactive", "-v"])
        assert args.hub_id == "X"
        assert args.non_interactive is True
        assert args.verbose is True

    def test_converged_run(self, mocker, tmp_path):
        context = BootstrapContext(state=BootstrapState.CONVERGED, global_files=7)
        run = mocker.patch(
            "mac_bootstrap.run_bootstrap_orchestration", return_value=(True, context)
        )

        code = mac_bootstrap.main(
            ["--config", str(tmp_path / "none.yaml"), "--hub-id", "HUB"]
        )

        assert code == 0
        assert run.call_args[0][0].hub.device_id == "HUB"

    def test_ended_early(self, mocker, tmp_path):
        mocker.patch(
            "mac_bootstrap.run_bootstrap_orchestration",
            return_value=(False, BootstrapContext()),
        )
        assert mac_bootstrap.main(["--config", str(tmp_path / "none.yaml")]) == 0

    def test_fatal_failure_exits(self, mocker, tmp_path):
        mocker.patch(
            "mac_bootstrap.run_bootstrap_orchestration", side_effect=SystemExit(1)
        )
        with pytest.raises(SystemExit) as excinfo:
            mac_bootstrap.main(["--config", str(tmp_path / "none.yaml")])
        assert excinfo.value.code == 1

    def test_interrupted(self, mocker, tmp_path):
        mocker.patch(
            "mac_bootstrap.run_bootstrap_orchestration", side_effect=KeyboardInterrupt
        )
        assert mac_bootstrap.main(["--config", str(tmp_path / "none.yaml")]) == 130


class TestMacSetup:
    @pytest.fixture
    def collaborators(self, mocker):
        context = MagicMock()
        return {
            "context": context,
            "build": mocker.patch("mac_setup.build_setup_context", return_value=context),
            "sudo": mocker.patch("mac_setup.SudoKeepAlive"),
            "caffeinate": mocker.patch("mac_setup.Caffeinate"),
            "orchestrator": mocker.patch("mac_setup.ComponentOrchestrator"),
            "verify": mocker.patch("mac_setup.verify_setup"),
            "open": mocker.patch("mac_setup.open_target"),
        }

    def test_missing_sync_folder(self, tmp_path, collaborators):
        code = mac_setup.main(
            [
                "--config", str(tmp_path / "none.yaml"),
                "--folder-path", str(tmp_path / "missing"),
            ]
        )
        assert code == 1
        collaborators["orchestrator"].assert_not_called()

    def test_full_run(self, tmp_path, collaborators):
        (tmp_path / "memex").mkdir()

        code = mac_setup.main(
            ["--config", str(tmp_path / "none.yaml"), "--folder-path", str(tmp_path / "memex")]
        )

        assert code == 0
        collaborators["orchestrator"].return_value.run.assert_called_once_with(None)
        collaborators["verify"].assert_called_once()
        collaborators["context"].notifier.notify.assert_called_once()
        collaborators["sudo"].return_value.stop.assert_called_once()
        collaborators["open"].assert_called_once()

    def test_selected_components_skip_verify(self, tmp_path, collaborators):
        (tmp_path / "memex").mkdir()

        code = mac_setup.main(
            [
                "ssh", "dotfiles",
                "--skip-verify",
                "--config", str(tmp_path / "none.yaml"),
                "--folder-path", str(tmp_path / "memex"),
            ]
        )

        assert code == 0
        collaborators["orchestrator"].return_value.run.assert_called_once_with(
            ["ssh", "dotfiles"]
        )
        collaborators["verify"].assert_not_called()

    def test_unknown_component(self, tmp_path, collaborators):
        (tmp_path / "memex").mkdir()
        collaborators["orchestrator"].return_value.run.side_effect = KeyError("nope")

        code = mac_setup.main(
            ["nope", "--config", str(tmp_path / "none.yaml"), "--folder-path", str(tmp_path / "memex")]
        )

        assert code == 1
        collaborators["sudo"].return_value.stop.assert_called_once()

    def test_list_components(self, tmp_path, caplog):
        caplog.set_level(logging.INFO)

        assert mac_setup.main(["--list", "--config", str(tmp_path / "none.yaml")]) == 0

        assert "1. rosetta" in caplog.text
        assert "13. hostname" in caplog.text
