# tests/common/test_command_utils.py
# -*- coding: utf-8 -*-
"""
Tests for command execution helpers.
"""

import logging
import subprocess
from unittest.mock import MagicMock

import pytest

from common.command_utils import (
    command_succeeds,
    log_setup,
    run_command,
    run_elevated_command,
)


def test_log_setup_levels(mock_logger):
    log_setup("done", "success", mock_logger)
    log_setup("careful", "warning", mock_logger)
    log_setup("broken", "error", mock_logger, exc_info=True)

    mock_logger.info.assert_called_once_with("done", exc_info=False)
    mock_logger.warning.assert_called_once_with("careful", exc_info=False)
    mock_logger.error.assert_called_once_with("broken", exc_info=True)


def test_run_command_returns_result(mocker, mock_logger):
    completed = subprocess.CompletedProcess(["echo", "hi"], 0, stdout="hi\n", stderr="")
    mock_run = mocker.patch(
        "common.command_utils.subprocess.run", return_value=completed
    )

    result = run_command(
        ["echo", "hi"], None, capture_output=True, current_logger=mock_logger
    )

    assert result is completed
    mock_run.assert_called_once_with(
        ["echo", "hi"],
        check=True,
        shell=False,
        capture_output=True,
        text=True,
    )


def test_run_command_shell_string(mocker):
    mock_run = mocker.patch(
        "common.command_utils.subprocess.run",
        return_value=subprocess.CompletedProcess("x", 0),
    )
    run_command("curl -LsSf url | sh", None, shell=True)
    assert mock_run.call_args[0][0] == "curl -LsSf url | sh"
    assert mock_run.call_args[1]["shell"] is True


def test_run_command_rejects_string_without_shell(mocker):
    mock_run = mocker.patch("common.command_utils.subprocess.run")
    with pytest.raises(TypeError):
        run_command("brew list", None)
    mock_run.assert_not_called()


def test_run_command_logs_captured_output(mocker, caplog):
    mocker.patch(
        "common.command_utils.subprocess.run",
        return_value=subprocess.CompletedProcess(
            ["brew", "--version"], 0, stdout="Homebrew 4.4.0\n", stderr=""
        ),
    )
    caplog.set_level(logging.DEBUG)

    run_command(["brew", "--version"], None, capture_output=True)

    assert "stdout: Homebrew 4.4.0" in caplog.text


def test_run_command_hides_sensitive_output(mocker, caplog):
    mocker.patch(
        "common.command_utils.subprocess.run",
        return_value=subprocess.CompletedProcess(
            ["op", "signin"], 0, stdout='export OP_SESSION_my="SECRET-TOKEN"\n', stderr=""
        ),
    )
    caplog.set_level(logging.DEBUG)

    result = run_command(
        ["op", "signin"], None, capture_output=True, log_output=False
    )

    assert "SECRET-TOKEN" in result.stdout
    assert "SECRET-TOKEN" not in caplog.text


def test_run_command_failure_hides_sensitive_output(mocker, caplog):
    error = subprocess.CalledProcessError(
        1, ["op", "item", "get"], output="hunter2", stderr=""
    )
    mocker.patch("common.command_utils.subprocess.run", side_effect=error)
    caplog.set_level(logging.DEBUG)

    with pytest.raises(subprocess.CalledProcessError):
        run_command(["op", "item", "get"], None, capture_output=True, log_output=False)

    assert "failed (rc 1)" in caplog.text
    assert "hunter2" not in caplog.text


def test_run_command_failure_is_logged_and_raised(mocker, mock_logger):
    error = subprocess.CalledProcessError(2, ["brew", "install", "nope"], stderr="No formula")
    mocker.patch("common.command_utils.subprocess.run", side_effect=error)

    with pytest.raises(subprocess.CalledProcessError):
        run_command(["brew", "install", "nope"], None, current_logger=mock_logger)

    messages = [c[0][0] for c in mock_logger.error.call_args_list]
    assert any("rc 2" in m for m in messages)
    assert any("No formula" in m for m in messages)


def test_run_command_missing_executable(mocker, mock_logger):
    mocker.patch(
        "common.command_utils.subprocess.run",
        side_effect=FileNotFoundError(2, "No such file", "dockutil"),
    )
    with pytest.raises(FileNotFoundError):
        run_command(["dockutil", "--list"], None, current_logger=mock_logger)
    mock_logger.error.assert_called_once()


def test_run_elevated_command_adds_sudo(mocker):
    mocker.patch("common.command_utils.os.geteuid", return_value=501)
    mock_run = mocker.patch("common.command_utils.run_command")

    run_elevated_command(["scutil", "--set", "HostName", "mini"], None)

    assert mock_run.call_args[0][0] == ["sudo", "scutil", "--set", "HostName", "mini"]


def test_run_elevated_command_as_root(mocker):
    mocker.patch("common.command_utils.os.geteuid", return_value=0)
    mock_run = mocker.patch("common.command_utils.run_command")

    run_elevated_command(["systemsetup", "-setremotelogin", "on"], None)

    assert mock_run.call_args[0][0] == ["systemsetup", "-setremotelogin", "on"]


def test_command_succeeds_missing_executable(mocker):
    mocker.patch("common.command_utils.command_exists", return_value=False)
    mock_run = mocker.patch("common.command_utils.run_command")

    assert command_succeeds(["op", "account", "list"], None) is False
    mock_run.assert_not_called()


def test_command_succeeds_uses_return_code(mocker):
    mocker.patch("common.command_utils.command_exists", return_value=True)
    mock_run = mocker.patch(
        "common.command_utils.run_command", return_value=MagicMock(returncode=0)
    )

    assert command_succeeds(["gh", "auth", "status"], None) is True
    assert mock_run.call_args[1]["check"] is False

    mock_run.return_value = MagicMock(returncode=1)
    assert command_succeeds(["gh", "auth", "status"], None) is False
