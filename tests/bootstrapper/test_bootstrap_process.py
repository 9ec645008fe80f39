# tests/bootstrapper/test_bootstrap_process.py
# -*- coding: utf-8 -*-
"""
Tests for the bootstrap orchestration.
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from bootstrapper.bootstrap_process import (
    BootstrapContext,
    BootstrapState,
    run_bootstrap_orchestration,
)
from bootstrapper.syncthing_client import SyncthingAPIError
from common.retry_utils import PollTimeoutError

MODULE = "bootstrapper.bootstrap_process"
HUB_ID = "ABCDEFG-HIJKLMN-OPQRSTU-VWXYZ01-2345678-9ABCDEF-GHIJKLM-NOPQRST"


@pytest.fixture
def client():
    client = MagicMock()
    client.get_my_id.return_value = "MYID-0000"
    client.ensure_device_present.return_value = True
    client.ensure_folder_present.return_value = True
    client.get_folder_status.return_value = {
        "state": "idle",
        "needFiles": 0,
        "globalFiles": 5,
    }
    return client


@pytest.fixture
def context(client):
    brew = MagicMock()
    brew.install.return_value = []
    return BootstrapContext(
        brew=brew,
        privileges=MagicMock(),
        notifier=MagicMock(),
        op_cli=MagicMock(),
        prompt_value=MagicMock(return_value=HUB_ID),
        prompt_yes_no=MagicMock(return_value=False),
        wait_for_enter=MagicMock(return_value="s"),
        client_factory=MagicMock(return_value=client),
        sleep=MagicMock(),
    )


@pytest.fixture(autouse=True)
def patched_steps(mocker):
    """Replace the steps that touch the real machine."""
    return {
        "xcode": mocker.patch(f"{MODULE}.ensure_xcode_cli_tools"),
        "homebrew": mocker.patch(f"{MODULE}.ensure_homebrew"),
        "one_password": mocker.patch(f"{MODULE}.setup_one_password"),
        "api_key": mocker.patch(f"{MODULE}.wait_for_api_key", return_value="KEY"),
        "open": mocker.patch(f"{MODULE}.open_target", return_value=True),
    }


def test_full_run_converges(app_settings, context, client, patched_steps):
    success, result = run_bootstrap_orchestration(app_settings, MagicMock(), context)

    assert success is True
    assert result is context
    assert context.state == BootstrapState.CONVERGED
    assert context.global_files == 5
    assert context.my_id == "MYID-0000"
    assert context.hub_id == HUB_ID

    context.privileges.start.assert_called_once()
    context.privileges.stop.assert_called_once()
    context.brew.services_start.assert_called_once_with("syncthing", app_settings)
    context.client_factory.assert_called_once_with(
        "http://localhost:8384", "KEY", timeout=app_settings.syncthing.request_timeout
    )
    client.ensure_device_present.assert_called_once_with(
        HUB_ID, "Hub", introducer=True, auto_accept_folders=True
    )

    folder_path = Path(app_settings.syncthing.folder_path)
    assert folder_path.is_dir()
    client.ensure_folder_present.assert_called_once_with(
        "memex", "memex", folder_path, HUB_ID, folder_type="sendreceive"
    )
    patched_steps["open"].assert_called_once()
    context.notifier.notify.assert_called_once()


def test_no_hub_id_ends_early(app_settings, context, client):
    context.prompt_value.return_value = ""

    success, result = run_bootstrap_orchestration(app_settings, MagicMock(), context)

    assert success is False
    assert result.state == BootstrapState.DAEMON_READY
    client.ensure_device_present.assert_not_called()
    client.ensure_folder_present.assert_not_called()
    context.privileges.stop.assert_called_once()


def test_config_timeout_is_fatal(app_settings, context, patched_steps):
    patched_steps["api_key"].side_effect = PollTimeoutError("Syncthing config file", 30)

    with pytest.raises(SystemExit) as excinfo:
        run_bootstrap_orchestration(app_settings, MagicMock(), context)

    assert excinfo.value.code == 1
    assert context.state == BootstrapState.DAEMON_STARTING
    context.privileges.stop.assert_called_once()


def test_device_registration_error_is_fatal(app_settings, context, client):
    client.ensure_device_present.side_effect = SyncthingAPIError("rejected")

    with pytest.raises(SystemExit):
        run_bootstrap_orchestration(app_settings, MagicMock(), context)

    assert context.state == BootstrapState.HUB_RESOLVED
    client.ensure_folder_present.assert_not_called()


def test_rerun_with_existing_configuration(app_settings, context, client):
    client.ensure_device_present.return_value = False
    client.ensure_folder_present.return_value = False

    success, _ = run_bootstrap_orchestration(app_settings, MagicMock(), context)

    assert success is True
    assert context.state == BootstrapState.CONVERGED


def test_state_never_moves_backwards():
    context = BootstrapContext()
    context.advance(BootstrapState.HUB_RESOLVED)

    with pytest.raises(ValueError):
        context.advance(BootstrapState.KEY_EXTRACTED)
    assert context.state == BootstrapState.HUB_RESOLVED


def test_api_key_hidden_from_repr():
    context = BootstrapContext(api_key="secret-key")
    assert "secret-key" not in repr(context)
