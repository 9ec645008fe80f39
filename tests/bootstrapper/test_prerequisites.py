# tests/bootstrapper/test_prerequisites.py
# -*- coding: utf-8 -*-
"""
Tests for the bootstrap prerequisite tasks.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from bootstrapper.prerequisites import (
    ensure_homebrew,
    ensure_xcode_cli_tools,
    install_syncthing,
    setup_one_password,
    start_syncthing,
)

MODULE = "bootstrapper.prerequisites"


@pytest.fixture
def context():
    return SimpleNamespace(
        brew=MagicMock(),
        notifier=MagicMock(),
        op_cli=MagicMock(),
        prompt_yes_no=MagicMock(return_value=False),
        wait_for_enter=MagicMock(return_value=""),
        sleep=MagicMock(),
        op_available=False,
    )


class TestXcode:
    def test_already_installed(self, mocker, context, app_settings):
        mocker.patch(f"{MODULE}.command_succeeds", return_value=True)
        mock_run = mocker.patch(f"{MODULE}.run_command")

        ensure_xcode_cli_tools(context, app_settings)

        mock_run.assert_not_called()

    def test_install_and_wait(self, mocker, context, app_settings):
        mocker.patch(f"{MODULE}.command_succeeds", side_effect=[False, False, False, True])
        mock_run = mocker.patch(f"{MODULE}.run_command")

        ensure_xcode_cli_tools(context, app_settings)

        assert mock_run.call_args[0][0] == ["xcode-select", "--install"]
        assert mock_run.call_args[1]["check"] is False
        assert context.sleep.call_count == 2


class TestHomebrew:
    def test_present(self, mocker, context, app_settings):
        mocker.patch(f"{MODULE}.command_exists", return_value=True)
        mock_run = mocker.patch(f"{MODULE}.run_command")
        context.brew.ensure_on_path.return_value = True

        ensure_homebrew(context, app_settings)

        mock_run.assert_not_called()
        context.brew.ensure_on_path.assert_called_once_with(app_settings, persist=False)

    def test_installs_when_missing(self, mocker, context, app_settings):
        mocker.patch(f"{MODULE}.command_exists", return_value=False)
        mocker.patch(f"{MODULE}.find_brew_binary", return_value=None)
        mock_run = mocker.patch(f"{MODULE}.run_command")
        context.brew.ensure_on_path.return_value = True

        ensure_homebrew(context, app_settings)

        command = mock_run.call_args[0][0]
        assert app_settings.homebrew_install_url in command
        assert mock_run.call_args[1]["shell"] is True
        context.brew.ensure_on_path.assert_called_once_with(app_settings, persist=True)

    def test_unusable_after_install(self, mocker, context, app_settings):
        mocker.patch(f"{MODULE}.command_exists", return_value=True)
        context.brew.ensure_on_path.return_value = False

        with pytest.raises(RuntimeError):
            ensure_homebrew(context, app_settings)


class TestOnePassword:
    @pytest.fixture(autouse=True)
    def no_open(self, mocker):
        return mocker.patch(f"{MODULE}.open_target", return_value=True)

    def test_signed_in(self, context, app_settings, no_open):
        context.brew.install.return_value = []
        context.op_cli.is_installed.return_value = True
        context.op_cli.is_signed_in.return_value = True

        setup_one_password(context, app_settings)

        assert context.op_available is True
        context.brew.install.assert_called_once_with(
            ["1password", "1password-cli"], app_settings, cask=True
        )
        context.notifier.notify.assert_called_once()
        no_open.assert_called_once()
        context.prompt_yes_no.assert_not_called()

    def test_sign_in_accepted(self, context, app_settings):
        context.brew.install.return_value = ["1password"]
        context.op_cli.is_installed.return_value = True
        context.op_cli.is_signed_in.return_value = False
        context.prompt_yes_no.return_value = True
        context.op_cli.sign_in.return_value = True

        setup_one_password(context, app_settings)

        assert context.op_available is True
        context.op_cli.sign_in.assert_called_once()

    def test_sign_in_declined(self, context, app_settings):
        context.brew.install.return_value = []
        context.op_cli.is_installed.return_value = True
        context.op_cli.is_signed_in.return_value = False

        setup_one_password(context, app_settings)

        assert context.op_available is False
        context.op_cli.sign_in.assert_not_called()

    def test_cli_missing(self, context, app_settings):
        context.brew.install.return_value = ["1password-cli"]
        context.wait_for_enter.return_value = "s"
        context.op_cli.is_installed.return_value = False

        setup_one_password(context, app_settings)

        assert context.op_available is False
        context.op_cli.is_signed_in.assert_not_called()


def test_install_syncthing_failure(context, app_settings):
    context.brew.install.return_value = ["syncthing"]
    with pytest.raises(RuntimeError):
        install_syncthing(context, app_settings)


def test_start_syncthing(context, app_settings):
    start_syncthing(context, app_settings)
    context.brew.services_start.assert_called_once_with("syncthing", app_settings)
