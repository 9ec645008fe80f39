# tests/settings/test_cli_handler.py
# -*- coding: utf-8 -*-
"""
Tests for terminal prompts.
"""

import pytest

from settings.cli_handler import (
    cli_prompt_for_value,
    cli_prompt_yes_no,
    cli_wait_for_enter,
    view_configuration,
)


@pytest.mark.parametrize(
    "reply, default, expected",
    [
        ("y", False, True),
        ("YES", False, True),
        ("n", True, False),
        ("", True, True),
        ("", False, False),
        ("maybe", True, True),
    ],
)
def test_prompt_yes_no(mocker, app_settings, reply, default, expected):
    mocker.patch("builtins.input", return_value=reply)
    assert cli_prompt_yes_no("Continue?", app_settings, default) is expected


def test_non_interactive_uses_default(mocker, app_settings):
    app_settings.interactive = False
    mock_input = mocker.patch("builtins.input")

    assert cli_prompt_yes_no("Connect?", app_settings, True) is True
    assert cli_prompt_for_value("Hub Device ID", app_settings) == ""
    mock_input.assert_not_called()


def test_eof_uses_default(mocker, app_settings):
    mocker.patch("builtins.input", side_effect=EOFError)
    assert cli_prompt_yes_no("Continue?", app_settings, False) is False
    assert cli_wait_for_enter("Press Enter", app_settings) == ""


def test_prompt_for_value_strips(mocker, app_settings):
    mocker.patch("builtins.input", return_value="  ABC  ")
    assert cli_prompt_for_value("Hub Device ID", app_settings) == "ABC"


def test_wait_for_enter_returns_reply(mocker, app_settings):
    mocker.patch("builtins.input", return_value="s")
    assert cli_wait_for_enter("Press Enter when done (or 's' to skip):", app_settings) == "s"


def test_view_configuration(app_settings, mock_logger):
    view_configuration(app_settings, mock_logger)
    text = mock_logger.info.call_args_list[-1][0][0]
    assert "[FROM 1PASSWORD OR PROMPT]" in text
    assert "memex" in text
