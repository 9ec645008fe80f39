# settings/cli_handler.py
# -*- coding: utf-8 -*-
"""
Handles Command Line Interface (CLI) interactions for the setup scripts.
"""

import logging
from typing import Optional

from common.command_utils import log_setup
from settings.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def _read_input(
    prompt_text: str,
    app_settings: AppSettings,
    logger_to_use: logging.Logger,
) -> Optional[str]:
    """Read one line from the operator; None when input is unavailable."""
    symbols = app_settings.symbols
    if not app_settings.interactive:
        log_setup(
            f"{symbols.get('info', 'ℹ️')} Non-interactive run, using default for prompt: '{prompt_text.strip()}'",
            "info",
            logger_to_use,
            app_settings,
        )
        return None
    try:
        return input(prompt_text).strip()
    except EOFError:
        log_setup(
            f"{symbols.get('warning', '!')} No user input (EOF), using default for prompt: '{prompt_text.strip()}'",
            "warning",
            logger_to_use,
            app_settings,
        )
        return None


def cli_prompt_yes_no(
    prompt_message: str,
    app_settings: AppSettings,
    default: bool = False,
    current_logger_instance: Optional[logging.Logger] = None,
) -> bool:
    """
    Ask a yes/no question on the terminal.

    Parameters:
    prompt_message : str
        The question to display.
    app_settings : AppSettings
        Provides the symbols and the interactive flag.
    default : bool
        The answer used for an empty reply, on EOF, and in non-interactive runs.
    current_logger_instance : Optional[logging.Logger]
        Logger to use; defaults to the module logger.

    Returns:
    bool
        True for "y"/"yes", False for "n"/"no", otherwise ``default``.
    """
    logger_to_use = (
        current_logger_instance if current_logger_instance else module_logger
    )
    choices = "Y/n" if default else "y/N"
    symbols = app_settings.symbols
    answer = _read_input(
        f"   {symbols.get('info', 'ℹ️')} {prompt_message} [{choices}]: ",
        app_settings,
        logger_to_use,
    )
    if not answer:
        return default
    answer = answer.lower()
    if answer in ("y", "yes"):
        return True
    if answer in ("n", "no"):
        return False
    return default


def cli_prompt_for_value(
    prompt_message: str,
    app_settings: AppSettings,
    current_logger_instance: Optional[logging.Logger] = None,
) -> str:
    """Prompt for a free-text value. Returns an empty string when skipped."""
    logger_to_use = (
        current_logger_instance if current_logger_instance else module_logger
    )
    answer = _read_input(f"{prompt_message}: ", app_settings, logger_to_use)
    return answer or ""


def cli_wait_for_enter(
    prompt_message: str,
    app_settings: AppSettings,
    current_logger_instance: Optional[logging.Logger] = None,
) -> str:
    """Block until the operator presses Enter and return what they typed."""
    logger_to_use = (
        current_logger_instance if current_logger_instance else module_logger
    )
    answer = _read_input(f"{prompt_message} ", app_settings, logger_to_use)
    return answer or ""


def view_configuration(
    app_config: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Log the effective configuration (CLI > YAML > ENV > Defaults).

    Parameters:
        app_config (AppSettings): The resolved settings.
        current_logger (Optional[logging.Logger]): Logger to use.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_config.symbols

    config_text = f"{symbols.get('info', 'ℹ️')} Current effective configuration values (CLI > YAML > ENV > Defaults):\n\n"
    config_text += f"  Interactive:                   {app_config.interactive}\n"
    config_text += f"  Home Directory:                {app_config.home_dir}\n\n"

    config_text += "  Syncthing Settings (syncthing.*):\n"
    config_text += f"    API URL:                     {app_config.syncthing.api_url}\n"
    config_text += f"    Config File:                 {app_config.syncthing.config_path}\n"
    config_text += f"    Folder ID:                   {app_config.syncthing.folder_id}\n"
    config_text += f"    Folder Path:                 {app_config.syncthing.folder_path}\n\n"

    config_text += "  Hub Settings (hub.*):\n"
    hub_id_display = app_config.hub.device_id or "[FROM 1PASSWORD OR PROMPT]"
    config_text += f"    Device ID:                   {hub_id_display}\n"
    config_text += f"    1Password Item:              {app_config.hub.one_password_item}\n"
    config_text += f"    SSH Host:                    {app_config.hub.ssh_host}\n\n"

    config_text += "  Packages (packages.*):\n"
    config_text += f"    Formulas:                    {len(app_config.packages.formulas)}\n"
    config_text += f"    Casks:                       {len(app_config.packages.casks)}\n"
    config_text += f"    App Store Apps:              {len(app_config.packages.mas_apps)}\n"
    config_text += f"  macOS Defaults:                {len(app_config.mac_defaults)}\n"

    log_setup(
        "Displaying current configuration:", "info", logger_to_use, app_config
    )
    log_setup(f"\n{config_text}\n", "info", logger_to_use, app_config)
