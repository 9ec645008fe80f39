# bootstrapper/hub_resolver.py
# -*- coding: utf-8 -*-
"""
Works out the hub's Syncthing device ID.

Sources are tried in order: the configured value (HUB_DEVICE_ID, YAML or
--hub-id), the 1Password CLI when it is available and signed in, then an
interactive prompt.
"""

import logging
import os
import re
import subprocess
from typing import Callable, Dict, Optional

from common.command_utils import (
    command_exists,
    command_succeeds,
    get_symbols,
    log_setup,
    run_command,
)
from settings.cli_handler import cli_prompt_for_value
from settings.config_models import HUB_DEVICE_ID_PATTERN, AppSettings

module_logger = logging.getLogger(__name__)

_HUB_ID_RE = re.compile(HUB_DEVICE_ID_PATTERN)
_EXPORT_RE = re.compile(r'^export\s+([A-Za-z_][A-Za-z0-9_]*)="?([^"]*)"?\s*$')


class OnePasswordCli:
    """Wrapper around the `op` command."""

    def __init__(
        self, app_settings: AppSettings, logger: Optional[logging.Logger] = None
    ):
        self.app_settings = app_settings
        self.logger = logger or module_logger

    def is_installed(self) -> bool:
        return command_exists("op")

    def is_signed_in(self) -> bool:
        return command_succeeds(
            ["op", "account", "list"], self.app_settings, self.logger
        )

    def sign_in(self) -> bool:
        """
        Run `op signin` and apply any session variables it prints to this
        process's environment, the way `eval $(op signin)` would.
        """
        try:
            result = run_command(
                ["op", "signin"],
                self.app_settings,
                check=False,
                capture_output=True,
                log_output=False,
                current_logger=self.logger,
            )
        except FileNotFoundError:
            return False
        if result.returncode != 0:
            return False
        session_vars = parse_exports(result.stdout or "")
        os.environ.update(session_vars)
        return True

    def get_field(self, item: str, field: str) -> Optional[str]:
        """Read one field of a 1Password item; None when missing or on failure."""
        try:
            result = run_command(
                ["op", "item", "get", item, "--fields", field, "--reveal"],
                self.app_settings,
                check=False,
                capture_output=True,
                log_output=False,
                current_logger=self.logger,
            )
        except (FileNotFoundError, subprocess.SubprocessError) as e:
            self.logger.debug(f"1Password lookup failed: {e}")
            return None
        if result.returncode != 0:
            return None
        value = (result.stdout or "").strip()
        return value or None


def parse_exports(output: str) -> Dict[str, str]:
    """Collect `export NAME="value"` lines as printed by `op signin`."""
    exports: Dict[str, str] = {}
    for line in output.splitlines():
        match = _EXPORT_RE.match(line.strip())
        if match:
            exports[match.group(1)] = match.group(2)
    return exports


def validate_hub_id(
    device_id: str,
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Loose shape check of a device ID (eight dash-separated groups of seven
    uppercase letters or digits). A mismatch is only reported.
    """
    if _HUB_ID_RE.match(device_id):
        return True
    symbols = get_symbols(app_settings)
    log_setup(
        f"{symbols.get('warning', '!')} ID format looks unusual, but continuing anyway...",
        "warning",
        current_logger if current_logger else module_logger,
        app_settings,
    )
    return False


def resolve_hub_id(
    app_settings: AppSettings,
    op_cli: Optional[OnePasswordCli] = None,
    op_available: bool = False,
    prompt: Callable[..., str] = cli_prompt_for_value,
    current_logger: Optional[logging.Logger] = None,
) -> Optional[str]:
    """
    Determine the hub device ID.

    Args:
        app_settings: Settings with the preconfigured ID and 1Password item names.
        op_cli: 1Password CLI wrapper, consulted when `op_available` is True.
        op_available: Whether the 1Password CLI is installed and signed in.
        prompt: Prompt function with the signature of `cli_prompt_for_value`.
        current_logger: Optional logger.

    Returns:
        The ID (validated only advisorily), or None when nothing was supplied.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    hub = app_settings.hub

    hub_id = (hub.device_id or "").strip()
    if hub_id:
        log_setup(
            f"{symbols.get('info', 'ℹ️')} Using configured hub device ID.",
            "info",
            logger_to_use,
            app_settings,
        )

    if not hub_id and op_available and op_cli is not None:
        log_setup(
            f"{symbols.get('info', 'ℹ️')} Checking 1Password for '{hub.one_password_item}' device ID...",
            "info",
            logger_to_use,
            app_settings,
        )
        hub_id = (op_cli.get_field(hub.one_password_item, hub.one_password_field) or "").strip()
        if hub_id:
            log_setup(
                f"{symbols.get('success', '✅')} Found hub device ID in 1Password!",
                "success",
                logger_to_use,
                app_settings,
            )
        else:
            log_setup(
                f"{symbols.get('warning', '!')} No '{hub.one_password_item}' item found in 1Password. To store it for next time:\n"
                f'  op item create --category=login --title="{hub.one_password_item}" '
                f'{hub.one_password_field}="YOUR-ID"',
                "warning",
                logger_to_use,
                app_settings,
            )

    if not hub_id:
        log_setup(
            "Enter your hub device ID. This device will sync your config folder from the hub.",
            "info",
            logger_to_use,
            app_settings,
        )
        hub_id = (prompt("Hub Device ID", app_settings, logger_to_use) or "").strip()

    if not hub_id:
        return None

    validate_hub_id(hub_id, app_settings, logger_to_use)
    return hub_id
