# bootstrapper/prerequisites.py
# -*- coding: utf-8 -*-
"""
Prerequisite steps of the bootstrap run: Xcode Command Line Tools, Homebrew,
the optional 1Password app and CLI, and the Syncthing daemon itself.

Each step is an orchestrator task taking the shared bootstrap context and
the application settings.
"""

import logging

from common.command_utils import (
    command_exists,
    command_succeeds,
    get_symbols,
    log_setup,
    run_command,
)
from common.macos.brew_manager import find_brew_binary
from common.retry_utils import retry
from common.system_utils import open_target
from settings.config_models import AppSettings

logger = logging.getLogger(__name__)

XCODE_POLL_INTERVAL_SECONDS = 5.0
ONE_PASSWORD_CASKS = ["1password", "1password-cli"]


def ensure_xcode_cli_tools(context, app_settings: AppSettings, **kwargs) -> None:
    """
    Checks for the Xcode Command Line Tools and starts their installer when
    missing, then waits until `xcode-select -p` succeeds.
    """
    symbols = get_symbols(app_settings)
    clt_check = ["xcode-select", "-p"]
    if command_succeeds(clt_check, app_settings, logger):
        log_setup(
            f"{symbols.get('success', '✅')} Xcode Command Line Tools already installed.",
            "success",
            logger,
            app_settings,
        )
        return

    log_setup(
        f"{symbols.get('package', '📦')} Installing Xcode Command Line Tools...",
        "info",
        logger,
        app_settings,
    )
    run_command(
        ["xcode-select", "--install"],
        app_settings,
        check=False,
        current_logger=logger,
    )
    log_setup(
        "Waiting for Xcode Command Line Tools installation to finish...",
        "info",
        logger,
        app_settings,
    )
    retry(
        lambda: True if command_succeeds(clt_check, app_settings, logger) else None,
        interval=XCODE_POLL_INTERVAL_SECONDS,
        max_attempts=None,
        description="Xcode Command Line Tools",
        sleep=context.sleep,
        current_logger=logger,
    )
    log_setup(
        f"{symbols.get('success', '✅')} Xcode Command Line Tools installed.",
        "success",
        logger,
        app_settings,
    )


def ensure_homebrew(context, app_settings: AppSettings, **kwargs) -> None:
    """
    Installs Homebrew with the official script when `brew` cannot be found and
    makes it available to this process and to future login shells.
    """
    symbols = get_symbols(app_settings)
    installed_now = False
    if not command_exists("brew") and find_brew_binary() is None:
        log_setup(
            f"{symbols.get('package', '📦')} Installing Homebrew...",
            "info",
            logger,
            app_settings,
        )
        run_command(
            f'/bin/bash -c "$(curl -fsSL {app_settings.homebrew_install_url})"',
            app_settings,
            shell=True,
            current_logger=logger,
        )
        installed_now = True

    if not context.brew.ensure_on_path(app_settings, persist=installed_now):
        raise RuntimeError("Homebrew is not available after installation.")
    log_setup(
        f"{symbols.get('success', '✅')} Homebrew is available.",
        "success",
        logger,
        app_settings,
    )


def setup_one_password(context, app_settings: AppSettings, **kwargs) -> None:
    """
    Installs the 1Password app and CLI and walks the operator through
    enabling CLI integration.

    Sets `context.op_available` when the CLI is installed and signed in.
    Nothing here is required: every failure falls back to manual entry of
    the hub ID.
    """
    symbols = get_symbols(app_settings)
    context.op_available = False

    failed = context.brew.install(ONE_PASSWORD_CASKS, app_settings, cask=True)
    for cask in failed:
        log_setup(
            f"{symbols.get('warning', '!')} Note: {cask} may already be installed.",
            "warning",
            logger,
            app_settings,
        )

    context.notifier.notify()
    log_setup(
        "Please set up 1Password:\n"
        "  1. Open 1Password app\n"
        "  2. Sign in to your account\n"
        "  3. Go to Settings > Developer > Enable 'Integrate with 1Password CLI'",
        "info",
        logger,
        app_settings,
    )
    open_target("1Password", app_settings, application=True, current_logger=logger)
    answer = context.wait_for_enter(
        "Press Enter when done (or 's' to skip):", app_settings, logger
    )
    if answer.strip().lower() == "s":
        log_setup("Skipping 1Password setup...", "info", logger, app_settings)

    op_cli = context.op_cli
    if not op_cli.is_installed():
        log_setup(
            f"{symbols.get('info', 'ℹ️')} 1Password CLI not available, will use manual entry.",
            "info",
            logger,
            app_settings,
        )
        return

    if op_cli.is_signed_in():
        context.op_available = True
        log_setup(
            f"{symbols.get('success', '✅')} 1Password CLI ready.",
            "success",
            logger,
            app_settings,
        )
        return

    log_setup(
        "1Password CLI is installed but not signed in.\n"
        "To enable automatic config retrieval, sign in with:\n"
        "  eval $(op signin)",
        "info",
        logger,
        app_settings,
    )
    if context.prompt_yes_no("Sign in now?", app_settings, False, logger):
        if op_cli.sign_in():
            context.op_available = True
            log_setup(
                f"{symbols.get('success', '✅')} Signed in to 1Password.",
                "success",
                logger,
                app_settings,
            )
        else:
            log_setup(
                f"{symbols.get('warning', '!')} Sign-in failed, continuing with manual entry...",
                "warning",
                logger,
                app_settings,
            )


def install_syncthing(context, app_settings: AppSettings, **kwargs) -> None:
    """Installs the Syncthing formula. A failure halts the bootstrap."""
    symbols = get_symbols(app_settings)
    failed = context.brew.install(["syncthing"], app_settings)
    if failed:
        raise RuntimeError("brew install syncthing failed")
    log_setup(
        f"{symbols.get('success', '✅')} Syncthing installed.",
        "success",
        logger,
        app_settings,
    )


def start_syncthing(context, app_settings: AppSettings, **kwargs) -> None:
    """Starts Syncthing as a Homebrew service (also registers it at login)."""
    context.brew.services_start("syncthing", app_settings)
