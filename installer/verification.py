"""
Post-run checks printed as a ✓/✗ list.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from common.command_utils import command_exists, command_succeeds, log_setup
from common.macos.brew_manager import BrewManager
from installer.components.tailscale import tailscale_connected
from settings.config_models import AppSettings

module_logger = logging.getLogger(__name__)

CODEXBAR_APP = Path("/Applications/CodexBar.app")


def build_checks(
    app_settings: AppSettings, brew: BrewManager, logger: logging.Logger
) -> List[Tuple[str, Callable[[], bool]]]:
    home = Path(app_settings.home_dir).expanduser()
    ghostty_config = home / ".config" / "ghostty" / "config"
    return [
        ("Homebrew", lambda: command_exists("brew")),
        ("Git", lambda: command_exists("git")),
        ("GitHub CLI", lambda: command_exists("gh")),
        ("GitHub CLI auth", lambda: command_succeeds(["gh", "auth", "status"], app_settings, logger)),
        ("1Password CLI", lambda: command_exists("op")),
        ("uv", lambda: command_exists("uv")),
        ("dockutil", lambda: command_exists("dockutil")),
        ("Syncthing", lambda: brew.service_listed("syncthing", app_settings)),
        ("CodexBar", lambda: CODEXBAR_APP.is_dir()),
        ("SSH config", lambda: (home / ".ssh" / "config").is_file()),
        ("zshrc", lambda: (home / ".zshrc").is_file()),
        ("Ghostty config", lambda: ghostty_config.is_file() or ghostty_config.is_symlink()),
        ("Tailscale", lambda: tailscale_connected(app_settings, logger)),
    ]


def verify_setup(
    app_settings: AppSettings,
    brew: Optional[BrewManager] = None,
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, bool]:
    """
    Run every check and log one line per check.

    The SSH reachability of the hub is reported as "?" when it fails, since
    it usually only needs Tailscale to come up, and is not part of the result.

    Returns:
        Check name -> passed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    brew = brew or BrewManager(logger_to_use)
    log_setup("Verifying setup...", "info", logger_to_use, app_settings)

    results: Dict[str, bool] = {}
    for name, check in build_checks(app_settings, brew, logger_to_use):
        try:
            passed = bool(check())
        except OSError:
            passed = False
        results[name] = passed
        log_setup(
            f"  {'✓' if passed else '✗'} {name}",
            "info" if passed else "warning",
            logger_to_use,
            app_settings,
        )

    host = app_settings.hub.ssh_host
    ssh_ok = command_succeeds(
        ["ssh", "-o", "BatchMode=yes", "-o", "ConnectTimeout=3", host, "echo ok"],
        app_settings,
        logger_to_use,
    )
    log_setup(
        f"  ✓ SSH to {host}" if ssh_ok else f"  ? SSH to {host} (may need Tailscale)",
        "info",
        logger_to_use,
        app_settings,
    )
    return results
