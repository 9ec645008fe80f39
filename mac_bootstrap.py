# !/usr/bin/env python3
# filename: mac-setup/mac_bootstrap.py
# -*- coding: utf-8 -*-
"""
Entry point for the fresh-Mac bootstrapper.

Installs the prerequisites, starts Syncthing, connects this Mac to the hub
and waits until the shared configuration folder has synced. Run this before
`mac_setup.py`.
"""

import argparse
import logging
import subprocess
import sys
from typing import List, Optional

from bootstrapper.bootstrap_process import BootstrapState, run_bootstrap_orchestration
from common.core_utils import setup_logging
from settings.cli_handler import view_configuration
from settings.config_loader import DEFAULT_CONFIG_FILE, load_app_settings


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Bootstrap a fresh Mac: Homebrew, 1Password, Syncthing and the hub connection."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_FILE,
        help=f"Path to the YAML configuration file (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument("--log-file", default=None, help="Also write the log to this file")
    parser.add_argument("--log-prefix", default=None, help="Prefix for log messages")
    parser.add_argument(
        "--non-interactive",
        action="store_true",
        help="Never prompt; take the default answer for every question",
    )
    parser.add_argument(
        "--hub-id",
        default=None,
        help="Hub Syncthing device ID (skips the 1Password lookup and the prompt)",
    )
    parser.add_argument("--api-url", default=None, help="Syncthing REST API base URL")
    parser.add_argument("--folder-id", default=None, help="Shared folder ID (must match the hub)")
    parser.add_argument("--folder-path", default=None, help="Local path of the shared folder")
    parser.add_argument(
        "--view-config",
        action="store_true",
        help="Show the effective configuration and exit",
    )
    return parser.parse_args(args)


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the bootstrapper."""
    parsed_args = parse_args(args)
    log_level = logging.DEBUG if parsed_args.verbose else logging.INFO
    setup_logging(log_level=log_level, log_file=parsed_args.log_file)
    logger = logging.getLogger("mac_bootstrap")

    app_settings = load_app_settings(
        cli_args=parsed_args,
        config_file_path=parsed_args.config,
        current_logger=logger,
    )
    setup_logging(
        log_level=log_level,
        log_file=parsed_args.log_file,
        log_prefix=app_settings.log_prefix,
        symbols=app_settings.symbols,
    )

    if parsed_args.view_config:
        view_configuration(app_settings, logger)
        return 0

    try:
        success, context = run_bootstrap_orchestration(app_settings, logger)
    except KeyboardInterrupt:
        logger.warning("Interrupted. Re-run the bootstrapper to continue where it stopped.")
        return 130
    except subprocess.CalledProcessError as e:
        # Raised outside the orchestrated tasks, e.g. by the sudo prompt.
        logger.error(f"Bootstrap failed: {e}")
        return 1

    if not success:
        logger.info("Bootstrap ended early; nothing more to do for now.")
    elif context.state == BootstrapState.CONVERGED:
        logger.info(
            f"{app_settings.symbols.get('sparkles', '✨')} Bootstrap finished. "
            f"{context.global_files} files synced to {context.folder_path}."
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
