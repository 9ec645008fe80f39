# !/usr/bin/env python3
# filename: mac-setup/mac_setup.py
# -*- coding: utf-8 -*-
"""
Entry point for the machine configurator.

Run after `mac_bootstrap.py` once the shared folder has synced: installs
applications, applies macOS preferences and links personal configuration
files from the synced folder.
"""

import argparse
import logging
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from common.core_utils import setup_logging
from common.system_utils import Caffeinate, SudoKeepAlive, open_target
from installer.context import build_setup_context
from installer.orchestrator import ComponentOrchestrator, load_all_components
from installer.registry import ComponentRegistry
from installer.verification import verify_setup
from settings.cli_handler import view_configuration
from settings.config_loader import DEFAULT_CONFIG_FILE, load_app_settings
from settings.config_models import AppSettings


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Configure a Mac from the synced configuration folder."
    )
    parser.add_argument(
        "components",
        nargs="*",
        help="Components to apply (default: all, in the recommended order)",
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
    parser.add_argument("--folder-path", default=None, help="Local path of the synced folder")
    parser.add_argument(
        "--list", action="store_true", help="List available components and exit"
    )
    parser.add_argument(
        "--skip-verify", action="store_true", help="Skip the final verification"
    )
    parser.add_argument(
        "--view-config",
        action="store_true",
        help="Show the effective configuration and exit",
    )
    return parser.parse_args(args)


def list_components(logger: logging.Logger) -> None:
    load_all_components(logger)
    logger.info("Available components (in installation order):")
    for i, name in enumerate(ComponentRegistry.ordered_names(), 1):
        logger.info(f"  {i}. {name} - {ComponentRegistry.description(name)}")


def print_closing_notes(app_settings: AppSettings, logger: logging.Logger) -> None:
    symbols = app_settings.symbols
    logger.info("===========================================")
    logger.info(f"{symbols.get('sparkles', '✨')} Setup complete!")
    logger.info("===========================================")
    manual = app_settings.packages.manual_installs
    if manual:
        logger.warning("Manual installs needed:")
        for item in manual:
            logger.warning(f"  - {item}")
    logger.info("Then:")
    logger.info("  - Restart terminal or: source ~/.zshrc")


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the machine configurator."""
    parsed_args = parse_args(args)
    log_level = logging.DEBUG if parsed_args.verbose else logging.INFO
    setup_logging(log_level=log_level, log_file=parsed_args.log_file)
    logger = logging.getLogger("mac_setup")

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
    symbols = app_settings.symbols

    if parsed_args.view_config:
        view_configuration(app_settings, logger)
        return 0
    if parsed_args.list:
        list_components(logger)
        return 0

    sync_root = Path(app_settings.syncthing.folder_path).expanduser()
    if not sync_root.is_dir():
        logger.error(
            f"{symbols.get('error', '❌')} Synced folder not found at {sync_root}. "
            "Run mac-bootstrap first and wait for sync."
        )
        return 1

    logger.info(f"{symbols.get('rocket', '🚀')} === Mac Setup ===")
    context = build_setup_context(app_settings, logger)
    privileges = SudoKeepAlive(app_settings, logger)

    with Caffeinate():
        try:
            privileges.start()
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            logger.error(f"{symbols.get('error', '❌')} Could not obtain administrator access: {e}")
            return 1
        try:
            context.brew.ensure_on_path(app_settings, persist=False)
            orchestrator = ComponentOrchestrator(app_settings, context, logger)
            try:
                orchestrator.run(parsed_args.components or None)
            except (KeyError, ValueError) as e:
                logger.error(f"{symbols.get('error', '❌')} {e}")
                return 1
            if not parsed_args.skip_verify:
                verify_setup(app_settings, context.brew, logger)
            context.notifier.notify()
            print_closing_notes(app_settings, logger)
        except KeyboardInterrupt:
            logger.warning("Interrupted. Re-run mac-setup to continue; finished steps are skipped.")
            return 130
        finally:
            privileges.stop()

    open_target("Amphetamine", app_settings, application=True, current_logger=logger)
    return 0


if __name__ == "__main__":
    sys.exit(main())
