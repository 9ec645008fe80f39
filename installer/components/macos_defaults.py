"""
macOS preferences: `defaults write` entries and Dock cleanup.
"""

import subprocess

from common.command_utils import command_exists, log_setup, run_command
from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry

RESTART_APPS = ["Finder", "Dock"]


@ComponentRegistry.register(
    name="macos_defaults",
    metadata={
        "dependencies": ["homebrew_packages"],
        "description": "Finder, keyboard, trackpad, Dock and screenshot preferences",
    },
)
class MacDefaultsComponent(BaseComponent):
    """
    Applies the configured preference writes on every run. Writing a value
    that is already set is harmless, so no current values are read.
    """

    def is_installed(self) -> bool:
        return True

    def install(self) -> bool:
        return True

    def is_configured(self) -> bool:
        return False

    def configure(self) -> bool:
        log_setup(
            f"{self.symbols.get('gear', '⚙️')} Configuring macOS settings...",
            "info",
            self.logger,
            self.app_settings,
        )
        all_ok = True
        for entry in self.app_settings.mac_defaults:
            try:
                run_command(
                    entry.as_command(),
                    self.app_settings,
                    capture_output=True,
                    current_logger=self.logger,
                )
            except (subprocess.CalledProcessError, FileNotFoundError):
                log_setup(
                    f"{self.symbols.get('warning', '!')} Could not apply: {entry.description or entry.key}",
                    "warning",
                    self.logger,
                    self.app_settings,
                )
                all_ok = False

        self._clean_dock()

        for app in RESTART_APPS:
            run_command(
                ["killall", app],
                self.app_settings,
                check=False,
                capture_output=True,
                current_logger=self.logger,
            )

        log_setup(
            f"{self.symbols.get('success', '✅')} macOS settings configured",
            "success",
            self.logger,
            self.app_settings,
        )
        return all_ok

    def _clean_dock(self) -> None:
        if not command_exists("dockutil"):
            log_setup(
                f"{self.symbols.get('warning', '!')} dockutil not found, skipping Dock cleanup.",
                "warning",
                self.logger,
                self.app_settings,
            )
            return
        log_setup("Cleaning up Dock...", "info", self.logger, self.app_settings)
        for app in self.app_settings.packages.dock_remove:
            # Apps that are not in the Dock make dockutil exit non-zero.
            run_command(
                ["dockutil", "--remove", app, "--no-restart"],
                self.app_settings,
                check=False,
                capture_output=True,
                current_logger=self.logger,
            )
