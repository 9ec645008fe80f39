"""
Optional Remote Login (SSH) and Screen Sharing.
"""

import subprocess

from common.command_utils import log_setup, run_elevated_command
from common.system_utils import open_target
from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry

SHARING_SETTINGS_URL = "x-apple.systempreferences:com.apple.Sharing-Settings.extension"
SCREEN_SHARING_PLIST = "/System/Library/LaunchDaemons/com.apple.screensharing.plist"


@ComponentRegistry.register(
    name="remote_access",
    metadata={
        "dependencies": [],
        "description": "Remote Login and Screen Sharing (asks first)",
    },
)
class RemoteAccessComponent(BaseComponent):
    def is_installed(self) -> bool:
        return True

    def install(self) -> bool:
        return True

    def is_configured(self) -> bool:
        return False

    def configure(self) -> bool:
        self.context.notifier.notify()
        if not self.context.prompt_yes_no(
            "Enable SSH and Screen Sharing?", self.app_settings, False, self.logger
        ):
            return True

        log_setup("Enabling SSH (Remote Login)...", "info", self.logger, self.app_settings)
        try:
            run_elevated_command(
                ["systemsetup", "-setremotelogin", "on"],
                self.app_settings,
                capture_output=True,
                current_logger=self.logger,
            )
        except (subprocess.CalledProcessError, FileNotFoundError):
            # systemsetup needs Full Disk Access for the terminal.
            log_setup(
                f"{self.symbols.get('warning', '!')} CLI method failed (needs Full Disk Access)\n"
                "Opening System Settings > General > Sharing...\n"
                "  Please enable 'Remote Login' and 'Screen Sharing' manually",
                "warning",
                self.logger,
                self.app_settings,
            )
            open_target(SHARING_SETTINGS_URL, self.app_settings, current_logger=self.logger)
            self.context.wait_for_enter("Press Enter when done...", self.app_settings, self.logger)
            return True

        log_setup("Enabling Screen Sharing (VNC)...", "info", self.logger, self.app_settings)
        result = run_elevated_command(
            ["launchctl", "load", "-w", SCREEN_SHARING_PLIST],
            self.app_settings,
            check=False,
            capture_output=True,
            current_logger=self.logger,
        )
        if result.returncode != 0:
            log_setup(
                f"{self.symbols.get('warning', '!')} Failed to enable Screen Sharing",
                "warning",
                self.logger,
                self.app_settings,
            )
            return False
        log_setup(
            f"{self.symbols.get('success', '✅')} Remote access enabled",
            "success",
            self.logger,
            self.app_settings,
        )
        return True
