"""
Optional computer name change.
"""

import socket

from common.command_utils import (
    command_exists,
    log_setup,
    run_command,
    run_elevated_command,
)
from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry

SCUTIL_NAME_KEYS = ["ComputerName", "HostName", "LocalHostName"]


@ComponentRegistry.register(
    name="hostname",
    metadata={
        "dependencies": [],
        "description": "ComputerName, HostName and LocalHostName (asks first)",
    },
)
class HostnameComponent(BaseComponent):
    def is_installed(self) -> bool:
        return True

    def install(self) -> bool:
        return True

    def is_configured(self) -> bool:
        return False

    def current_name(self) -> str:
        if command_exists("scutil"):
            result = run_command(
                ["scutil", "--get", "ComputerName"],
                self.app_settings,
                check=False,
                capture_output=True,
                current_logger=self.logger,
            )
            if result.returncode == 0 and result.stdout.strip():
                return result.stdout.strip()
        return socket.gethostname()

    def configure(self) -> bool:
        self.context.notifier.notify()
        log_setup(
            f"Current hostname: {self.current_name()}",
            "info",
            self.logger,
            self.app_settings,
        )
        new_name = self.context.prompt_value(
            "Set new hostname? (e.g., M4, MBP) [press Enter to skip]",
            self.app_settings,
            self.logger,
        ).strip()
        if not new_name:
            return True

        for key in SCUTIL_NAME_KEYS:
            run_elevated_command(
                ["scutil", "--set", key, new_name],
                self.app_settings,
                current_logger=self.logger,
            )
        log_setup(
            f"{self.symbols.get('success', '✅')} Hostname set to: {new_name}",
            "success",
            self.logger,
            self.app_settings,
        )
        return True
