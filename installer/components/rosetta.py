"""
Rosetta 2 component, only relevant on Apple Silicon.
"""

import subprocess

from common.command_utils import command_succeeds, log_setup, run_command
from common.system_utils import is_apple_silicon
from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="rosetta",
    metadata={
        "dependencies": [],
        "description": "Rosetta 2 translation layer for Intel binaries",
    },
)
class RosettaComponent(BaseComponent):
    def is_installed(self) -> bool:
        if not is_apple_silicon():
            return True
        return command_succeeds(
            ["/usr/bin/pgrep", "-q", "oahd"], self.app_settings, self.logger
        )

    def install(self) -> bool:
        log_setup(
            f"{self.symbols.get('package', '📦')} Installing Rosetta 2...",
            "info",
            self.logger,
            self.app_settings,
        )
        try:
            run_command(
                ["softwareupdate", "--install-rosetta", "--agree-to-license"],
                self.app_settings,
                current_logger=self.logger,
            )
        except (subprocess.CalledProcessError, FileNotFoundError):
            log_setup(
                f"{self.symbols.get('warning', '!')} Rosetta 2 installation failed",
                "warning",
                self.logger,
                self.app_settings,
            )
            return False
        return True
