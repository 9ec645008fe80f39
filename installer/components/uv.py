"""
uv, the Python package manager, installed with its official script.
"""

import os
import subprocess

from common.command_utils import command_exists, log_setup, run_command
from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="uv",
    metadata={"dependencies": [], "description": "uv Python package manager"},
)
class UvComponent(BaseComponent):
    @property
    def local_bin(self):
        return self.home / ".local" / "bin"

    def is_installed(self) -> bool:
        return command_exists("uv") or (self.local_bin / "uv").is_file()

    def install(self) -> bool:
        log_setup(
            f"{self.symbols.get('package', '📦')} Installing uv...",
            "info",
            self.logger,
            self.app_settings,
        )
        try:
            run_command(
                f"curl -LsSf {self.app_settings.uv_install_url} | sh",
                self.app_settings,
                shell=True,
                current_logger=self.logger,
            )
        except subprocess.CalledProcessError:
            log_setup(
                f"{self.symbols.get('warning', '!')} Failed to install uv",
                "warning",
                self.logger,
                self.app_settings,
            )
            return False

        # Make uv visible to the verification step of this run.
        local_bin = str(self.local_bin)
        path_entries = os.environ.get("PATH", "").split(os.pathsep)
        if local_bin not in path_entries:
            os.environ["PATH"] = os.pathsep.join([local_bin] + path_entries)
        return True
