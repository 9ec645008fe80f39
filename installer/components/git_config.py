"""
Global Git settings, including the personal config kept in the synced folder.
"""

import subprocess

from common.command_utils import command_exists, log_setup, run_command
from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry

GLOBAL_SETTINGS = {
    "init.defaultBranch": "main",
    "push.autoSetupRemote": "true",
}
PERSONAL_GITCONFIG = "config/gitconfig"


@ComponentRegistry.register(
    name="git",
    metadata={
        "dependencies": ["homebrew_packages"],
        "description": "Git defaults and personal include file",
    },
)
class GitConfigComponent(BaseComponent):
    def is_installed(self) -> bool:
        return command_exists("git")

    def install(self) -> bool:
        log_setup(
            f"{self.symbols.get('warning', '!')} git not found; it is installed by the homebrew_packages component.",
            "warning",
            self.logger,
            self.app_settings,
        )
        return False

    def is_configured(self) -> bool:
        return False

    def _set(self, key: str, value: str) -> None:
        run_command(
            ["git", "config", "--global", key, value],
            self.app_settings,
            current_logger=self.logger,
        )

    def configure(self) -> bool:
        log_setup(
            f"{self.symbols.get('gear', '⚙️')} Setting up Git...",
            "info",
            self.logger,
            self.app_settings,
        )
        try:
            for key, value in GLOBAL_SETTINGS.items():
                self._set(key, value)

            personal = self.sync_root / PERSONAL_GITCONFIG
            if personal.is_file():
                self._set("include.path", str(personal))
                log_setup(
                    f"{self.symbols.get('link', '🔗')} Linked personal Git config from {personal}",
                    "success",
                    self.logger,
                    self.app_settings,
                )
            else:
                log_setup(
                    f"{self.symbols.get('warning', '!')} No personal gitconfig at {personal}\n"
                    "Create one with your name/email:\n"
                    "  [user]\n"
                    "      name = Your Name\n"
                    "      email = you@example.com",
                    "warning",
                    self.logger,
                    self.app_settings,
                )
        except subprocess.CalledProcessError:
            return False
        return True
