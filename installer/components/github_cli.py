"""
GitHub CLI authentication.
"""

import subprocess

from common.command_utils import (
    command_exists,
    command_succeeds,
    log_setup,
    run_command,
)
from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="github_cli",
    metadata={
        "dependencies": ["homebrew_packages"],
        "description": "GitHub CLI sign-in",
    },
)
class GithubCliComponent(BaseComponent):
    def is_installed(self) -> bool:
        return command_exists("gh")

    def install(self) -> bool:
        log_setup(
            f"{self.symbols.get('warning', '!')} gh not found; it is installed by the homebrew_packages component.",
            "warning",
            self.logger,
            self.app_settings,
        )
        return False

    def is_configured(self) -> bool:
        authenticated = command_succeeds(
            ["gh", "auth", "status"], self.app_settings, self.logger
        )
        if authenticated:
            log_setup(
                f"{self.symbols.get('success', '✅')} GitHub CLI already authenticated",
                "success",
                self.logger,
                self.app_settings,
            )
        return authenticated

    def configure(self) -> bool:
        self.context.notifier.notify()
        log_setup(
            f"{self.symbols.get('warning', '!')} GitHub CLI not authenticated",
            "warning",
            self.logger,
            self.app_settings,
        )
        if not self.context.prompt_yes_no(
            "Authenticate GitHub CLI now?", self.app_settings, True, self.logger
        ):
            log_setup(
                f"{self.symbols.get('warning', '!')} Skipping GitHub auth - run 'gh auth login' later",
                "warning",
                self.logger,
                self.app_settings,
            )
            return True
        try:
            run_command(["gh", "auth", "login"], self.app_settings, current_logger=self.logger)
        except subprocess.CalledProcessError:
            return False
        return True
