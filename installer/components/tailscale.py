"""
Tailscale: opens the app and offers to connect.
"""

from pathlib import Path

from common.command_utils import command_succeeds, log_setup, run_command
from common.system_utils import open_target
from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry

TAILSCALE_APP = Path("/Applications/Tailscale.app")
TAILSCALE_CLI = str(TAILSCALE_APP / "Contents" / "MacOS" / "Tailscale")
APP_STARTUP_SECONDS = 2


def tailscale_connected(app_settings, logger=None) -> bool:
    return command_succeeds([TAILSCALE_CLI, "status"], app_settings, logger)


@ComponentRegistry.register(
    name="tailscale",
    metadata={
        "dependencies": ["homebrew_packages"],
        "description": "Tailscale connection",
    },
)
class TailscaleComponent(BaseComponent):
    app_path: Path = TAILSCALE_APP

    def is_installed(self) -> bool:
        return self.app_path.exists()

    def install(self) -> bool:
        log_setup(
            f"{self.symbols.get('warning', '!')} Tailscale.app not found; it is installed by the homebrew_packages component.",
            "warning",
            self.logger,
            self.app_settings,
        )
        return False

    def is_configured(self) -> bool:
        return False

    def configure(self) -> bool:
        log_setup(
            f"{self.symbols.get('gear', '⚙️')} Setting up Tailscale...",
            "info",
            self.logger,
            self.app_settings,
        )
        open_target("Tailscale", self.app_settings, application=True, current_logger=self.logger)
        self.context.sleep(APP_STARTUP_SECONDS)

        if tailscale_connected(self.app_settings, self.logger):
            log_setup(
                f"{self.symbols.get('success', '✅')} Tailscale already connected",
                "success",
                self.logger,
                self.app_settings,
            )
            return True

        self.context.notifier.notify()
        if not self.context.prompt_yes_no(
            "Connect to Tailscale now?", self.app_settings, True, self.logger
        ):
            log_setup(
                f"{self.symbols.get('warning', '!')} Skipping Tailscale - run 'tailscale up' later",
                "warning",
                self.logger,
                self.app_settings,
            )
            return True
        result = run_command(
            [TAILSCALE_CLI, "up"],
            self.app_settings,
            check=False,
            current_logger=self.logger,
        )
        return result.returncode == 0
