# common/macos/brew_manager.py
# -*- coding: utf-8 -*-
import logging
import os
import subprocess
from pathlib import Path
from typing import List, Optional, Union

from common.command_utils import command_exists, run_command
from settings.config_models import AppSettings

BREW_PREFIXES = ("/opt/homebrew", "/usr/local")


def find_brew_binary() -> Optional[Path]:
    """Return the brew executable of an Apple Silicon or Intel install, if any."""
    for prefix in BREW_PREFIXES:
        candidate = Path(prefix) / "bin" / "brew"
        if candidate.is_file():
            return candidate
    return None


def shellenv_line(brew_binary: Path) -> str:
    return f'eval "$({brew_binary} shellenv)"'


class BrewManager:
    """
    A centralized manager for Homebrew formulas, casks and services using the
    `brew` command-line tool.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initializes the BrewManager.
        Args:
            logger: An optional logging object.
        """
        self.logger = logger or logging.getLogger(__name__)

    def ensure_on_path(
        self, app_settings: AppSettings, persist: bool = True
    ) -> bool:
        """
        Puts the Homebrew bin directory on PATH for this process.

        Args:
            app_settings: The application settings.
            persist: Also append the `brew shellenv` line to ~/.zprofile
                unless it is already there.

        Returns:
            True if brew is usable afterwards, False otherwise.
        """
        brew_binary = find_brew_binary()
        if brew_binary is None:
            return command_exists("brew")

        bin_dir = str(brew_binary.parent)
        path_entries = os.environ.get("PATH", "").split(os.pathsep)
        if bin_dir not in path_entries:
            os.environ["PATH"] = os.pathsep.join([bin_dir] + path_entries)
            self.logger.debug(f"Added {bin_dir} to PATH for this session.")

        if persist:
            zprofile = app_settings.home_dir / ".zprofile"
            line = shellenv_line(brew_binary)
            existing = (
                zprofile.read_text(encoding="utf-8") if zprofile.exists() else ""
            )
            if line not in existing.splitlines():
                with open(zprofile, "a", encoding="utf-8") as f:
                    if existing and not existing.endswith("\n"):
                        f.write("\n")
                    f.write(line + "\n")
                self.logger.info(f"Added Homebrew shellenv to {zprofile}")
        return True

    def is_installed(
        self, name: str, app_settings: AppSettings, cask: bool = False
    ) -> bool:
        """
        Checks whether a formula (or cask) is installed via 'brew list'.
        """
        cmd = ["brew", "list"] + (["--cask"] if cask else []) + [name]
        try:
            result = run_command(
                cmd,
                app_settings,
                check=False,
                capture_output=True,
                current_logger=self.logger,
            )
        except FileNotFoundError:
            return False
        return result.returncode == 0

    def install(
        self,
        packages: Union[List[str], str],
        app_settings: AppSettings,
        cask: bool = False,
        skip_installed: bool = True,
    ) -> List[str]:
        """
        Installs formulas or casks one at a time using 'brew install'.

        A failing package does not stop the remaining ones.

        Args:
            packages: A single package name or a list of package names.
            app_settings: The application settings.
            cask: Install as casks.
            skip_installed: Skip packages 'brew list' already reports.

        Returns:
            The names of the packages that failed to install.
        """
        if not isinstance(packages, list):
            packages = [packages]

        kind = "cask" if cask else "formula"
        failed: List[str] = []
        for pkg_name in packages:
            if skip_installed and self.is_installed(pkg_name, app_settings, cask=cask):
                self.logger.debug(
                    f"{kind.capitalize()} '{pkg_name}' is already installed. Skipping."
                )
                continue
            self.logger.info(f"Installing {kind}: {pkg_name}")
            cmd = ["brew", "install"] + (["--cask"] if cask else []) + [pkg_name]
            try:
                run_command(cmd, app_settings, current_logger=self.logger)
            except (subprocess.CalledProcessError, FileNotFoundError) as e:
                self.logger.warning(f"Failed to install {pkg_name}: {e}")
                failed.append(pkg_name)
        return failed

    def services_start(
        self, service: str, app_settings: AppSettings, raise_error: bool = True
    ) -> bool:
        """
        Starts (and registers at login) a Homebrew service.

        Args:
            service: The service name, e.g. 'syncthing'.
            app_settings: The application settings.
            raise_error: Whether to raise an exception on failure.

        Returns:
            True if successful, False otherwise.
        """
        self.logger.info(f"Starting service '{service}' via 'brew services'...")
        try:
            run_command(
                ["brew", "services", "start", service],
                app_settings,
                current_logger=self.logger,
            )
            return True
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.logger.error(f"Failed to start service '{service}': {e}")
            if raise_error:
                raise
            return False

    def service_listed(self, service: str, app_settings: AppSettings) -> bool:
        """True if 'brew services list' mentions `service`."""
        try:
            result = run_command(
                ["brew", "services", "list"],
                app_settings,
                check=False,
                capture_output=True,
                current_logger=self.logger,
            )
        except FileNotFoundError:
            return False
        return result.returncode == 0 and service in (result.stdout or "")
