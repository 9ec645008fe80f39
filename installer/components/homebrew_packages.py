"""
Homebrew formulas and casks from the package settings.
"""

from typing import List, Optional, Tuple

from common.command_utils import log_setup
from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="homebrew_packages",
    metadata={
        "dependencies": [],
        "description": "Command-line tools (formulas) and applications (casks)",
    },
)
class HomebrewPackagesComponent(BaseComponent):
    """
    Installs every configured formula, then every cask, each only if
    `brew list` does not already report it. A failed package is a warning.
    """

    _missing: Optional[Tuple[List[str], List[str]]] = None

    def _find_missing(self) -> Tuple[List[str], List[str]]:
        brew = self.context.brew
        packages = self.app_settings.packages
        formulas = [
            f for f in packages.formulas
            if not brew.is_installed(f, self.app_settings)
        ]
        casks = [
            c for c in packages.casks
            if not brew.is_installed(c, self.app_settings, cask=True)
        ]
        return formulas, casks

    def is_installed(self) -> bool:
        self._missing = self._find_missing()
        formulas, casks = self._missing
        return not formulas and not casks

    def install(self) -> bool:
        formulas, casks = self._missing or self._find_missing()
        brew = self.context.brew
        failed: List[str] = []

        if formulas:
            log_setup(
                f"{self.symbols.get('package', '📦')} Installing Homebrew formulas: {', '.join(formulas)}",
                "info",
                self.logger,
                self.app_settings,
            )
            failed += brew.install(formulas, self.app_settings, skip_installed=False)
        if casks:
            log_setup(
                f"{self.symbols.get('package', '📦')} Installing Homebrew casks: {', '.join(casks)}",
                "info",
                self.logger,
                self.app_settings,
            )
            failed += brew.install(
                casks, self.app_settings, cask=True, skip_installed=False
            )

        for name in failed:
            log_setup(
                f"{self.symbols.get('warning', '!')} Failed to install {name}",
                "warning",
                self.logger,
                self.app_settings,
            )
        return not failed
