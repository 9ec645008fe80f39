"""
Mac App Store applications installed with `mas`.
"""

import re
import subprocess
from typing import Dict, Set

from common.command_utils import command_exists, log_setup, run_command
from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry

_MAS_LIST_ID_RE = re.compile(r"^\s*(\d+)\s")


def parse_mas_list(output: str) -> Set[str]:
    """App IDs from `mas list` output (`<id>  <name>  (<version>)` per line)."""
    ids = set()
    for line in output.splitlines():
        match = _MAS_LIST_ID_RE.match(line)
        if match:
            ids.add(match.group(1))
    return ids


@ComponentRegistry.register(
    name="mas_apps",
    metadata={
        "dependencies": ["homebrew_packages"],
        "description": "Mac App Store apps (requires App Store sign-in)",
    },
)
class MasAppsComponent(BaseComponent):
    def _missing_apps(self) -> Dict[str, str]:
        wanted = self.app_settings.packages.mas_apps
        if not command_exists("mas"):
            return dict(wanted)
        result = run_command(
            ["mas", "list"],
            self.app_settings,
            check=False,
            capture_output=True,
            current_logger=self.logger,
        )
        installed = parse_mas_list(result.stdout or "") if result.returncode == 0 else set()
        return {app_id: name for app_id, name in wanted.items() if app_id not in installed}

    def is_installed(self) -> bool:
        return not self._missing_apps()

    def install(self) -> bool:
        log_setup(
            f"{self.symbols.get('package', '📦')} Installing Mac App Store apps...",
            "info",
            self.logger,
            self.app_settings,
        )
        all_ok = True
        for app_id, name in self._missing_apps().items():
            try:
                run_command(
                    ["mas", "install", app_id],
                    self.app_settings,
                    capture_output=True,
                    current_logger=self.logger,
                )
                log_setup(
                    f"{self.symbols.get('success', '✅')} Installed {name}",
                    "success",
                    self.logger,
                    self.app_settings,
                )
            except (subprocess.CalledProcessError, FileNotFoundError):
                log_setup(
                    f"{self.symbols.get('warning', '!')} Could not install {name} (ID: {app_id}) - install manually from App Store",
                    "warning",
                    self.logger,
                    self.app_settings,
                )
                all_ok = False
        return all_ok
