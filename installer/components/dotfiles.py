"""
Shell, Claude and Ghostty configuration from the synced folder.
"""

from common.command_utils import log_setup
from common.file_utils import LinkResult, backup_file, link_file
from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry
from settings.config_models import LinkMode

SYNCED_ZSHRC = "config/zshrc"


@ComponentRegistry.register(
    name="dotfiles",
    metadata={
        "dependencies": [],
        "description": "~/.zshrc, Claude settings and Ghostty config",
    },
)
class DotfilesComponent(BaseComponent):
    def is_installed(self) -> bool:
        return True

    def install(self) -> bool:
        return True

    def is_configured(self) -> bool:
        return False

    def _setup_zshrc(self) -> LinkResult:
        """
        Copies the synced zshrc, or writes a minimal one when the synced
        folder has none. An existing different ~/.zshrc is kept as .bak.
        """
        zshrc = self.home / ".zshrc"
        synced = self.sync_root / SYNCED_ZSHRC
        if synced.is_file():
            return link_file(
                synced,
                zshrc,
                LinkMode.COPY,
                self.app_settings,
                current_logger=self.logger,
            )

        minimal = self.app_settings.minimal_zshrc
        try:
            if zshrc.is_file() and not zshrc.is_symlink():
                if zshrc.read_text(encoding="utf-8") == minimal:
                    return LinkResult.UNCHANGED
                backup_file(zshrc, self.app_settings, self.logger)
            elif zshrc.is_symlink():
                zshrc.unlink()
            zshrc.write_text(minimal, encoding="utf-8")
        except OSError as e:
            log_setup(
                f"{self.symbols.get('error', '❌')} Could not write {zshrc}: {e}",
                "error",
                self.logger,
                self.app_settings,
            )
            return LinkResult.FAILED
        log_setup(
            f"{self.symbols.get('success', '✅')} Created minimal ~/.zshrc (customize in {synced})",
            "success",
            self.logger,
            self.app_settings,
        )
        return LinkResult.COPIED

    def configure(self) -> bool:
        log_setup(
            f"{self.symbols.get('gear', '⚙️')} Setting up shell and app configs...",
            "info",
            self.logger,
            self.app_settings,
        )
        results = [self._setup_zshrc()]
        for link in self.app_settings.dotfile_links:
            results.append(
                link_file(
                    self.sync_root / link.source,
                    self.home / link.destination,
                    link.mode,
                    self.app_settings,
                    chmod=link.chmod,
                    missing_hint=link.missing_hint,
                    current_logger=self.logger,
                )
            )
        return LinkResult.FAILED not in results
