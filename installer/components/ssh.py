"""
SSH configuration and keys, symlinked from the synced folder.
"""

from common.command_utils import log_setup
from common.file_utils import LinkResult, ensure_private_directory, link_file
from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry


@ComponentRegistry.register(
    name="ssh",
    metadata={
        "dependencies": [],
        "description": "~/.ssh config, keys, authorized_keys and known_hosts",
    },
)
class SshComponent(BaseComponent):
    """
    Creates ~/.ssh with mode 700 and symlinks each configured file into it.
    Private files get mode 600 on the synced source, since the symlink
    itself carries no permissions.
    """

    @property
    def ssh_dir(self):
        return self.home / ".ssh"

    def is_installed(self) -> bool:
        return self.ssh_dir.is_dir()

    def install(self) -> bool:
        ensure_private_directory(self.ssh_dir)
        return True

    def is_configured(self) -> bool:
        return False

    def configure(self) -> bool:
        log_setup(
            f"{self.symbols.get('gear', '⚙️')} Setting up SSH...",
            "info",
            self.logger,
            self.app_settings,
        )
        ensure_private_directory(self.ssh_dir)
        results = [
            link_file(
                self.sync_root / link.source,
                self.home / link.destination,
                link.mode,
                self.app_settings,
                chmod=link.chmod,
                missing_hint=link.missing_hint,
                current_logger=self.logger,
            )
            for link in self.app_settings.ssh_links
        ]
        return LinkResult.FAILED not in results
