"""
CodexBar component: installs the latest GitHub release into /Applications.

CodexBar is not distributed through Homebrew, so the newest release zip is
downloaded directly. The installed bundle's version is compared with the
release tag so an up-to-date install is left alone.
"""

import plistlib
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from common.command_utils import log_setup, run_command
from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry

GITHUB_API_URL = "https://api.github.com"
APPLICATIONS_DIR = Path("/Applications")
APP_BUNDLE_NAME = "CodexBar.app"
REQUEST_TIMEOUT_SECONDS = 30


def select_release_asset(release: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """The first .zip asset that is not a debug-symbols archive."""
    for asset in release.get("assets") or []:
        name = asset.get("name", "")
        if name.endswith(".zip") and "dSYM" not in name:
            return asset
    return None


def normalize_version(version: Optional[str]) -> str:
    return (version or "").strip().lstrip("vV")


@ComponentRegistry.register(
    name="codexbar",
    metadata={
        "dependencies": [],
        "description": "CodexBar menu bar app (latest GitHub release)",
    },
)
class CodexBarComponent(BaseComponent):
    applications_dir: Path = APPLICATIONS_DIR

    def __init__(self, app_settings, context, logger=None):
        super().__init__(app_settings, context, logger)
        self.session = context.http or requests.Session()
        self._release: Optional[Dict[str, Any]] = None
        self._release_fetched = False

    @property
    def app_path(self) -> Path:
        return self.applications_dir / APP_BUNDLE_NAME

    @property
    def releases_page(self) -> str:
        return f"https://github.com/{self.app_settings.packages.codexbar_repo}/releases"

    def _get_json(self, url: str) -> Any:
        response = self.session.get(
            url,
            headers={"Accept": "application/vnd.github+json"},
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()

    def fetch_latest_release(self) -> Optional[Dict[str, Any]]:
        """Latest release metadata, falling back to the newest entry of the release list."""
        if self._release_fetched:
            return self._release
        self._release_fetched = True

        repo_url = f"{GITHUB_API_URL}/repos/{self.app_settings.packages.codexbar_repo}"
        try:
            self._release = self._get_json(f"{repo_url}/releases/latest")
        except (requests.exceptions.RequestException, ValueError) as e:
            self.logger.debug(f"Latest release lookup failed: {e}")
            try:
                releases = self._get_json(f"{repo_url}/releases")
                self._release = releases[0] if releases else None
            except (requests.exceptions.RequestException, ValueError, IndexError, KeyError) as list_err:
                self.logger.debug(f"Release list lookup failed: {list_err}")
                self._release = None
        return self._release

    def installed_version(self) -> Optional[str]:
        info_plist = self.app_path / "Contents" / "Info.plist"
        try:
            with open(info_plist, "rb") as f:
                info = plistlib.load(f)
        except (OSError, plistlib.InvalidFileException):
            return None
        return info.get("CFBundleShortVersionString")

    def is_installed(self) -> bool:
        if not self.app_path.exists():
            return False
        release = self.fetch_latest_release()
        if not release:
            return True
        log_setup(
            f"{self.symbols.get('info', 'ℹ️')} CodexBar already installed, checking for updates...",
            "info",
            self.logger,
            self.app_settings,
        )
        return normalize_version(self.installed_version()) == normalize_version(
            release.get("tag_name")
        )

    def _download(self, asset: Dict[str, Any], destination: Path) -> None:
        url = asset.get("browser_download_url") or asset["url"]
        with self.session.get(
            url,
            headers={"Accept": "application/octet-stream"},
            stream=True,
            timeout=REQUEST_TIMEOUT_SECONDS,
        ) as response:
            response.raise_for_status()
            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=65536):
                    f.write(chunk)

    def install(self) -> bool:
        release = self.fetch_latest_release()
        asset = select_release_asset(release) if release else None
        version = release.get("tag_name") if release else None
        if not asset or not version:
            log_setup(
                f"{self.symbols.get('warning', '!')} Could not fetch CodexBar release, install manually from {self.releases_page}",
                "warning",
                self.logger,
                self.app_settings,
            )
            return False

        log_setup(
            f"{self.symbols.get('package', '📦')} Found CodexBar {version}",
            "info",
            self.logger,
            self.app_settings,
        )
        try:
            with tempfile.TemporaryDirectory() as temp_dir:
                temp_path = Path(temp_dir)
                archive = temp_path / "codexbar.zip"
                self._download(asset, archive)
                # unzip keeps the bundle's symlinks and executable bits
                run_command(
                    ["unzip", "-q", str(archive), "-d", str(temp_path)],
                    self.app_settings,
                    current_logger=self.logger,
                )
                extracted = temp_path / APP_BUNDLE_NAME
                if not extracted.is_dir():
                    raise FileNotFoundError(f"{APP_BUNDLE_NAME} not found in release archive")
                if self.app_path.exists():
                    shutil.rmtree(self.app_path)
                shutil.move(str(extracted), str(self.app_path))
        except (
            requests.exceptions.RequestException,
            subprocess.CalledProcessError,
            OSError,
        ) as e:
            log_setup(
                f"{self.symbols.get('warning', '!')} CodexBar install failed ({e}), install manually from {self.releases_page}",
                "warning",
                self.logger,
                self.app_settings,
            )
            return False

        log_setup(
            f"{self.symbols.get('success', '✅')} CodexBar {version} installed",
            "success",
            self.logger,
            self.app_settings,
        )
        return True
