# settings/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for application configuration.

This module defines the structured settings for the bootstrap and machine
setup scripts, including defaults, type annotations, and descriptions.
It utilizes Pydantic for data validation and settings management.
"""

from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
LOG_PREFIX_DEFAULT: str = "[MAC-SETUP]"

SYNCTHING_API_URL_DEFAULT: str = "http://localhost:8384"
SYNCTHING_CONFIG_PATH_DEFAULT: Path = (
    Path.home() / "Library" / "Application Support" / "Syncthing" / "config.xml"
)
SYNC_FOLDER_ID_DEFAULT: str = "memex"
SYNC_FOLDER_PATH_DEFAULT: Path = Path.home() / "Codebases" / "memex"
HUB_DEVICE_NAME_DEFAULT: str = "Hub"
HUB_SSH_HOST_DEFAULT: str = "n100"
HUB_DEVICE_ID_PATTERN: str = r"^[A-Z0-9]{7}(-[A-Z0-9]{7}){7}$"

ONE_PASSWORD_ITEM_DEFAULT: str = "Syncthing Hub"
ONE_PASSWORD_FIELD_DEFAULT: str = "device_id"

HOMEBREW_INSTALL_URL_DEFAULT: str = (
    "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
)
UV_INSTALL_URL_DEFAULT: str = "https://astral.sh/uv/install.sh"
CODEXBAR_REPO_DEFAULT: str = "steipete/CodexBar"
NOTIFICATION_SOUND_DEFAULT: str = "/System/Library/Sounds/Ping.aiff"

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
    "link": "🔗",
    "sync": "🔄",
}

FORMULAS_DEFAULT: List[str] = [
    "git",
    "gh",
    "jq",
    "tmux",
    "tree",
    "node",
    "pnpm",
    "mas",
    "ffmpeg",
    "wget",
    "watch",
    "cmake",
    "gemini-cli",
    "dockutil",
    "tectonic",
]

CASKS_DEFAULT: List[str] = [
    "visual-studio-code",
    "claude-code",
    "antigravity",
    "ghostty",
    "obsidian",
    "discord",
    "brave-browser",
    "google-chrome",
    "docker",
    "tailscale",
    "slack",
]

MAS_APPS_DEFAULT: Dict[str, str] = {
    "937984704": "Amphetamine",
    "441258766": "Magnet",
}

DOCK_REMOVE_DEFAULT: List[str] = [
    "Maps",
    "Photos",
    "FaceTime",
    "Phone",
    "Contacts",
    "TV",
    "News",
    "Freeform",
    "iPhone Mirroring",
]

MANUAL_INSTALLS_DEFAULT: List[str] = [
    "Microsoft Office",
    "Any other apps",
]

MINIMAL_ZSHRC_DEFAULT: str = """\
# PATH
export PATH="$HOME/.local/bin:$PATH"

# Homebrew (Apple Silicon or Intel)
if [ -f "/opt/homebrew/bin/brew" ]; then
    eval "$(/opt/homebrew/bin/brew shellenv)"
elif [ -f "/usr/local/bin/brew" ]; then
    eval "$(/usr/local/bin/brew shellenv)"
fi

# uv
. "$HOME/.local/bin/env" 2>/dev/null || true

# pnpm
export PNPM_HOME="$HOME/Library/pnpm"
case ":$PATH:" in
  *":$PNPM_HOME:"*) ;;
  *) export PATH="$PNPM_HOME:$PATH" ;;
esac

# Aliases
alias tailscale="/Applications/Tailscale.app/Contents/MacOS/Tailscale"
"""


class DefaultValueType(str, Enum):
    """Value types understood by `defaults write`."""

    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"


class LinkMode(str, Enum):
    """How a file from the synced folder is placed at its destination."""

    SYMLINK = "symlink"
    COPY = "copy"


class MacDefault(BaseModel):
    """A single `defaults write <domain> <key> -<type> <value>` entry."""

    domain: str
    key: str
    value_type: DefaultValueType = DefaultValueType.BOOL
    value: Union[bool, int, float, str]
    description: str = ""

    def as_command(self) -> List[str]:
        if self.value_type == DefaultValueType.BOOL:
            rendered = "true" if self.value else "false"
        else:
            rendered = str(self.value)
        return [
            "defaults",
            "write",
            self.domain,
            self.key,
            f"-{self.value_type.value}",
            rendered,
        ]


class ConfigLink(BaseModel):
    """A file in the synced folder mapped to its location under $HOME."""

    source: str = Field(description="Path relative to the synced folder root.")
    destination: str = Field(description="Path relative to the home directory.")
    mode: LinkMode = LinkMode.SYMLINK
    chmod: Optional[int] = Field(
        default=None,
        description="Mode applied to the source (symlink) or the copy (copy).",
    )
    missing_hint: str = ""


def _default_mac_defaults() -> List[MacDefault]:
    home = Path.home()
    return [
        MacDefault(domain="com.apple.finder", key="AppleShowAllFiles", value=True,
                   description="Finder: show hidden files"),
        MacDefault(domain="com.apple.finder", key="ShowPathbar", value=True,
                   description="Finder: show path bar"),
        MacDefault(domain="com.apple.finder", key="ShowStatusBar", value=True,
                   description="Finder: show status bar"),
        MacDefault(domain="com.apple.finder", key="FXPreferredViewStyle",
                   value_type=DefaultValueType.STRING, value="Nlsv",
                   description="Finder: default to list view"),
        MacDefault(domain="com.apple.finder", key="_FXSortFoldersFirst", value=True,
                   description="Finder: keep folders on top"),
        MacDefault(domain="NSGlobalDomain", key="ApplePressAndHoldEnabled", value=False,
                   description="Disable press-and-hold (enables key repeat)"),
        MacDefault(domain="NSGlobalDomain", key="KeyRepeat",
                   value_type=DefaultValueType.INT, value=2,
                   description="Fast key repeat rate"),
        MacDefault(domain="NSGlobalDomain", key="InitialKeyRepeat",
                   value_type=DefaultValueType.INT, value=15,
                   description="Short delay until key repeat"),
        MacDefault(domain="com.apple.driver.AppleBluetoothMultitouch.trackpad",
                   key="Clicking", value=True,
                   description="Trackpad: tap to click"),
        MacDefault(domain="NSGlobalDomain", key="com.apple.mouse.tapBehavior",
                   value_type=DefaultValueType.INT, value=1,
                   description="Trackpad: tap to click (login window)"),
        MacDefault(domain="com.apple.dock", key="minimize-to-application", value=True,
                   description="Dock: minimize windows into application icon"),
        MacDefault(domain="com.apple.dock", key="show-recents", value=False,
                   description="Dock: hide recent applications"),
        MacDefault(domain="com.apple.screencapture", key="location",
                   value_type=DefaultValueType.STRING, value=str(home / "Desktop"),
                   description="Screenshots: save to Desktop"),
        MacDefault(domain="com.apple.screencapture", key="type",
                   value_type=DefaultValueType.STRING, value="png",
                   description="Screenshots: save as PNG"),
        MacDefault(domain="NSGlobalDomain", key="NSAutomaticSpellingCorrectionEnabled",
                   value=False, description="Disable auto-correct"),
        MacDefault(domain="NSGlobalDomain", key="NSAutomaticCapitalizationEnabled",
                   value=False, description="Disable auto-capitalization"),
        MacDefault(domain="NSGlobalDomain", key="NSAutomaticQuoteSubstitutionEnabled",
                   value=False, description="Disable smart quotes"),
        MacDefault(domain="NSGlobalDomain", key="NSAutomaticDashSubstitutionEnabled",
                   value=False, description="Disable smart dashes"),
    ]


def _default_ssh_links() -> List[ConfigLink]:
    return [
        ConfigLink(source=".ssh/config", destination=".ssh/config"),
        ConfigLink(source=".ssh/id_ed25519", destination=".ssh/id_ed25519", chmod=0o600,
                   missing_hint="OK if using 1Password SSH agent"),
        ConfigLink(source=".ssh/id_ed25519.pub", destination=".ssh/id_ed25519.pub"),
        ConfigLink(source=".ssh/authorized_keys", destination=".ssh/authorized_keys",
                   chmod=0o600),
        ConfigLink(source=".ssh/known_hosts", destination=".ssh/known_hosts", chmod=0o600,
                   missing_hint="will be created on first connection"),
    ]


def _default_dotfile_links() -> List[ConfigLink]:
    return [
        ConfigLink(source="config/claude/settings.json",
                   destination=".claude/settings.json", mode=LinkMode.COPY),
        ConfigLink(source="config/claude/statusline-command.sh",
                   destination=".claude/statusline-command.sh", mode=LinkMode.COPY,
                   chmod=0o755),
        ConfigLink(source="config/ghostty/config", destination=".config/ghostty/config"),
    ]


class SyncthingSettings(BaseSettings):
    """Local Syncthing daemon and shared folder settings."""
    model_config = SettingsConfigDict(env_prefix="SYNCTHING_", extra="ignore")

    api_url: str = Field(default=SYNCTHING_API_URL_DEFAULT,
                         description="Base URL of the local Syncthing REST API.")
    config_path: Path = Field(default=SYNCTHING_CONFIG_PATH_DEFAULT,
                              description="Syncthing config.xml holding the API key.")
    folder_id: str = Field(default=SYNC_FOLDER_ID_DEFAULT,
                           description="Folder ID; must match the hub's folder ID exactly.")
    folder_label: str = Field(default=SYNC_FOLDER_ID_DEFAULT,
                              description="Folder label shown in the Syncthing UI.")
    folder_path: Path = Field(default=SYNC_FOLDER_PATH_DEFAULT,
                              description="Local path of the synced folder.")
    folder_type: str = Field(default="sendreceive", description="Syncthing folder type.")
    request_timeout: float = Field(default=10.0,
                                   description="Timeout in seconds for each REST call.")

    config_poll_interval: float = Field(default=1.0)
    config_poll_attempts: int = Field(default=30)
    api_poll_interval: float = Field(default=1.0)
    api_poll_attempts: int = Field(default=10)
    convergence_poll_interval: float = Field(default=3.0)
    convergence_max_attempts: Optional[int] = Field(
        default=None,
        description="Bound on convergence polls; None polls until the folder converges.",
    )


class HubSettings(BaseSettings):
    """Settings describing the always-on hub device."""
    model_config = SettingsConfigDict(env_prefix="HUB_", extra="ignore")

    device_id: Optional[str] = Field(
        default=None,
        description="Hub device ID. Skips the 1Password lookup and the prompt when set.",
    )
    device_name: str = Field(default=HUB_DEVICE_NAME_DEFAULT)
    introducer: bool = Field(default=True,
                             description="Let the hub announce its other peers.")
    auto_accept_folders: bool = Field(default=True)
    ssh_host: str = Field(default=HUB_SSH_HOST_DEFAULT,
                          description="SSH alias of the hub, used in hints and verification.")
    one_password_item: str = Field(default=ONE_PASSWORD_ITEM_DEFAULT)
    one_password_field: str = Field(default=ONE_PASSWORD_FIELD_DEFAULT)


class PackageSettings(BaseModel):
    """Applications installed by the machine configurator."""

    formulas: List[str] = Field(default_factory=lambda: list(FORMULAS_DEFAULT))
    casks: List[str] = Field(default_factory=lambda: list(CASKS_DEFAULT))
    mas_apps: Dict[str, str] = Field(default_factory=lambda: dict(MAS_APPS_DEFAULT),
                                     description="Mac App Store catalog ID -> app name.")
    dock_remove: List[str] = Field(default_factory=lambda: list(DOCK_REMOVE_DEFAULT))
    codexbar_repo: str = Field(default=CODEXBAR_REPO_DEFAULT)
    manual_installs: List[str] = Field(default_factory=lambda: list(MANUAL_INSTALLS_DEFAULT))


class AppSettings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(env_prefix="MAC_SETUP_", extra="ignore")

    log_prefix: str = Field(default=LOG_PREFIX_DEFAULT,
                            description="Prefix for log messages.")
    interactive: bool = Field(default=True,
                              description="Ask questions on the terminal; otherwise take the default answer.")
    home_dir: Path = Field(default_factory=Path.home)
    homebrew_install_url: str = Field(default=HOMEBREW_INSTALL_URL_DEFAULT)
    uv_install_url: str = Field(default=UV_INSTALL_URL_DEFAULT)
    notification_sound: str = Field(default=NOTIFICATION_SOUND_DEFAULT)

    syncthing: SyncthingSettings = Field(default_factory=SyncthingSettings)
    hub: HubSettings = Field(default_factory=HubSettings)
    packages: PackageSettings = Field(default_factory=PackageSettings)
    mac_defaults: List[MacDefault] = Field(default_factory=_default_mac_defaults)
    ssh_links: List[ConfigLink] = Field(default_factory=_default_ssh_links)
    dotfile_links: List[ConfigLink] = Field(default_factory=_default_dotfile_links)
    minimal_zshrc: str = Field(default=MINIMAL_ZSHRC_DEFAULT)

    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))
