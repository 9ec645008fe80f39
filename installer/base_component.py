"""
Base component class for all component modules.

This module provides the base class that all component modules must inherit from.
It defines the common interface that all components must implement.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from installer.context import SetupContext
from settings.config_models import AppSettings


class BaseComponent(ABC):
    """
    Base class for all component modules.

    A component is installed when `is_installed` is False and configured when
    `is_configured` is False. Components with nothing to install or nothing
    to configure keep the default implementations of the other pair.
    """

    # Class-level metadata that can be overridden by subclasses or set by the registry decorator
    metadata: Dict[str, Any] = {
        "dependencies": [],  # List of component names that this component depends on
        "description": "",
    }

    def __init__(
        self,
        app_settings: AppSettings,
        context: SetupContext,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the component.

        Args:
            app_settings: The application settings.
            context: Collaborators shared by all components of a run.
            logger: Optional logger instance. If not provided, a new logger will be created.
        """
        self.app_settings = app_settings
        self.context = context
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    @property
    def symbols(self) -> Dict[str, str]:
        return self.app_settings.symbols

    @property
    def sync_root(self) -> Path:
        return Path(self.app_settings.syncthing.folder_path).expanduser()

    @property
    def home(self) -> Path:
        return Path(self.app_settings.home_dir).expanduser()

    @abstractmethod
    def install(self) -> bool:
        """
        Install the component.

        Returns:
            True if the installation was successful, False otherwise.
        """
        pass

    @abstractmethod
    def is_installed(self) -> bool:
        """
        Check if the component is installed.

        Returns:
            True if the component is installed, False otherwise.
        """
        pass

    def configure(self) -> bool:
        """
        Configure the component.

        Returns:
            True if the configuration was successful, False otherwise.
        """
        return True

    def is_configured(self) -> bool:
        """
        Check if the component is configured.

        Returns:
            True if the component is configured, False otherwise.
        """
        return True
