"""
Orchestrator for the machine configurator components.

This module provides the ComponentOrchestrator class, which is responsible for
loading the component modules, resolving dependencies, and executing the
components in the correct order.
"""

import importlib
import logging
import pkgutil
from enum import Enum
from typing import Dict, List, Optional, Type

from installer.base_component import BaseComponent
from installer.context import SetupContext
from installer.registry import DEFAULT_COMPONENT_ORDER, ComponentRegistry
from settings.config_models import AppSettings


class ComponentStatus(str, Enum):
    """Outcome of one component in a configurator run."""

    APPLIED = "APPLIED"
    ALREADY_DONE = "ALREADY_DONE"
    FAILED = "FAILED"


def load_all_components(logger: Optional[logging.Logger] = None) -> None:
    """Import every module of `installer.components` so each registers itself."""
    import installer.components

    effective_logger = logger or logging.getLogger(__name__)
    for _, module_name, _ in pkgutil.iter_modules(installer.components.__path__):
        importlib.import_module(f"installer.components.{module_name}")
        effective_logger.debug(f"Imported component module: {module_name}")


class ComponentOrchestrator:
    """
    Runs components in dependency order.

    Every failure is soft: a component that fails or raises is logged as a
    warning and the run moves on to the next component.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        context: SetupContext,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            app_settings: The application settings.
            context: Collaborators handed to every component.
            logger: Optional logger instance. If not provided, a new logger will be created.
        """
        self.app_settings = app_settings
        self.context = context
        self.logger = logger or logging.getLogger(self.__class__.__name__)

        load_all_components(self.logger)

    def get_available_components(self) -> Dict[str, Type[BaseComponent]]:
        return ComponentRegistry.get_all_components()

    def resolve_dependencies(self, component_names: List[str]) -> List[str]:
        return ComponentRegistry.resolve_dependencies(component_names)

    def _apply(self, name: str, component: BaseComponent) -> ComponentStatus:
        changed = False
        if not component.is_installed():
            self.logger.info(f"Installing component: {name}")
            if not component.install():
                self.logger.warning(f"Component '{name}' did not install cleanly.")
                return ComponentStatus.FAILED
            changed = True

        if not component.is_configured():
            self.logger.info(f"Configuring component: {name}")
            if not component.configure():
                self.logger.warning(f"Component '{name}' did not configure cleanly.")
                return ComponentStatus.FAILED
            changed = True

        return ComponentStatus.APPLIED if changed else ComponentStatus.ALREADY_DONE

    def run(
        self, component_names: Optional[List[str]] = None
    ) -> Dict[str, ComponentStatus]:
        """
        Install and configure the given components (all, in the default order,
        when none are given).

        Returns:
            A mapping of component name to its outcome, in execution order.
        """
        symbols = self.app_settings.symbols
        requested = component_names or DEFAULT_COMPONENT_ORDER
        resolved_names = self.resolve_dependencies(requested)
        self.logger.info(
            f"Processing components in order: {', '.join(resolved_names)}"
        )

        results: Dict[str, ComponentStatus] = {}
        total = len(resolved_names)
        for i, name in enumerate(resolved_names, 1):
            self.logger.info(f"--- [{i}/{total}] {name} ---")
            try:
                component = ComponentRegistry.get_component(name)(
                    self.app_settings, self.context, self.logger
                )
                results[name] = self._apply(name, component)
            except Exception as e:
                self.logger.warning(
                    f"{symbols.get('warning', '!')} Component '{name}' failed: {e}. Continuing.",
                    exc_info=self.logger.isEnabledFor(logging.DEBUG),
                )
                results[name] = ComponentStatus.FAILED

        failed = [n for n, status in results.items() if status == ComponentStatus.FAILED]
        if failed:
            self.logger.warning(
                f"{symbols.get('warning', '!')} Components with problems: {', '.join(failed)}"
            )
        else:
            self.logger.info(
                f"{symbols.get('success', '✅')} All components processed successfully."
            )
        return results
