"""
Registry of configurator components.

Component modules register their classes with the `ComponentRegistry.register`
decorator when `installer.components` is imported. The registry answers the
questions the configurator asks: which components exist, in which order a
full run applies them, and which order a partial run needs once
dependencies are pulled in.
"""

from typing import Any, Dict, List, Optional, Type

from installer.base_component import BaseComponent

# Order of a full run, and of `mac-setup --list`.
DEFAULT_COMPONENT_ORDER: List[str] = [
    "rosetta",
    "homebrew_packages",
    "codexbar",
    "macos_defaults",
    "mas_apps",
    "uv",
    "git",
    "github_cli",
    "ssh",
    "dotfiles",
    "remote_access",
    "tailscale",
    "hostname",
]


class UnknownComponentError(KeyError):
    """A component name that nothing registered."""

    def __init__(self, name: str, available: List[str]):
        super().__init__(name)
        self.name = name
        self.available = available

    def __str__(self) -> str:
        return (
            f"Unknown component '{self.name}'. "
            f"Available: {', '.join(self.available)}"
        )


class ComponentRegistry:
    """Name to component class mapping, filled in by the register decorator."""

    _registry: Dict[str, Type[BaseComponent]] = {}

    @classmethod
    def register(cls, name: str, metadata: Optional[Dict[str, Any]] = None):
        """
        Class decorator adding a component under `name`.

        `metadata` may carry "dependencies" (names applied first) and a
        one-line "description" for --list.
        """

        def decorator(component_class: Type[BaseComponent]) -> Type[BaseComponent]:
            if name in cls._registry:
                raise ValueError(f"Component '{name}' is registered twice")
            component_class.metadata = {
                "dependencies": [],
                "description": "",
                **(metadata or {}),
            }
            cls._registry[name] = component_class
            return component_class

        return decorator

    @classmethod
    def get_component(cls, name: str) -> Type[BaseComponent]:
        try:
            return cls._registry[name]
        except KeyError:
            raise UnknownComponentError(name, cls.ordered_names()) from None

    @classmethod
    def get_all_components(cls) -> Dict[str, Type[BaseComponent]]:
        return dict(cls._registry)

    @classmethod
    def ordered_names(cls) -> List[str]:
        """Registered names: the default order first, then any extras alphabetically."""
        names = [n for n in DEFAULT_COMPONENT_ORDER if n in cls._registry]
        names += sorted(n for n in cls._registry if n not in DEFAULT_COMPONENT_ORDER)
        return names

    @classmethod
    def description(cls, name: str) -> str:
        return str(cls.get_component(name).metadata.get("description", ""))

    @classmethod
    def dependencies(cls, name: str) -> List[str]:
        return sorted(cls.get_component(name).metadata.get("dependencies", []))

    @classmethod
    def resolve_dependencies(cls, components: List[str]) -> List[str]:
        """
        Expand `components` with their dependencies.

        Each dependency lands before the first component needing it;
        otherwise the requested order is kept and duplicates are dropped.

        Raises:
            UnknownComponentError: A requested name or a dependency is not registered.
            ValueError: Dependencies form a cycle.
        """
        ordered: List[str] = []
        chain: List[str] = []

        def place(name: str) -> None:
            if name in ordered:
                return
            if name in chain:
                cycle = chain[chain.index(name):] + [name]
                raise ValueError(f"Circular dependency: {' -> '.join(cycle)}")
            chain.append(name)
            for dependency in cls.dependencies(name):
                place(dependency)
            chain.pop()
            ordered.append(name)

        for name in components:
            place(name)
        return ordered
