"""
Base classes for the component registry.

This module provides the data model shared by the registry and the lifecycle
engine:
- ComponentState / ManagerState: lifecycle enums
- Component: optional convenience base class for components
- ComponentRecord: what the registry stores per component name
- TypeRegistry: named validator predicates gating registration
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from component_registry.custom_logging import get_logger
from component_registry.exceptions import ValidationError


class ComponentState(Enum):
    """Possible states of a registered component."""
    REGISTERED = "registered"        # Stored in the registry, init hook not yet run
    INITIALIZING = "initializing"    # Init hook in progress
    READY = "ready"                  # Init hook completed
    FAILED = "failed"                # Init or shutdown hook raised, or a dependency failed
    STOPPED = "stopped"              # Shutdown hook completed


class ManagerState(Enum):
    """Possible states of a component manager."""
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"
    FAILED = "failed"


# Optional hooks a component instance may expose
CAPABILITIES = ("init", "shutdown", "config")


def require_name(value: Any, what: str = "name") -> str:
    """Return value if it is a non-empty string, else raise ValidationError."""
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{what} must be a non-empty string, got {value!r}")
    return value


class Component:
    """
    Convenience base class for components.

    Components are not required to inherit from this class; the registry only
    relies on an optional ``dependencies`` attribute and the optional
    ``init``, ``shutdown`` and ``config`` hooks. Subclasses declare what they
    need in their constructor:

        class Server(Component):
            def __init__(self):
                super().__init__("server")
                self.add_dependency("logger")

            def init(self):
                ...
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name or self.__class__.__name__
        self.dependencies: List[str] = []
        self.logger = get_logger(f"component.{self.name}")

    def __repr__(self):
        return f"Component<{self.name}, deps={self.dependencies}>"

    def add_dependency(self, name: str):
        """
        Declare a dependency on another component by name.

        Adding the same name twice is a no-op.
        """
        require_name(name, "dependency name")
        if name in self.dependencies:
            self.logger.debug(f"Dependency already declared: {name}")
            return
        self.dependencies.append(name)
        self.logger.debug(f"Declared dependency on {name}")

    def get_dependencies(self) -> List[str]:
        """Get list of declared dependency names, in declaration order."""
        return list(self.dependencies)


@dataclass
class ComponentRecord:
    """A registered component and its lifecycle bookkeeping."""
    name: str
    type_name: str
    instance: Any
    dependencies: List[str] = field(default_factory=list)
    state: ComponentState = ComponentState.REGISTERED

    def hook(self, capability: str) -> Optional[Callable]:
        """Return the instance's callable for a capability, or None if absent."""
        candidate = getattr(self.instance, capability, None)
        return candidate if callable(candidate) else None

    def add_dependency(self, name: str) -> bool:
        """Record a dependency edge; returns False if it was already present."""
        if name in self.dependencies:
            return False
        self.dependencies.append(name)
        return True

    def get_status(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type_name,
            "state": self.state.value,
            "dependencies": list(self.dependencies),
            "capabilities": [c for c in CAPABILITIES if self.hook(c) is not None],
        }


@dataclass
class TypeDescriptor:
    """A named type contract enforced by a validator predicate."""
    name: str
    validate: Callable[[Any], bool]


class TypeRegistry:
    """Maps type names to validator predicates."""

    def __init__(self):
        self.logger = get_logger("type_registry")
        self._types: Dict[str, TypeDescriptor] = {}

    def __contains__(self, name):
        return name in self._types

    def __len__(self):
        return len(self._types)

    def register(self, name: str, validate: Callable[[Any], bool]) -> TypeDescriptor:
        """
        Register a validator under a type name.

        Args:
            name: Type name
            validate: Predicate taking one candidate value

        Returns:
            The stored TypeDescriptor

        Raises:
            ValidationError: If name is not a non-empty string or validate is
                not callable
        """
        require_name(name, "type name")
        if not callable(validate):
            raise ValidationError(f"validator for type '{name}' must be callable, got {validate!r}")

        if name in self._types:
            self.logger.warning(f"Type '{name}' already registered, overriding")

        descriptor = TypeDescriptor(name, validate)
        self._types[name] = descriptor
        self.logger.debug(f"Registered type: {name}")
        return descriptor

    def get(self, name: str) -> Optional[Callable[[Any], bool]]:
        """Get the validator for a type name, or None."""
        descriptor = self._types.get(name)
        return descriptor.validate if descriptor else None

    def names(self) -> List[str]:
        return list(self._types)

    def clear(self):
        self._types.clear()
