"""
Component Manager.

The ComponentManager is the public entry point: it owns the type registry and
the component registry, dispatches configuration calls and delegates init and
shutdown to the lifecycle engine.

Example:
    manager = ComponentManager()
    manager.register_type("service", has_capabilities("init"))
    manager.register("store", "service", Store())
    manager.register("server", "service", Server())   # depends on "store"
    manager.init()                                    # store, then server
    manager.config("logger", "set-level", "warn")
    manager.shutdown()                                # server, then store
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Set

from component_registry.base import (
    ComponentRecord,
    ManagerState,
    TypeRegistry,
    require_name,
)
from component_registry.components.logger import DefaultLogger
from component_registry.config import RegistryConfig, get_config
from component_registry.custom_logging import get_logger, setup_logging
from component_registry.exceptions import (
    ConfigurationError,
    RegistrationError,
    ValidationError,
)
from component_registry.lifecycle import LifecycleManager

# Private type of the built-in logger; kept out of the user type table
DEFAULT_LOGGER_TYPE = "__default_logger__"

_MISSING = object()


class ComponentManager:
    """
    Registry and lifecycle owner for a set of named, typed components.

    Mutating operations are serialized with a re-entrant lock, so hooks may
    call back into the manager (``get``, ``config``) while a pass runs.
    """

    def __init__(self, config: Optional[RegistryConfig] = None):
        """
        Args:
            config: Settings for the manager; the global configuration if None
        """
        self.settings = config or get_config()
        self.logger = get_logger("component_registry")
        self._lock = threading.RLock()
        self._types = TypeRegistry()
        self._components: Dict[str, ComponentRecord] = {}
        self.lifecycle = LifecycleManager(self._components)

        setup_logging(
            self.loggers,
            self.settings.logging.level,
            self.settings.logging.log_file,
        )

    @property
    def loggers(self) -> List[logging.Logger]:
        """The diagnostic loggers of the manager and its engine."""
        return [
            self.logger,
            self._types.logger,
            self.lifecycle.logger,
            self.lifecycle.dependency_graph.logger,
        ]

    def __contains__(self, name):
        return name in self._components

    def __len__(self):
        return len(self._components)

    def __repr__(self):
        return f"ComponentManager<{self.state.value}, components={len(self._components)}>"

    @property
    def state(self) -> ManagerState:
        return self.lifecycle.state

    # Types

    def register_type(self, name: str, validate: Callable[[Any], bool]):
        """
        Register a type and its validator.

        Re-registering a name replaces the previous validator.

        Raises:
            ValidationError: If name is empty, not a string or reserved, or
                validate is not callable
        """
        if name == DEFAULT_LOGGER_TYPE:
            raise ValidationError(f"type name is reserved: {name}")
        with self._lock:
            self._types.register(name, validate)

    def get_type(self, name: str) -> Optional[Callable[[Any], bool]]:
        """Get the validator registered for a type name, or None."""
        require_name(name, "type name")
        return self._types.get(name)

    # Components

    def register(self, name: str, type_name: str, instance: Any = _MISSING):
        """
        Register a component instance under a name and type.

        The type's validator must accept the instance. Dependencies are read
        from the instance's ``get_dependencies()`` or ``dependencies``
        attribute, if present. Registering an existing name replaces its
        record.

        Raises:
            ValidationError: For a bad name, a non-string type name, a missing
                instance or malformed dependency declarations
            RegistrationError: For an unknown type or an instance the type's
                validator rejects
        """
        require_name(name, "component name")
        require_name(type_name, "type name")
        if instance is _MISSING or instance is None:
            raise ValidationError(f"component '{name}' registered without an instance")

        with self._lock:
            record = self._build_record(name, type_name, instance)

            if name in self._components:
                self.logger.warning(f"Component '{name}' already registered, overriding")

            self._components[name] = record
            self.logger.info(f"Registered component: {name} ({type_name})")

    def _build_record(self, name: str, type_name: str, instance: Any) -> ComponentRecord:
        validate = self._types.get(type_name)
        if validate is None:
            raise RegistrationError(type_name, f"unknown type for component '{name}': {type_name}")

        try:
            valid = validate(instance)
        except Exception as e:
            raise RegistrationError(
                type_name, f"validator for type '{type_name}' raised: {e}"
            ) from e
        if not valid:
            self.logger.error(f"Component '{name}' rejected by type '{type_name}'")
            raise RegistrationError(type_name)

        dependencies = self._declared_dependencies(name, instance)
        return ComponentRecord(name, type_name, instance, dependencies)

    def _declared_dependencies(self, name: str, instance: Any) -> List[str]:
        getter = getattr(instance, "get_dependencies", None)
        declared = getter() if callable(getter) else getattr(instance, "dependencies", None)
        if declared is None:
            return []
        if isinstance(declared, str):
            raise ValidationError(f"dependencies of '{name}' must be a list of names, not a string")

        try:
            declared = list(declared)
        except TypeError:
            raise ValidationError(f"dependencies of '{name}' are not iterable: {declared!r}")

        dependencies = []
        for dependency in declared:
            require_name(dependency, f"dependency of '{name}'")
            if dependency not in dependencies:
                dependencies.append(dependency)
        return dependencies

    def add_dependency(self, name: str, dependency: str):
        """
        Declare a dependency edge on an already registered component.

        Raises:
            ValidationError: For bad names or an unregistered component
        """
        require_name(name, "component name")
        require_name(dependency, "dependency name")
        with self._lock:
            record = self._components.get(name)
            if record is None:
                raise ValidationError(f"no such component: {name}")
            if not record.add_dependency(dependency):
                self.logger.debug(f"'{name}' already depends on '{dependency}'")

    def get(self, name: str) -> Any:
        """Get a component instance by name, or None if it is not registered."""
        require_name(name, "component name")
        record = self._components.get(name)
        return record.instance if record else None

    def get_record(self, name: str) -> Optional[ComponentRecord]:
        require_name(name, "component name")
        return self._components.get(name)

    def list_components(self) -> List[str]:
        """List registered component names in registration order."""
        return list(self._components)

    # Configuration

    def config(self, name: str, feature: str = None, *args, **kwargs) -> Any:
        """
        Pass a configuration request to a component's ``config`` hook.

        Returns:
            Whatever the component's hook returns

        Raises:
            ValidationError: For a bad or unknown component name, or a missing
                feature
            ConfigurationError: If the component has no ``config`` hook, or
                the hook rejects the request
        """
        require_name(name, "component name")
        with self._lock:
            record = self._components.get(name)
            if record is None:
                raise ValidationError(f"no such component: {name}")
            require_name(feature, "feature")

            hook = record.hook("config")
            if hook is None:
                raise ConfigurationError(f"component does not support configuration: {name}")

            self.logger.debug(f"Configuring {name}: {feature}")
            return hook(feature, *args, **kwargs)

    # Lifecycle

    def init(self):
        """
        Register the default logger, then initialize every component in
        dependency order.

        Raises:
            DependencyError: For a missing dependency or a cycle
            LifecycleError: If called while init or shutdown is running
            Exception: Whatever a component's init hook raised
        """
        with self._lock:
            self.lifecycle.check_idle("init")
            self._register_default_logger()
            self.lifecycle.initialize_all()

    def _register_default_logger(self):
        settings = self.settings.default_logger
        if settings.name in self._components:
            return

        instance = DefaultLogger(level=settings.level, source=settings.source)
        record = ComponentRecord(settings.name, DEFAULT_LOGGER_TYPE, instance, [])

        # Put the logger first so it initializes ahead of user components
        others = list(self._components.items())
        self._components.clear()
        self._components[settings.name] = record
        self._components.update(others)
        self.logger.debug(f"Registered default logger as '{settings.name}'")

    def shutdown(self):
        """
        Shut down ready components in reverse initialization order.

        Raises:
            ShutdownError: After the pass, if any shutdown hook raised
            LifecycleError: If called while init or shutdown is running
        """
        with self._lock:
            self.lifecycle.shutdown_all()

    def clear(self):
        """Forget every type and component and return to UNINITIALIZED."""
        with self._lock:
            self.lifecycle.check_idle("clear")
            self._types.clear()
            self._components.clear()
            self.lifecycle.reset()
            self.logger.debug("Component manager cleared")

    # Introspection

    def get_initialization_order(self) -> List[str]:
        """The last successfully computed initialization order."""
        return list(self.lifecycle.order)

    def get_dependents(self, name: str) -> Set[str]:
        """Components that transitively depend on ``name``."""
        require_name(name, "component name")
        with self._lock:
            self.lifecycle.dependency_graph.build_graph()
            return self.lifecycle.dependency_graph.get_dependents(name)

    def get_required_components(self, name: str) -> Set[str]:
        """Components ``name`` transitively depends on."""
        require_name(name, "component name")
        with self._lock:
            self.lifecycle.dependency_graph.build_graph()
            return self.lifecycle.dependency_graph.get_required_components(name)

    def get_status(self) -> Dict[str, Any]:
        """
        Get status information for the manager and every component.

        Returns:
            Dictionary with the manager state, registered types, the last
            initialization order and per-component status
        """
        return {
            "state": self.state.value,
            "types": self._types.names(),
            "initialization_order": self.get_initialization_order(),
            "components": {
                name: record.get_status()
                for name, record in self._components.items()
            },
        }
