"""
Component Registry Package.

This package registers named, typed components, orders them by their declared
dependencies and drives their init and shutdown hooks.

Core components:
- ComponentManager: registry, configuration dispatch and lifecycle entry point
- Component: optional base class with dependency declaration
- DependencyGraph / LifecycleManager: ordering and lifecycle passes
- DefaultLogger: the built-in, level-gated logger component
"""

from .base import (
    Component,
    ComponentRecord,
    ComponentState,
    ManagerState,
    TypeDescriptor,
    TypeRegistry,
)

from .manager import (
    ComponentManager,
    DEFAULT_LOGGER_TYPE,
)

from .decorators import (
    requires,
    inject,
)

from .lifecycle import (
    DependencyGraph,
    LifecycleManager,
)

from .components import DefaultLogger

from .validators import (
    always_valid,
    has_capabilities,
    is_instance_of,
)

from .exceptions import (
    ComponentRegistryError,
    ValidationError,
    RegistrationError,
    DependencyError,
    CircularDependencyError,
    ConfigurationError,
    InvalidLevelError,
    LifecycleError,
    ShutdownError,
)

__all__ = [
    # Base classes
    'Component',
    'ComponentRecord',
    'ComponentState',
    'ManagerState',
    'TypeDescriptor',
    'TypeRegistry',

    # Manager
    'ComponentManager',
    'DEFAULT_LOGGER_TYPE',

    # Decorators
    'requires',
    'inject',

    # Lifecycle management
    'DependencyGraph',
    'LifecycleManager',

    # Components
    'DefaultLogger',

    # Validators
    'always_valid',
    'has_capabilities',
    'is_instance_of',

    # Exceptions
    'ComponentRegistryError',
    'ValidationError',
    'RegistrationError',
    'DependencyError',
    'CircularDependencyError',
    'ConfigurationError',
    'InvalidLevelError',
    'LifecycleError',
    'ShutdownError',
]
