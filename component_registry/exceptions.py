"""
Component Registry Exceptions.

This module defines the error taxonomy raised by the component manager.
"""


class ComponentRegistryError(Exception):
    """Base exception for all component registry errors."""
    pass


class ValidationError(ComponentRegistryError, TypeError):
    """Raised when a public operation receives malformed or missing arguments."""
    pass


class RegistrationError(ComponentRegistryError):
    """Raised when a component cannot be registered under its declared type."""
    def __init__(self, type_name, message=None):
        if not message:
            message = f"object not a valid type: {type_name}"
        super().__init__(message)
        self.type_name = type_name


class DependencyError(ComponentRegistryError):
    """Raised during init when a dependency cannot be resolved."""
    def __init__(self, component_name, dependency_name, message=None):
        if not message:
            message = f"'{component_name}' cannot find dependency '{dependency_name}'"
        super().__init__(message)
        self.component_name = component_name
        self.dependency_name = dependency_name


class CircularDependencyError(DependencyError):
    """Raised when a dependency cycle is detected."""
    def __init__(self, dependency_chain):
        chain_str = " -> ".join(dependency_chain)
        super().__init__(
            dependency_chain[-2],
            dependency_chain[-1],
            f"Dependency Cycle Found: {chain_str}"
        )
        self.dependency_chain = list(dependency_chain)


class ConfigurationError(ComponentRegistryError):
    """Raised when a component cannot be configured as requested."""
    pass


class InvalidLevelError(ValidationError, ConfigurationError):
    """Raised when a logger is configured with an unknown level."""
    def __init__(self, level):
        super().__init__(f"unknown level while configuring levels: {level!r}")
        self.level = level


class LifecycleError(ComponentRegistryError):
    """Raised when init or shutdown is requested while another pass is running."""
    pass


class ShutdownError(ComponentRegistryError):
    """Raised after a shutdown pass in which one or more hooks failed."""
    def __init__(self, failures):
        names = ", ".join(name for name, _ in failures)
        super().__init__(f"Component shutdown failed: {names}")
        self.failures = list(failures)
