"""
Ready-made validator predicates for register_type().
"""

from typing import Any, Callable


def always_valid(candidate: Any) -> bool:
    """Accept any value."""
    return True


def has_capabilities(*names: str) -> Callable[[Any], bool]:
    """
    Build a validator accepting values that expose every named callable.

    Example:
        manager.register_type("server", has_capabilities("init", "shutdown"))
    """
    def validate(candidate: Any) -> bool:
        return all(callable(getattr(candidate, name, None)) for name in names)

    validate.__name__ = f"has_capabilities({', '.join(names)})"
    return validate


def is_instance_of(*types: type) -> Callable[[Any], bool]:
    """Build a validator accepting instances of any of the given classes."""
    def validate(candidate: Any) -> bool:
        return isinstance(candidate, types)

    validate.__name__ = f"is_instance_of({', '.join(t.__name__ for t in types)})"
    return validate
