"""
Component Registry Decorators.

This module provides decorators for declaring component dependencies and
injecting registered components into functions.
"""

from functools import wraps
from typing import Callable, Type, TypeVar

T = TypeVar('T')


def requires(*component_names: str):
    """
    Decorator for declaring component dependencies on a class.

    The class must provide ``add_dependency`` (e.g. by inheriting from
    Component). Dependencies are added after the original ``__init__`` runs.

    Example:
        @requires("logger", "store")
        class Server(Component):
            ...
    """
    def decorator(cls: Type[T]) -> Type[T]:
        if not callable(getattr(cls, "add_dependency", None)):
            raise TypeError(f"{cls.__name__} must provide add_dependency() to use @requires")

        original_init = cls.__init__

        @wraps(original_init)
        def new_init(self, *args, **kwargs):
            original_init(self, *args, **kwargs)
            for component_name in component_names:
                self.add_dependency(component_name)

        cls.__init__ = new_init
        return cls

    return decorator


def inject(manager, *component_names: str):
    """
    Decorator for injecting registered components into a function.

    Each named component is passed as a keyword argument (hyphens become
    underscores) unless the caller supplied it or it is not registered.

    Example:
        @inject(manager, "logger")
        def report(logger=None):
            logger.info("ready")
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            for component_name in component_names:
                key = component_name.replace("-", "_")
                if key not in kwargs:
                    component = manager.get(component_name)
                    if component is not None:
                        kwargs[key] = component
            return func(*args, **kwargs)

        return wrapper

    return decorator
