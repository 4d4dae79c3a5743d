"""
Shared fixtures for component registry tests.
"""

import pytest

from component_registry import Component, ComponentManager, always_valid
from component_registry.config import RegistryConfig, reset_config


class RecordingComponent(Component):
    """Component that records its hook calls into a shared list."""

    def __init__(self, name, calls, *dependencies):
        super().__init__(name)
        self.calls = calls
        self.fail_init = False
        self.fail_shutdown = False
        self.settings = {}
        for dependency in dependencies:
            self.add_dependency(dependency)

    def init(self):
        self.calls.append(("init", self.name))
        if self.fail_init:
            raise RuntimeError(f"{self.name} init failed")

    def shutdown(self):
        self.calls.append(("shutdown", self.name))
        if self.fail_shutdown:
            raise RuntimeError(f"{self.name} shutdown failed")

    def config(self, feature, *args):
        self.settings[feature] = args
        return feature


@pytest.fixture(autouse=True)
def fresh_global_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def manager():
    cm = ComponentManager(RegistryConfig())
    cm.clear()
    return cm


@pytest.fixture
def typed_manager(manager):
    """Manager with an accept-anything "test-type" registered."""
    manager.register_type("test-type", always_valid)
    return manager


@pytest.fixture
def calls():
    return []


@pytest.fixture
def make_component(typed_manager, calls):
    """Factory that builds and registers a RecordingComponent."""
    def make(name, *dependencies, register=True):
        component = RecordingComponent(name, calls, *dependencies)
        if register:
            typed_manager.register(name, "test-type", component)
        return component
    return make
