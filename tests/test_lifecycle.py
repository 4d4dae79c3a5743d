"""
Tests for dependency ordering and the init/shutdown lifecycle.
"""

import pytest

from component_registry import (
    CircularDependencyError,
    Component,
    ComponentState,
    DEFAULT_LOGGER_TYPE,
    DefaultLogger,
    DependencyError,
    LifecycleError,
    ManagerState,
    ShutdownError,
    has_capabilities,
)


def init_calls(calls):
    return [name for hook, name in calls if hook == "init"]


def shutdown_calls(calls):
    return [name for hook, name in calls if hook == "shutdown"]


class TestOrdering:
    """Test dependency graph ordering."""

    def test_can_init_and_shutdown_empty(self, manager):
        manager.init()
        manager.shutdown()
        assert manager.state == ManagerState.STOPPED

    def test_shutdown_before_init(self, manager):
        manager.shutdown()
        assert manager.state == ManagerState.STOPPED

    def test_linear_chain(self, typed_manager, make_component, calls):
        """A -> B -> C initializes C, then B, then A."""
        make_component("A", "B")
        make_component("B", "C")
        make_component("C")

        typed_manager.init()

        assert init_calls(calls) == ["C", "B", "A"]
        assert typed_manager.get_initialization_order() == ["logger", "C", "B", "A"]
        assert typed_manager.state == ManagerState.RUNNING
        for name in ("A", "B", "C", "logger"):
            assert typed_manager.get_record(name).state == ComponentState.READY

    def test_dependencies_visited_in_declaration_order(self, typed_manager, make_component, calls):
        make_component("X", "Z", "Y")
        make_component("Y")
        make_component("Z")

        typed_manager.init()

        assert init_calls(calls) == ["Z", "Y", "X"]

    def test_roots_visited_in_registration_order(self, typed_manager, make_component, calls):
        make_component("b")
        make_component("a")
        make_component("c", "a")

        typed_manager.init()

        assert init_calls(calls) == ["b", "a", "c"]

    def test_order_is_repeatable(self, typed_manager, make_component):
        make_component("A", "B", "C")
        make_component("B", "D")
        make_component("C", "D")
        make_component("D")

        graph = typed_manager.lifecycle.dependency_graph
        first = graph.get_initialization_order()
        second = graph.get_initialization_order()

        assert first == second == ["D", "B", "C", "A"]

    def test_missing_dependency(self, typed_manager, make_component, calls):
        make_component("A", "B")

        with pytest.raises(DependencyError) as excinfo:
            typed_manager.init()

        assert str(excinfo.value) == "'A' cannot find dependency 'B'"
        assert excinfo.value.component_name == "A"
        assert excinfo.value.dependency_name == "B"
        assert init_calls(calls) == []
        assert typed_manager.state == ManagerState.FAILED
        assert typed_manager.get_record("A").state == ComponentState.REGISTERED

    def test_cycle(self, typed_manager, make_component, calls):
        make_component("A", "B")
        make_component("B", "C")
        make_component("C", "A")

        with pytest.raises(CircularDependencyError) as excinfo:
            typed_manager.init()

        assert str(excinfo.value) == "Dependency Cycle Found: A -> B -> C -> A"
        assert excinfo.value.dependency_chain == ["A", "B", "C", "A"]
        assert init_calls(calls) == []

    def test_cycle_reported_from_first_repeated_node(self, typed_manager, make_component):
        make_component("root", "A")
        make_component("A", "B")
        make_component("B", "A")

        with pytest.raises(DependencyError, match="^Dependency Cycle Found: A -> B -> A$"):
            typed_manager.init()

    def test_self_dependency(self, typed_manager, make_component):
        make_component("A", "A")

        with pytest.raises(CircularDependencyError, match="A -> A"):
            typed_manager.init()

    def test_dependency_on_default_logger(self, typed_manager, make_component, calls):
        make_component("server", "logger")

        typed_manager.init()

        assert typed_manager.get_initialization_order() == ["logger", "server"]
        assert init_calls(calls) == ["server"]

    def test_transitive_queries(self, typed_manager, make_component):
        make_component("A", "B")
        make_component("B", "C")
        make_component("C")
        make_component("D")

        assert typed_manager.get_dependents("C") == {"A", "B"}
        assert typed_manager.get_required_components("A") == {"B", "C"}
        assert typed_manager.get_dependents("D") == set()
        assert typed_manager.get_required_components("missing") == set()


class TestInit:
    """Test init pass semantics."""

    def test_components_without_hooks_become_ready(self, typed_manager):
        typed_manager.register("plain", "test-type", {})
        typed_manager.init()
        assert typed_manager.get_record("plain").state == ComponentState.READY

    def test_init_runs_hooks_once(self, typed_manager, make_component, calls):
        make_component("A")

        typed_manager.init()
        typed_manager.init()

        assert init_calls(calls) == ["A"]

    def test_late_registration_is_initialized_on_next_init(self, typed_manager, make_component, calls):
        make_component("A")
        typed_manager.init()
        make_component("B", "A")
        typed_manager.init()

        assert init_calls(calls) == ["A", "B"]

    def test_failing_hook_is_fail_fast(self, typed_manager, make_component, calls):
        """Earlier components stay ready; the failed one and its dependents fail."""
        make_component("D")
        make_component("A", "B")
        make_component("B", "C")
        make_component("C").fail_init = True
        make_component("E")

        with pytest.raises(RuntimeError, match="C init failed"):
            typed_manager.init()

        assert init_calls(calls) == ["D", "C"]
        assert typed_manager.state == ManagerState.FAILED
        states = {name: typed_manager.get_record(name).state for name in "ABCDE"}
        assert states == {
            "A": ComponentState.FAILED,
            "B": ComponentState.FAILED,
            "C": ComponentState.FAILED,
            "D": ComponentState.READY,
            "E": ComponentState.REGISTERED,
        }

    def test_ready_components_still_served_after_failure(self, typed_manager, make_component):
        ready = make_component("D")
        make_component("C").fail_init = True

        with pytest.raises(RuntimeError):
            typed_manager.init()

        assert typed_manager.get("D") is ready
        assert typed_manager.config("D", "feature", 1) == "feature"
        assert ready.settings == {"feature": (1,)}

    def test_failed_component_not_reinitialized(self, typed_manager, make_component, calls):
        make_component("C").fail_init = True

        with pytest.raises(RuntimeError):
            typed_manager.init()
        typed_manager.init()

        assert init_calls(calls) == ["C"]
        assert typed_manager.get_record("C").state == ComponentState.FAILED

    def test_dependency_on_failed_component(self, typed_manager, make_component, calls):
        make_component("C").fail_init = True
        with pytest.raises(RuntimeError):
            typed_manager.init()

        make_component("E", "C")
        with pytest.raises(DependencyError, match="'E' dependency 'C' is not ready"):
            typed_manager.init()

        assert typed_manager.get_record("E").state == ComponentState.FAILED
        assert "E" not in init_calls(calls)

    def test_hooks_may_call_back_into_manager(self, typed_manager):
        class Configurer(Component):
            def init(self):
                typed_manager.config("logger", "set-level", "warn")

        typed_manager.register("configurer", "test-type", Configurer("configurer"))
        typed_manager.init()

        assert typed_manager.config("logger", "get-level") == "warn"

    def test_reentrant_init_rejected(self, typed_manager):
        class Reentrant(Component):
            def init(self):
                typed_manager.init()

        typed_manager.register("reentrant", "test-type", Reentrant("reentrant"))

        with pytest.raises(LifecycleError):
            typed_manager.init()
        assert typed_manager.get_record("reentrant").state == ComponentState.FAILED


class TestShutdown:
    """Test shutdown pass semantics."""

    def test_reverse_order(self, typed_manager, make_component, calls):
        make_component("A", "B")
        make_component("B", "C")
        make_component("C")

        typed_manager.init()
        typed_manager.shutdown()

        assert shutdown_calls(calls) == ["A", "B", "C"]
        assert typed_manager.state == ManagerState.STOPPED
        for name in ("A", "B", "C", "logger"):
            assert typed_manager.get_record(name).state == ComponentState.STOPPED

    def test_failing_hook_does_not_stop_pass(self, typed_manager, make_component, calls):
        make_component("A", "B")
        make_component("B", "C").fail_shutdown = True
        make_component("C")
        typed_manager.init()

        with pytest.raises(ShutdownError) as excinfo:
            typed_manager.shutdown()

        assert shutdown_calls(calls) == ["A", "B", "C"]
        assert [name for name, _ in excinfo.value.failures] == ["B"]
        assert isinstance(excinfo.value.failures[0][1], RuntimeError)
        assert typed_manager.get_record("B").state == ComponentState.FAILED
        assert typed_manager.get_record("A").state == ComponentState.STOPPED
        assert typed_manager.get_record("C").state == ComponentState.STOPPED

    def test_only_ready_components_are_stopped(self, typed_manager, make_component, calls):
        make_component("D")
        make_component("C").fail_init = True
        with pytest.raises(RuntimeError):
            typed_manager.init()

        typed_manager.shutdown()

        assert shutdown_calls(calls) == ["D"]
        assert typed_manager.get_record("C").state == ComponentState.FAILED

    def test_stopped_components_are_not_restarted(self, typed_manager, make_component, calls):
        make_component("A")
        typed_manager.init()
        typed_manager.shutdown()
        typed_manager.init()

        assert init_calls(calls) == ["A"]
        assert typed_manager.get_record("A").state == ComponentState.STOPPED


class TestDefaultLoggerRegistration:
    """Test the default logger added by init."""

    def test_exists_after_init(self, typed_manager):
        assert typed_manager.get("logger") is None
        typed_manager.init()
        assert isinstance(typed_manager.get("logger"), DefaultLogger)
        assert typed_manager.get_record("logger").type_name == DEFAULT_LOGGER_TYPE

    def test_user_logger_type_does_not_affect_default(self, typed_manager, make_component):
        typed_manager.register_type("logger", has_capabilities("write"))
        make_component("A", "logger")

        typed_manager.init()

        assert isinstance(typed_manager.get("logger"), DefaultLogger)
        assert typed_manager.get_record("A").state == ComponentState.READY
        assert typed_manager.get_type("logger") is not None

    def test_user_logger_is_kept(self, typed_manager):
        custom = object()
        typed_manager.register("logger", "test-type", custom)
        typed_manager.init()
        assert typed_manager.get("logger") is custom

    def test_status(self, typed_manager, make_component):
        make_component("A")
        typed_manager.init()

        status = typed_manager.get_status()

        assert status["state"] == "running"
        assert status["initialization_order"] == ["logger", "A"]
        assert status["components"]["A"]["state"] == "ready"
        assert status["components"]["A"]["capabilities"] == ["init", "shutdown", "config"]
        assert status["components"]["logger"]["capabilities"] == ["config"]
        assert set(status["types"]) == {"test-type"}
