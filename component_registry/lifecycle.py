"""
Component Lifecycle Management.

This module provides the tools for driving component lifecycles:
- Initialization ordering based on declared dependencies
- Cycle and missing-dependency detection with readable error paths
- Fail-fast initialization and best-effort shutdown
"""

from typing import Dict, List, Mapping, Optional, Set

import networkx as nx

from component_registry.base import ComponentRecord, ComponentState, ManagerState
from component_registry.custom_logging import get_logger
from component_registry.exceptions import (
    CircularDependencyError,
    DependencyError,
    LifecycleError,
    ShutdownError,
)

# Traversal colours
_IN_PROGRESS = 1
_DONE = 2


class DependencyGraph:
    """
    Builds and analyzes the dependency graph for components.

    Nodes are component names; an edge ``a -> b`` means ``a`` depends on
    ``b``. Names that are declared as dependencies but never registered still
    appear as nodes, without a ``record`` attribute.
    """

    def __init__(self, records: Mapping[str, ComponentRecord]):
        """
        Initialize the dependency graph.

        Args:
            records: Component records keyed by name, in registration order
        """
        self.records = records
        self.logger = get_logger("dependency_graph")
        self.graph = nx.DiGraph()

    def build_graph(self):
        """Rebuild the graph from the current component records."""
        self.graph.clear()

        for name, record in self.records.items():
            self.graph.add_node(name, record=record)

        for name, record in self.records.items():
            for dependency in record.dependencies:
                self.graph.add_edge(name, dependency)

        self.logger.debug(
            f"Dependency graph built with {self.graph.number_of_nodes()} nodes "
            f"and {self.graph.number_of_edges()} edges"
        )

    def get_initialization_order(self) -> List[str]:
        """
        Compute the initialization order for all registered components.

        Depth-first, with dependencies visited in declaration order and roots
        in registration order, so the result is stable for a given set of
        registrations. A component always follows everything it depends on.

        Returns:
            List of component names, dependencies first

        Raises:
            DependencyError: If a dependency is not registered
            CircularDependencyError: If the dependencies form a cycle
        """
        self.build_graph()

        colour: Dict[str, int] = {}
        order: List[str] = []

        for root in self.records:
            if root in colour:
                continue

            colour[root] = _IN_PROGRESS
            path = [root]
            pending = [iter(self.graph.successors(root))]

            while pending:
                node = path[-1]
                for dependency in pending[-1]:
                    if dependency not in self.records:
                        self.logger.error(f"'{node}' cannot find dependency '{dependency}'")
                        raise DependencyError(node, dependency)

                    state = colour.get(dependency)
                    if state == _IN_PROGRESS:
                        chain = path[path.index(dependency):] + [dependency]
                        self.logger.error(f"Dependency cycle detected: {' -> '.join(chain)}")
                        raise CircularDependencyError(chain)

                    if state is None:
                        colour[dependency] = _IN_PROGRESS
                        path.append(dependency)
                        pending.append(iter(self.graph.successors(dependency)))
                        break
                else:
                    pending.pop()
                    path.pop()
                    colour[node] = _DONE
                    order.append(node)

        return order

    def get_dependents(self, name: str) -> Set[str]:
        """
        Get every registered component that transitively depends on a component.

        Args:
            name: Component name

        Returns:
            Set of component names
        """
        if name not in self.graph:
            return set()
        return {n for n in nx.ancestors(self.graph, name) if n in self.records}

    def get_required_components(self, name: str) -> Set[str]:
        """
        Get every component a component transitively depends on.

        Unregistered dependency names are included, since they are still
        requirements.
        """
        if name not in self.graph:
            return set()
        return set(nx.descendants(self.graph, name))


class LifecycleManager:
    """
    Drives init and shutdown passes over a set of component records.

    Owns the overall manager state and remembers the last successfully
    computed order so shutdown can run it in reverse.
    """

    def __init__(self, records: Mapping[str, ComponentRecord]):
        """
        Initialize the lifecycle manager.

        Args:
            records: Component records keyed by name, shared with the registry
        """
        self.records = records
        self.logger = get_logger("lifecycle_manager")
        self.dependency_graph = DependencyGraph(records)
        self.state = ManagerState.UNINITIALIZED
        self.order: List[str] = []

    def reset(self):
        self.dependency_graph.graph.clear()
        self.state = ManagerState.UNINITIALIZED
        self.order = []

    def check_idle(self, operation: str):
        if self.state in (ManagerState.INITIALIZING, ManagerState.SHUTTING_DOWN):
            raise LifecycleError(
                f"Cannot {operation} while manager is {self.state.value}"
            )

    def initialize_all(self):
        """
        Initialize all registered components in dependency order.

        Components that are not REGISTERED (already ready, failed or stopped)
        are skipped. The first failing init hook aborts the pass: that
        component and everything depending on it are marked FAILED, the
        manager is marked FAILED and the hook's exception propagates.
        Components initialized before the failure stay READY.

        Raises:
            DependencyError: If the order cannot be computed, or a dependency
                is not ready
            LifecycleError: If a pass is already running
        """
        self.check_idle("init")
        self.logger.info("Initializing all components in dependency order")
        self.state = ManagerState.INITIALIZING

        try:
            self.order = self.dependency_graph.get_initialization_order()
        except DependencyError:
            self.state = ManagerState.FAILED
            raise
        self.logger.debug(f"Initialization order: {self.order}")

        for name in self.order:
            record = self.records[name]
            if record.state != ComponentState.REGISTERED:
                continue

            for dependency in record.dependencies:
                dep_state = self.records[dependency].state
                if dep_state != ComponentState.READY:
                    self._fail(record)
                    raise DependencyError(
                        name, dependency,
                        f"'{name}' dependency '{dependency}' is not ready ({dep_state.value})"
                    )

            self._initialize(record)

        self.state = ManagerState.RUNNING
        self.logger.info(f"All components initialized ({len(self.order)})")

    def _initialize(self, record: ComponentRecord):
        record.state = ComponentState.INITIALIZING
        hook = record.hook("init")

        if hook is not None:
            self.logger.info(f"Initializing component: {record.name}")
            try:
                hook()
            except Exception:
                self.logger.exception(f"Error initializing component {record.name}")
                self._fail(record)
                raise

        record.state = ComponentState.READY

    def _fail(self, record: ComponentRecord):
        """Mark a component and its not-yet-initialized dependents as FAILED."""
        record.state = ComponentState.FAILED
        self.state = ManagerState.FAILED

        affected = []
        for name in self.dependency_graph.get_dependents(record.name):
            dependent = self.records[name]
            if dependent.state == ComponentState.REGISTERED:
                dependent.state = ComponentState.FAILED
                affected.append(name)

        if affected:
            self.logger.warning(
                f"Component {record.name} failed to initialize, "
                f"these components will be affected: {sorted(affected)}"
            )

    def shutdown_all(self):
        """
        Shut down READY components in reverse initialization order.

        Every hook is attempted even if an earlier one raises; failing
        components are marked FAILED and reported together afterwards.

        Raises:
            ShutdownError: If one or more shutdown hooks raised
            LifecycleError: If a pass is already running
        """
        self.check_idle("shutdown")
        self.logger.info("Shutting down all components in reverse dependency order")
        self.state = ManagerState.SHUTTING_DOWN

        shutdown_order = list(reversed(self.order))
        self.logger.debug(f"Shutdown order: {shutdown_order}")

        failures = []
        for name in shutdown_order:
            record: Optional[ComponentRecord] = self.records.get(name)
            if record is None or record.state != ComponentState.READY:
                continue

            hook = record.hook("shutdown")
            if hook is not None:
                self.logger.info(f"Stopping component: {name}")
                try:
                    hook()
                except Exception as e:
                    self.logger.exception(f"Error stopping component {name}")
                    record.state = ComponentState.FAILED
                    failures.append((name, e))
                    continue

            record.state = ComponentState.STOPPED

        self.state = ManagerState.STOPPED

        if failures:
            self.logger.error(f"Some components failed to stop: {[n for n, _ in failures]}")
            raise ShutdownError(failures)

        self.logger.info("All components stopped")
