"""
Collection dependency resolution.

Builds the "depends on" graph between collections from the alias strings
in their variables, then orders collections so every collection comes
after the collections it references. Circular dependencies are fatal.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from . import ir
from .errors import CircularDependencyError, StructuralError

_UNVISITED = 0
_IN_PROGRESS = 1
_DONE = 2


@dataclass
class DependencyGraph:
    """
    Directed graph over collection names.

    ``edges[A]`` lists the collections A's aliases point into, in the
    order they were first seen. Edge targets may name collections that
    are not part of the batch; those surface later as unresolved aliases.
    """

    nodes: list[str] = field(default_factory=list)
    edges: dict[str, list[str]] = field(default_factory=dict)

    def add_edge(self, source: str, target: str) -> None:
        targets = self.edges.setdefault(source, [])
        if target not in targets:
            targets.append(target)

    def dependencies(self, name: str) -> list[str]:
        return self.edges.get(name, [])

    def edge_list(self) -> list[tuple[str, str]]:
        return [(source, target) for source in self.nodes for target in self.dependencies(source)]

    def dangling(self) -> list[tuple[str, str]]:
        """Edges whose target is not a collection in this batch."""
        known = set(self.nodes)
        return [(source, target) for source, target in self.edge_list() if target not in known]


def referenced_collection(raw: ir.RawValue) -> str | None:
    """
    Collection name an alias-looking value points into.

    Purely syntactic: ``"{Brand.Gray.90}"`` -> ``"Brand"``. Values that do
    not start with ``{`` reference nothing.
    """
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not text.startswith("{"):
        return None
    inner = text[1:]
    if inner.endswith("}"):
        inner = inner[:-1]
    name = inner.partition(".")[0].strip()
    return name or None


def build_dependency_graph(collections: list[ir.CollectionDefinition]) -> DependencyGraph:
    """
    Scan every mode value of every variable for cross-collection aliases.

    Args:
        collections: Collection definitions in input order

    Returns:
        DependencyGraph with one node per collection
    """
    graph = DependencyGraph(nodes=[collection.name for collection in collections])
    for collection in collections:
        graph.edges.setdefault(collection.name, [])
        for variable in collection.variables.values():
            for mode_name, raw in variable.values.items():
                if mode_name in ir.METADATA_KEYS:
                    continue
                target = referenced_collection(raw)
                if target is not None and target != collection.name:
                    graph.add_edge(collection.name, target)
    return graph


def topological_sort(
    collections: list[ir.CollectionDefinition],
    graph: DependencyGraph | None = None,
) -> list[ir.CollectionDefinition]:
    """
    Order collections so dependencies come before dependents.

    Depth-first from each collection in input order with three-state
    marking; ties keep input order, so the output is deterministic.

    Args:
        collections: Collection definitions in input order
        graph: Prebuilt graph; built from ``collections`` when omitted

    Returns:
        Collections in dependency order (dependencies first)

    Raises:
        CircularDependencyError: If any collections alias into each other in a cycle
        StructuralError: If two collections share a name
    """
    by_name: dict[str, ir.CollectionDefinition] = {}
    for collection in collections:
        if collection.name in by_name:
            raise StructuralError(
                f"Duplicate collection name '{collection.name}' in batch. "
                "Each collection must be declared once."
            )
        by_name[collection.name] = collection

    if graph is None:
        graph = build_dependency_graph(collections)

    state = dict.fromkeys(by_name, _UNVISITED)
    ordered: list[ir.CollectionDefinition] = []

    for root in by_name:
        if state[root] != _UNVISITED:
            continue
        state[root] = _IN_PROGRESS
        stack = [(root, iter(graph.dependencies(root)))]
        while stack:
            name, pending = stack[-1]
            descended = False
            for dependency in pending:
                if dependency not in by_name:
                    continue
                if state[dependency] == _IN_PROGRESS:
                    raise CircularDependencyError(dependency)
                if state[dependency] == _UNVISITED:
                    state[dependency] = _IN_PROGRESS
                    stack.append((dependency, iter(graph.dependencies(dependency))))
                    descended = True
                    break
            if not descended:
                stack.pop()
                state[name] = _DONE
                ordered.append(by_name[name])

    return ordered


@dataclass
class CollectionPlan:
    """Dependency edges and processing order, computed without a store."""

    graph: DependencyGraph
    order: list[str]


def plan_collections(collections: list[ir.CollectionDefinition]) -> CollectionPlan:
    """Build the graph and sort it. Raises on cycles like ``topological_sort``."""
    graph = build_dependency_graph(collections)
    ordered = topological_sort(collections, graph)
    return CollectionPlan(graph=graph, order=[collection.name for collection in ordered])
