"""Graph accumulator: collects components and edges into a MetadataGraph."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Dict, List

import networkx as nx

from .models import Component, Dependency, MetadataGraph

logger = logging.getLogger(__name__)


def placeholder_component(component_id: str) -> Component:
    """Minimal component for an edge endpoint that was never declared."""
    if ":" in component_id:
        component_type, name = component_id.split(":", 1)
        return Component(id=component_id, name=name or component_id, type=component_type or "Unknown")
    return Component(id=component_id, name=component_id, type="Unknown")


class GraphBuilder:
    """Append-only accumulator. The first registration of an id wins."""

    def __init__(self) -> None:
        self._components: Dict[str, Component] = {}
        self._dependencies: List[Dependency] = []

    def has_component(self, component_id: str) -> bool:
        return component_id in self._components

    def add_component(self, component: Component) -> None:
        if component.id in self._components:
            return
        self._components[component.id] = component

    def add_dependency(self, dependency: Dependency) -> None:
        for endpoint in (dependency.src, dependency.dst):
            if endpoint not in self._components:
                logger.debug("Synthesizing placeholder for %s", endpoint)
                self._components[endpoint] = placeholder_component(endpoint)
        self._dependencies.append(dependency)

    def build(self) -> MetadataGraph:
        return MetadataGraph(components=dict(self._components), dependencies=list(self._dependencies))

    def to_networkx(self) -> nx.MultiDiGraph:
        return graph_to_networkx(self.build())


def graph_to_networkx(graph: MetadataGraph) -> nx.MultiDiGraph:
    """Directed multigraph view; parallel edges between a pair are kept."""
    g = nx.MultiDiGraph()
    for component_id, component in graph.components.items():
        attrs = asdict(component)
        attrs.pop("id")
        g.add_node(component_id, **attrs)
    for dep in graph.dependencies:
        g.add_edge(dep.src, dep.dst, type=dep.type, weight=dep.weight, metadata=dict(dep.metadata))
    return g
