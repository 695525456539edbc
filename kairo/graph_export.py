"""Graph export helpers for JSON and DOT outputs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from .graph import graph_to_networkx
from .models import AnalysisResult, Component, Dependency, MetadataGraph
from .weights import categorize, effective_weight


def component_to_dict(component: Component) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": component.id,
        "name": component.name,
        "type": component.type,
    }
    if component.file_path is not None:
        payload["filePath"] = component.file_path
    for key in ("label", "description", "namespace"):
        value = getattr(component, key)
        if value is not None:
            payload[key] = value
    return payload


def dependency_to_dict(dependency: Dependency) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "from": dependency.src,
        "to": dependency.dst,
        "type": dependency.type,
    }
    if dependency.weight is not None:
        payload["weight"] = dependency.weight
    if dependency.metadata:
        payload["metadata"] = dict(dependency.metadata)
    return payload


def result_to_dict(result: AnalysisResult) -> Dict[str, Any]:
    """Plain, JSON-encodable form of an analysis result."""
    return {
        "graph": {
            "components": [component_to_dict(c) for c in result.graph.components.values()],
            "dependencies": [dependency_to_dict(d) for d in result.graph.dependencies],
        },
        "stats": {
            "totalComponents": result.stats.total_components,
            "componentsByType": dict(result.stats.components_by_type),
            "totalDependencies": result.stats.total_dependencies,
        },
    }


def export_json(result: AnalysisResult, output_file: Path, focus: str = "") -> None:
    payload = result_to_dict(result)
    if focus:
        selected = _focused_subgraph(result.graph, focus)
        payload["graph"] = {
            "components": [component_to_dict(result.graph.components[i]) for i in selected["nodes"]],
            "dependencies": [dependency_to_dict(d) for d in selected["edges"]],
        }
    output_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def export_dot(result: AnalysisResult, output_file: Path, focus: str = "") -> None:
    graph = result.graph
    selected = _focused_subgraph(graph, focus)

    lines = ["digraph Kairo {"]
    lines.append("  rankdir=LR;")

    for node_id in selected["nodes"]:
        component = graph.components[node_id]
        label = f"{component.type}\\n{component.name}"
        lines.append(f'  "{_esc(node_id)}" [label="{_esc(label)}"];')

    for edge in selected["edges"]:
        weight = effective_weight(edge)
        label = f"{edge.type} ({weight}, {categorize(weight)})"
        lines.append(
            f'  "{_esc(edge.src)}" -> "{_esc(edge.dst)}" [label="{_esc(label)}", weight={weight}];'
        )

    lines.append("}")
    output_file.write_text("\n".join(lines), encoding="utf-8")


def _focused_subgraph(graph: MetadataGraph, focus: str) -> Dict[str, List]:
    nodes = graph.components
    edges = graph.dependencies
    if not focus:
        return {"nodes": list(nodes.keys()), "edges": list(edges)}

    focus_ids = {
        node_id
        for node_id, component in nodes.items()
        if focus in node_id or focus in component.name
    }

    if not focus_ids:
        return {"nodes": list(nodes.keys()), "edges": list(edges)}

    view = graph_to_networkx(graph)
    node_subset = set(focus_ids)
    for node_id in focus_ids:
        node_subset.update(view.predecessors(node_id))
        node_subset.update(view.successors(node_id))
    edge_subset = [e for e in edges if e.src in focus_ids or e.dst in focus_ids]
    return {"nodes": sorted(node_subset), "edges": edge_subset}


def _esc(text: str) -> str:
    return text.replace('"', '\\"')
