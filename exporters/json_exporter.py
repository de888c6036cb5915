"""JSON and YAML exporters for include graphs (machine-friendly formats)."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from graph.model import IncludeGraph


def graph_to_dict(
    graph: IncludeGraph,
    root: Path,
    base: Optional[Path] = None,
    include_missing: bool = True,
    include_system: bool = True,
) -> Dict[str, Any]:
    """
    Convert an include graph to plain data.

    Args:
        graph: The include graph to export.
        root: Directory used for relative paths.
        base: Optional base path for relative path display.
        include_missing: If True, include files that could not be opened.
        include_system: If True, include angle-bracket includes.

    Returns:
        Dict with "root", "nodes", "edges" and, when enabled, "system".
    """
    if base is None:
        base = root

    nodes: List[str] = []
    for node in sorted(graph.nodes):
        if include_missing or not graph.is_missing(node):
            nodes.append(_get_path_str(node, base, root))

    edges: List[Dict[str, Any]] = []
    for source, target in graph.iter_edges():
        missing = graph.is_missing(target)
        if missing and not include_missing:
            continue
        edge: Dict[str, Any] = {
            "source": _get_path_str(source, base, root),
            "target": _get_path_str(target, base, root),
        }
        if missing:
            edge["missing"] = True
        edges.append(edge)

    data: Dict[str, Any] = {
        "root": _get_path_str(graph.root, base, root) if graph.root is not None else None,
        "nodes": nodes,
        "edges": edges,
    }

    if include_system:
        data["system"] = [
            {"source": _get_path_str(source, base, root), "target": target}
            for source, target in graph.iter_system()
        ]

    return data


def to_json(
    graph: IncludeGraph,
    root: Path,
    base: Optional[Path] = None,
    indent: int = 2,
    include_missing: bool = True,
    include_system: bool = True,
) -> str:
    """Convert an include graph to a JSON document."""
    data = graph_to_dict(graph, root, base, include_missing, include_system)
    return json.dumps(data, indent=indent)


def to_yaml(
    graph: IncludeGraph,
    root: Path,
    base: Optional[Path] = None,
    include_missing: bool = True,
    include_system: bool = True,
) -> str:
    """Convert an include graph to a YAML document."""
    data = graph_to_dict(graph, root, base, include_missing, include_system)
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


def _get_path_str(path: Path, base: Path, root: Path) -> str:
    """Get the string representation of a path."""
    try:
        rel_path = path.resolve().relative_to(base.resolve())
        return str(rel_path).replace("\\", "/")
    except ValueError:
        try:
            rel_path = path.resolve().relative_to(root.resolve())
            return str(rel_path).replace("\\", "/")
        except ValueError:
            return str(path).replace("\\", "/")
