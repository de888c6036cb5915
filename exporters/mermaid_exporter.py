"""Mermaid flowchart exporter for include graphs."""

import re
from pathlib import Path
from typing import Dict, List, Optional, Set

from graph.model import IncludeGraph


MISSING_STYLE = "stroke:#ff0000,stroke-dasharray: 5 5"
SYSTEM_STYLE = "stroke:#0066cc,stroke-dasharray: 5 5"


def to_mermaid(
    graph: IncludeGraph,
    root: Path,
    orientation: str = "LR",
    base: Optional[Path] = None,
    group_by_directory: bool = False,
    include_missing: bool = True,
    include_system: bool = True,
) -> str:
    """
    Convert an include graph to Mermaid flowchart syntax.

    Args:
        graph: The include graph to export.
        root: Directory used for relative paths.
        orientation: Flowchart orientation (LR, TD, TB, RL, BT).
        base: Optional base path for relative path display.
        group_by_directory: If True, group nodes by top-level directory.
        include_missing: If True, show includes whose file could not be opened.
        include_system: If True, show angle-bracket includes.

    Returns:
        Mermaid flowchart string.
    """
    if base is None:
        base = root

    lines = [f"flowchart {orientation}"]

    nodes = sorted(n for n in graph.nodes if include_missing or not graph.is_missing(n))
    taken: Set[str] = set()
    node_ids: Dict[Path, str] = {}
    for node in nodes:
        node_ids[node] = _unique_id(_sanitize_id(node, root), taken)

    system_ids: Dict[str, str] = {}
    if include_system:
        for _, target in graph.iter_system():
            if target not in system_ids:
                system_ids[target] = _unique_id(_sanitize_id_simple(f"system_{target}"), taken)

    if group_by_directory:
        lines.extend(_grouped_node_lines(graph, nodes, base, node_ids, taken))
    else:
        lines.extend(_flat_node_lines(graph, nodes, base, node_ids))

    if system_ids:
        lines.append("")
        lines.append("    %% System includes")
        for target in sorted(system_ids):
            system_id = system_ids[target]
            lines.append(f'    {system_id}["&lt;{target}&gt; [SYSTEM]"]')
            lines.append(f"    style {system_id} {SYSTEM_STYLE}")

    lines.append("")
    for source, target in graph.iter_edges():
        if source in node_ids and target in node_ids:
            arrow = "-.->" if graph.is_missing(target) else "-->"
            lines.append(f"    {node_ids[source]} {arrow} {node_ids[target]}")

    for source, target in graph.iter_system():
        if source in node_ids and target in system_ids:
            lines.append(f"    {node_ids[source]} -.-> {system_ids[target]}")

    return "\n".join(lines)


def _node_line(graph: IncludeGraph, node: Path, node_id: str, base: Path, indent: str) -> List[str]:
    label = _get_label(node, base)
    if not graph.is_missing(node):
        return [f'{indent}{node_id}["{label}"]']
    return [
        f'{indent}{node_id}["{label} [MISSING]"]',
        f"{indent}style {node_id} {MISSING_STYLE}",
    ]


def _flat_node_lines(
    graph: IncludeGraph,
    nodes: List[Path],
    base: Path,
    node_ids: Dict[Path, str],
) -> List[str]:
    """Generate flat (non-grouped) node definitions."""
    lines: List[str] = []
    for node in nodes:
        lines.extend(_node_line(graph, node, node_ids[node], base, "    "))
    return lines


def _grouped_node_lines(
    graph: IncludeGraph,
    nodes: List[Path],
    base: Path,
    node_ids: Dict[Path, str],
    taken: Set[str],
) -> List[str]:
    """Generate node definitions in subgraphs grouped by top-level directory."""
    lines: List[str] = []

    groups: Dict[str, Set[Path]] = {}
    for node in nodes:
        try:
            rel_path = node.resolve().relative_to(base.resolve())
            top_dir = rel_path.parts[0] if len(rel_path.parts) > 1 else "root"
        except ValueError:
            top_dir = "external"
        groups.setdefault(top_dir, set()).add(node)

    for group_name in sorted(groups):
        subgraph_id = _unique_id(_sanitize_id_simple(f"dir_{group_name}"), taken)
        lines.append(f"    subgraph {subgraph_id}[{group_name}]")
        for node in sorted(groups[group_name]):
            lines.extend(_node_line(graph, node, node_ids[node], base, "        "))
        lines.append("    end")

    return lines


def _sanitize_id(path: Path, root: Path) -> str:
    """
    Convert a file path to a valid Mermaid node ID.

    Mermaid IDs can only contain letters, digits, and underscores.
    """
    try:
        rel_path = path.resolve().relative_to(root.resolve())
    except ValueError:
        rel_path = path

    return _sanitize_id_simple(str(rel_path))


def _unique_id(candidate: str, taken: Set[str]) -> str:
    """
    Return ``candidate``, or ``candidate_<n>`` if it is already taken.

    Sanitizing is lossy (``a-b.h`` and ``a_b.h`` both become ``a_b_h``), so
    distinct files need a suffix to stay distinct nodes.
    """
    node_id = candidate
    counter = 2
    while node_id in taken:
        node_id = f"{candidate}_{counter}"
        counter += 1
    taken.add(node_id)
    return node_id


def _sanitize_id_simple(value: str) -> str:
    """Sanitize a string to be a valid Mermaid ID."""
    sanitized = re.sub(r"[/\\.\-]", "_", value)
    sanitized = re.sub(r"[^a-zA-Z0-9_]", "", sanitized)
    if sanitized and not sanitized[0].isalpha():
        sanitized = "n_" + sanitized
    return sanitized or "unknown"


def _get_label(path: Path, root: Path) -> str:
    """Get the display label for a node."""
    try:
        rel_path = path.resolve().relative_to(root.resolve())
        return str(rel_path).replace("\\", "/")
    except ValueError:
        return str(path).replace("\\", "/")
