"""ASCII tree-style exporter for include graphs."""

from pathlib import Path
from typing import List, Optional, Set, Tuple

from graph.model import IncludeGraph


# Unicode tree characters
UNICODE_BRANCH = "├── "
UNICODE_LAST = "└── "
UNICODE_VERTICAL = "│   "
UNICODE_SPACE = "    "

# ASCII fallback characters
ASCII_BRANCH = "|-- "
ASCII_LAST = "\\-- "
ASCII_VERTICAL = "|   "
ASCII_SPACE = "    "


def to_ascii(
    graph: IncludeGraph,
    root: Path,
    base: Optional[Path] = None,
    style: str = "tree",
    include_missing: bool = True,
    include_system: bool = True,
) -> str:
    """
    Convert an include graph to ASCII tree representation.

    Each file is expanded once, at its first position in include order, which
    is where the trace opened it. Later references are marked with [*].

    Args:
        graph: The include graph to export.
        root: Directory used for relative paths.
        base: Optional base path for relative path display.
        style: Output style - "tree" (Unicode) or "ascii" (pure ASCII).
        include_missing: If True, show includes whose file could not be opened.
        include_system: If True, show angle-bracket includes.

    Returns:
        ASCII tree string.
    """
    if base is None:
        base = root

    if style == "ascii":
        chars = (ASCII_BRANCH, ASCII_LAST, ASCII_VERTICAL, ASCII_SPACE)
    else:
        chars = (UNICODE_BRANCH, UNICODE_LAST, UNICODE_VERTICAL, UNICODE_SPACE)

    if graph.root is not None:
        root_nodes = [graph.root]
    else:
        root_nodes = sorted(graph.get_roots())
        # Every node is included by another one: the graph is one big cycle
        if not root_nodes:
            root_nodes = sorted(graph.nodes)

    lines: List[str] = []
    visited: Set[Path] = set()

    for i, root_node in enumerate(root_nodes):
        _render_tree(
            graph=graph,
            root_node=root_node,
            base=base,
            root=root,
            chars=chars,
            visited=visited,
            lines=lines,
            include_missing=include_missing,
            include_system=include_system,
        )

        if i < len(root_nodes) - 1:
            lines.append("")

    return "\n".join(lines)


# (node, system target, prefix, is_last, is_root); node is None for system rows
_Row = Tuple[Optional[Path], Optional[str], str, bool, bool]


def _render_tree(
    graph: IncludeGraph,
    root_node: Path,
    base: Path,
    root: Path,
    chars: Tuple[str, str, str, str],
    visited: Set[Path],
    lines: List[str],
    include_missing: bool = True,
    include_system: bool = True,
) -> None:
    """
    Render the tree below ``root_node`` in pre-order.

    Rows waiting to be printed sit on an explicit stack, so the depth of the
    include chain is not limited by the interpreter's recursion limit.

    Args:
        graph: The include graph.
        root_node: Node at the top of this tree.
        base: Base path for display.
        root: Directory used for relative paths.
        chars: Character set (branch, last, vertical, space).
        visited: Nodes already expanded anywhere in the output.
        lines: Output lines list (modified in place).
        include_missing: If True, show missing includes.
        include_system: If True, show angle-bracket includes.
    """
    branch, last, vertical, space = chars
    stack: List[_Row] = [(root_node, None, "", True, True)]

    while stack:
        node, system_target, prefix, is_last, is_root = stack.pop()
        connector = "" if is_root else (last if is_last else branch)

        if node is None:
            lines.append(f"{prefix}{connector}<{system_target}> [SYSTEM]")
            continue

        display_path = _get_display_path(node, base, root)
        if graph.is_missing(node):
            display_path += " [MISSING]"

        if node in visited:
            lines.append(f"{prefix}{connector}{display_path} [*]")
            continue

        lines.append(f"{prefix}{connector}{display_path}")
        visited.add(node)

        children = graph.get_targets(node)
        if not include_missing:
            children = [child for child in children if not graph.is_missing(child)]
        system_refs = graph.get_system(node) if include_system else []

        child_prefix = "" if is_root else prefix + (space if is_last else vertical)
        rows: List[_Row] = [(child, None, child_prefix, False, False) for child in children]
        rows.extend((None, target, child_prefix, False, False) for target in system_refs)
        if rows:
            final_node, final_target, final_prefix, _, _ = rows[-1]
            rows[-1] = (final_node, final_target, final_prefix, True, False)

        # Reversed so the first include is popped first
        stack.extend(reversed(rows))


def _get_display_path(node: Path, base: Path, root: Path) -> str:
    """Get the display path for a node."""
    try:
        rel_path = node.resolve().relative_to(base.resolve())
        return str(rel_path).replace("\\", "/")
    except ValueError:
        try:
            rel_path = node.resolve().relative_to(root.resolve())
            return str(rel_path).replace("\\", "/")
        except ValueError:
            return str(node).replace("\\", "/")
