"""Graph data model for include relationships discovered by a trace."""

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Set, Tuple


class IncludeGraph:
    """
    A directed graph of include relationships.

    Nodes are file paths, and edges represent 'includer -> included' for quoted
    includes. Targets that could not be opened are tracked as missing and
    angle-bracket includes as system references. Edge targets keep the order
    in which the includes appear in the source.
    """

    def __init__(self, root: Optional[Path] = None):
        self.root = root
        self._nodes: Set[Path] = set()
        self._edges: Dict[Path, List[Path]] = {}
        self._missing: Set[Path] = set()
        self._system: Dict[Path, List[str]] = {}  # source -> angle-bracket targets
        if root is not None:
            self._nodes.add(root)

    @property
    def nodes(self) -> Set[Path]:
        """Return all nodes in the graph."""
        return self._nodes.copy()

    @property
    def edges(self) -> Dict[Path, List[Path]]:
        """Return adjacency list representation of edges."""
        return {k: list(v) for k, v in self._edges.items()}

    @property
    def missing(self) -> Set[Path]:
        """Return nodes whose file could not be opened."""
        return self._missing.copy()

    @property
    def system(self) -> Dict[Path, List[str]]:
        """Return system references (source -> angle-bracket targets)."""
        return {k: list(v) for k, v in self._system.items()}

    def add_node(self, node: Path) -> None:
        """Add a node to the graph."""
        self._nodes.add(node)

    def add_edge(self, source: Path, target: Path) -> None:
        """
        Add a directed edge from source to target.

        Both endpoints become nodes. Repeating an edge keeps its first position.
        """
        self._nodes.add(source)
        self._nodes.add(target)
        targets = self._edges.setdefault(source, [])
        if target not in targets:
            targets.append(target)

    def mark_missing(self, node: Path) -> None:
        """Record that the file for ``node`` could not be opened."""
        self._nodes.add(node)
        self._missing.add(node)

    def is_missing(self, node: Path) -> bool:
        return node in self._missing

    def add_system(self, source: Path, target: str) -> None:
        """
        Record an angle-bracket include.

        Args:
            source: The file containing the directive.
            target: The text between the angle brackets.
        """
        self._nodes.add(source)
        targets = self._system.setdefault(source, [])
        if target not in targets:
            targets.append(target)

    def get_system(self, source: Path) -> List[str]:
        """Get the angle-bracket includes of the source file."""
        return list(self._system.get(source, []))

    def get_targets(self, source: Path) -> List[Path]:
        """Get the files the source includes, in include order."""
        return list(self._edges.get(source, []))

    def get_roots(self) -> Set[Path]:
        """
        Get nodes that are never included by other nodes.

        A graph built from one trace has the traced file as its only root
        unless the root is itself part of a cycle.
        """
        all_targets: Set[Path] = set()
        for targets in self._edges.values():
            all_targets.update(targets)

        return self._nodes - all_targets

    def iter_edges(self) -> Iterator[Tuple[Path, Path]]:
        """Iterate over all edges as (source, target) tuples, in include order."""
        for source, targets in self._edges.items():
            for target in targets:
                yield source, target

    def iter_system(self) -> Iterator[Tuple[Path, str]]:
        """Iterate over all system references as (source, target) tuples."""
        for source, targets in self._system.items():
            for target in targets:
                yield source, target

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self._nodes)

    def __contains__(self, node: Path) -> bool:
        """Check if a node is in the graph."""
        return node in self._nodes

    def __repr__(self) -> str:
        edge_count = sum(len(t) for t in self._edges.values())
        system_count = sum(len(s) for s in self._system.values())
        return f"IncludeGraph(nodes={len(self._nodes)}, edges={edge_count}, missing={len(self._missing)}, system={system_count})"
