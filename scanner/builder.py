"""Graph builder that folds a trace into an IncludeGraph."""

from pathlib import Path
from typing import Callable, Iterable, Optional

from graph.model import IncludeGraph
from .errors import FileOpenError
from .tracer import EventKind, TraceEvent


class IncludeGraphSink:
    """
    Event sink that builds an IncludeGraph while a trace is running.

    It can forward every event to another sink, so the trace stream and the
    graph are produced from a single traversal.
    """

    def __init__(self, forward: Optional[Callable[[TraceEvent], None]] = None):
        self.graph = IncludeGraph()
        self._forward = forward

    def __call__(self, event: TraceEvent) -> None:
        self.add(event)
        if self._forward is not None:
            self._forward(event)

    def add(self, event: TraceEvent) -> None:
        """Apply one event to the graph."""
        graph = self.graph
        path = Path(event.path)

        if event.kind is EventKind.ENTER:
            if graph.root is None:
                graph.root = path
            graph.add_node(path)

        elif event.kind is EventKind.FOUND and event.directive is not None:
            if event.resolved is not None:
                graph.add_edge(path, Path(event.resolved))
            else:
                graph.add_system(path, event.directive.target)

        elif event.kind is EventKind.ERROR and isinstance(event.error, FileOpenError):
            graph.mark_missing(path)


def build_graph(events: Iterable[TraceEvent]) -> IncludeGraph:
    """
    Build an include graph from a sequence of trace events.

    Args:
        events: Events as produced by iter_trace.

    Returns:
        IncludeGraph with one edge per quoted include.
    """
    sink = IncludeGraphSink()
    for event in events:
        sink.add(event)
    return sink.graph
