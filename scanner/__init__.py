"""Scanner module for include discovery and traversal."""

from .directives import IncludeDirective, QuoteKind, scan_line, iter_directives
from .resolver import resolve_include, is_followed
from .tracer import EventKind, TraceEvent, TraceResult, iter_trace, trace
from .builder import IncludeGraphSink, build_graph
from .errors import TraceError, FileOpenError, ScanError

__all__ = [
    "IncludeDirective",
    "QuoteKind",
    "scan_line",
    "iter_directives",
    "resolve_include",
    "is_followed",
    "EventKind",
    "TraceEvent",
    "TraceResult",
    "iter_trace",
    "trace",
    "IncludeGraphSink",
    "build_graph",
    "TraceError",
    "FileOpenError",
    "ScanError",
]
