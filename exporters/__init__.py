"""Exporters for converting traces and include graphs to output formats."""

from .mermaid_exporter import to_mermaid
from .ascii_exporter import to_ascii
from .json_exporter import to_json, to_yaml
from .trace_exporter import TraceWriter, format_event, write_trace

__all__ = [
    "to_mermaid",
    "to_ascii",
    "to_json",
    "to_yaml",
    "TraceWriter",
    "format_event",
    "write_trace",
]
