"""Plain-text rendering of the trace event stream."""

import sys
from typing import Iterable, Optional, TextIO

from scanner.tracer import EventKind, TraceEvent


def format_event(event: TraceEvent) -> str:
    """
    Render one event as a line of the trace.

    Revisits print like a first entry; the missing Closing line is what
    tells them apart in the stream.
    """
    if event.kind in (EventKind.ENTER, EventKind.REVISIT):
        return f"Processing {event.path}"
    if event.kind is EventKind.FOUND:
        return f"Found include: {event.line} in {event.path}"
    if event.kind is EventKind.CLOSE:
        return f"Closing {event.path}"
    if event.error is not None:
        return str(event.error)
    return f"Error processing file {event.path}"


class TraceWriter:
    """
    Event sink writing the trace to text streams as events arrive.

    Errors go to ``err``, everything else to ``out``. Both streams are flushed
    per line so that the interleaving survives when they share a terminal.
    With ``errors_only`` the regular trace lines are dropped.
    """

    def __init__(
        self,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        errors_only: bool = False,
    ):
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.errors_only = errors_only
        self.error_count = 0

    def __call__(self, event: TraceEvent) -> None:
        line = format_event(event)
        if event.kind is EventKind.ERROR:
            self.error_count += 1
            print(line, file=self.err, flush=True)
        elif not self.errors_only:
            print(line, file=self.out, flush=True)


def write_trace(
    events: Iterable[TraceEvent],
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """
    Write every event of ``events`` and return the number of errors written.
    """
    writer = TraceWriter(out, err)
    for event in events:
        writer(event)
    return writer.error_count
