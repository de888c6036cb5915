"""Depth-first traversal of quoted include directives."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Set, Union

from .directives import IncludeDirective, iter_directives
from .errors import FileOpenError, ScanError, TraceError
from .resolver import canonical_key, is_followed, resolve_include


DEFAULT_ENCODING = "utf-8"


class EventKind(Enum):
    """Kinds of trace events, in the order a file normally produces them."""

    ENTER = "enter"
    REVISIT = "revisit"
    FOUND = "found"
    CLOSE = "close"
    ERROR = "error"


@dataclass(frozen=True)
class TraceEvent:
    """
    One entry of the trace stream.

    ``path`` is the file the event is about. For FOUND it is the including
    file, ``directive`` holds the parsed line and ``resolved`` the file it
    leads to (quoted includes only).
    """

    kind: EventKind
    path: str
    directive: Optional[IncludeDirective] = None
    resolved: Optional[str] = None
    error: Optional[TraceError] = None

    @property
    def line(self) -> Optional[str]:
        return self.directive.raw_line if self.directive is not None else None


@dataclass
class TraceResult:
    """Summary of a finished trace run."""

    entered: List[str] = field(default_factory=list)
    errors: List[TraceError] = field(default_factory=list)
    events: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class _Frame:
    path: str
    directives: Iterator[IncludeDirective]
    read_error: Optional[ScanError] = None


def _read_lines(path: str, encoding: str) -> _Frame:
    """
    Read a whole file into a frame.

    The handle is closed before returning so that no file stays open while
    its children are traced. A failure part way through keeps the lines read
    so far and records the error on the frame.

    Raises:
        FileOpenError: If the file cannot be opened.
    """
    lines: List[str] = []
    try:
        handle = open(path, "r", encoding=encoding, errors="replace")
    except OSError as e:
        raise FileOpenError(path, e) from e

    read_error = None
    with handle:
        try:
            for line in handle:
                lines.append(line)
        except OSError as e:
            read_error = ScanError(path, e)
    return _Frame(path=path, directives=iter_directives(lines), read_error=read_error)


def iter_trace(
    root: Union[str, Path],
    visited: Optional[Set[str]] = None,
    encoding: str = DEFAULT_ENCODING,
) -> Iterator[TraceEvent]:
    """
    Trace the include graph starting at ``root``.

    Events are yielded lazily, as the traversal reaches them, in depth-first
    pre-order: a quoted include is fully traced before the next line of the
    including file is looked at. Traversal runs on an explicit stack, so the
    depth of the include chain is not limited by the interpreter's recursion
    limit.

    Args:
        root: The file to start from.
        visited: Set of canonical paths already opened. It is updated in
            place; pass the same set to several calls to share deduplication.
        encoding: Text encoding of the sources. Undecodable bytes are replaced.

    Yields:
        TraceEvent objects.
    """
    if visited is None:
        visited = set()

    stack: List[_Frame] = []

    def enter(path: str) -> Iterator[TraceEvent]:
        key = canonical_key(path)
        if key in visited:
            yield TraceEvent(EventKind.REVISIT, path)
            return

        yield TraceEvent(EventKind.ENTER, path)
        visited.add(key)
        try:
            frame = _read_lines(path, encoding)
        except FileOpenError as e:
            yield TraceEvent(EventKind.ERROR, path, error=e)
            return
        stack.append(frame)

    yield from enter(str(Path(root)))

    while stack:
        frame = stack[-1]
        directive = next(frame.directives, None)

        if directive is None:
            stack.pop()
            if frame.read_error is not None:
                yield TraceEvent(EventKind.ERROR, frame.path, error=frame.read_error)
            yield TraceEvent(EventKind.CLOSE, frame.path)
            continue

        if not is_followed(directive):
            yield TraceEvent(EventKind.FOUND, frame.path, directive=directive)
            continue

        target = str(resolve_include(frame.path, directive.target))
        yield TraceEvent(EventKind.FOUND, frame.path, directive=directive, resolved=target)
        # Pushes a new frame on success; it is processed before this one resumes.
        yield from enter(target)


def trace(
    root: Union[str, Path],
    visited: Optional[Set[str]] = None,
    sink: Optional[Callable[[TraceEvent], None]] = None,
    encoding: str = DEFAULT_ENCODING,
) -> TraceResult:
    """
    Run a trace to completion, handing each event to ``sink`` as it happens.

    Args:
        root: The file to start from.
        visited: Shared visited set (see iter_trace).
        sink: Callable receiving every event in order. May be None.
        encoding: Text encoding of the sources.

    Returns:
        TraceResult with the files entered and the errors met.
    """
    result = TraceResult()
    for event in iter_trace(root, visited=visited, encoding=encoding):
        result.events += 1
        if event.kind is EventKind.ENTER:
            result.entered.append(event.path)
        elif event.kind is EventKind.ERROR and event.error is not None:
            result.errors.append(event.error)
        if sink is not None:
            sink(event)
    return result
