"""Errors raised while tracing include directives."""

from pathlib import Path
from typing import Union


class TraceError(Exception):
    """
    Base class for per-file failures during a trace.

    These never abort a run; the tracer reports them as ERROR events and
    carries on with the rest of the include graph.
    """

    verb = "processing"

    def __init__(self, path: Union[str, Path], cause: BaseException):
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Error {self.verb} file {self.path}: {cause}")


class FileOpenError(TraceError):
    """The file is missing or could not be opened."""

    verb = "opening"


class ScanError(TraceError):
    """Reading failed part way through the file."""

    verb = "reading"
