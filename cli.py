#!/usr/bin/env python3
"""
procinclude CLI

Traces the #include directives of a C/C++ source file, following quoted
includes depth-first, and prints the order in which files are opened and
closed. Useful for diagnosing headers that get included out of order.
"""

import argparse
import codecs
import sys
from pathlib import Path
from typing import TextIO, Tuple

from exporters import TraceWriter, to_ascii, to_json, to_mermaid, to_yaml
from scanner.builder import IncludeGraphSink
from scanner.tracer import DEFAULT_ENCODING, trace


EXIT_OK = 0
EXIT_TRACE_ERRORS = 1


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="procinclude",
        description="Trace the #include directives of a source file in the order they are processed.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  procinclude main.cpp                    # Processing/Found/Closing trace on stdout
  procinclude src/main.cpp -f tree        # Include tree (Unicode)
  procinclude main.cpp -f tree --ascii-style=ascii
  procinclude main.cpp -f mermaid -o includes.mmd
  procinclude main.cpp -f json --ignore-system

Exit status is 1 when any file could not be opened or read.
        """,
    )

    # Positional arguments
    parser.add_argument(
        "filename",
        help="Root source file to trace",
    )

    # Output options
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (default: stdout). Errors always go to stderr.",
    )

    parser.add_argument(
        "-f", "--format",
        choices=["trace", "tree", "mermaid", "json", "yaml"],
        default="trace",
        help="Output format (default: trace)",
    )

    parser.add_argument(
        "--encoding",
        default=DEFAULT_ENCODING,
        help=f"Source file encoding; undecodable bytes are replaced (default: {DEFAULT_ENCODING})",
    )

    # Mermaid-specific options
    parser.add_argument(
        "--orientation",
        choices=["LR", "TD", "TB", "RL", "BT"],
        default="LR",
        help="Mermaid flowchart orientation (default: LR)",
    )

    parser.add_argument(
        "--group-by-dir",
        action="store_true",
        help="Group nodes by top-level directory in Mermaid output",
    )

    # ASCII-specific options
    parser.add_argument(
        "--ascii-style",
        choices=["tree", "ascii"],
        default="tree",
        help="Tree output style: 'tree' (Unicode) or 'ascii' (pure ASCII)",
    )

    # Graph report options
    parser.add_argument(
        "--relative-to",
        type=str,
        default=None,
        help="Base path for relative path display (default: directory of the root file)",
    )

    parser.add_argument(
        "--ignore-missing",
        action="store_true",
        help="Hide includes whose file could not be opened from graph output",
    )

    parser.add_argument(
        "--ignore-system",
        action="store_true",
        help="Hide angle-bracket (system) includes from graph output",
    )

    parsed = parser.parse_args(args)

    try:
        codecs.lookup(parsed.encoding)
    except LookupError:
        parser.error(f"unknown encoding: {parsed.encoding}")

    return parsed


def _run_trace(parsed, out: TextIO) -> int:
    """Stream the trace to ``out``; errors go to stderr."""
    writer = TraceWriter(out=out, err=sys.stderr)
    result = trace(parsed.filename, sink=writer, encoding=parsed.encoding)
    return EXIT_OK if result.ok else EXIT_TRACE_ERRORS


def _run_report(parsed) -> Tuple[str, int]:
    """Trace silently, reporting only errors, and render the include graph."""
    sink = IncludeGraphSink(forward=TraceWriter(err=sys.stderr, errors_only=True))
    result = trace(parsed.filename, sink=sink, encoding=parsed.encoding)
    graph = sink.graph

    root = Path(parsed.filename).parent.resolve()
    base = Path(parsed.relative_to).resolve() if parsed.relative_to else root
    include_missing = not parsed.ignore_missing
    include_system = not parsed.ignore_system

    if parsed.format == "mermaid":
        output = to_mermaid(
            graph=graph,
            root=root,
            orientation=parsed.orientation,
            base=base,
            group_by_directory=parsed.group_by_dir,
            include_missing=include_missing,
            include_system=include_system,
        )
    elif parsed.format == "json":
        output = to_json(
            graph=graph,
            root=root,
            base=base,
            include_missing=include_missing,
            include_system=include_system,
        )
    elif parsed.format == "yaml":
        output = to_yaml(
            graph=graph,
            root=root,
            base=base,
            include_missing=include_missing,
            include_system=include_system,
        )
    else:  # tree
        output = to_ascii(
            graph=graph,
            root=root,
            base=base,
            style=parsed.ascii_style,
            include_missing=include_missing,
            include_system=include_system,
        )

    return output, EXIT_OK if result.ok else EXIT_TRACE_ERRORS


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)

    if parsed.format == "trace":
        if not parsed.output:
            return _run_trace(parsed, sys.stdout)
        try:
            with open(parsed.output, "w", encoding="utf-8") as out:
                status = _run_trace(parsed, out)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return EXIT_TRACE_ERRORS
        print(f"Output written to: {parsed.output}", file=sys.stderr)
        return status

    output, status = _run_report(parsed)

    # Write output
    if parsed.output:
        try:
            output_path = Path(parsed.output)
            output_path.write_text(output, encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return EXIT_TRACE_ERRORS
    else:
        print(output)

    return status


if __name__ == "__main__":
    sys.exit(main())
