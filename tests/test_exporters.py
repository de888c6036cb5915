"""Tests for exporters."""

import io
import json
import sys
import pytest
import yaml
from pathlib import Path

from graph.model import IncludeGraph
from exporters.mermaid_exporter import to_mermaid
from exporters.ascii_exporter import to_ascii
from exporters.json_exporter import to_json, to_yaml
from exporters.trace_exporter import TraceWriter, format_event, write_trace
from scanner.directives import scan_line
from scanner.errors import FileOpenError
from scanner.tracer import EventKind, TraceEvent


def _diamond(root: Path) -> IncludeGraph:
    graph = IncludeGraph(root=root / "main.c")
    graph.add_edge(root / "main.c", root / "a.h")
    graph.add_edge(root / "main.c", root / "b.h")
    graph.add_edge(root / "a.h", root / "c.h")
    graph.add_edge(root / "b.h", root / "c.h")
    return graph


class TestTraceExporter:
    """Tests for the plain-text trace stream."""

    def test_format_events(self):
        """Test the text of each event kind."""
        directive = scan_line('#include "a.h"')

        assert format_event(TraceEvent(EventKind.ENTER, "main.c")) == "Processing main.c"
        assert format_event(TraceEvent(EventKind.REVISIT, "a.h")) == "Processing a.h"
        assert format_event(
            TraceEvent(EventKind.FOUND, "main.c", directive=directive, resolved="a.h")
        ) == 'Found include: #include "a.h" in main.c'
        assert format_event(TraceEvent(EventKind.CLOSE, "main.c")) == "Closing main.c"

    def test_format_error(self):
        """Test that errors name the file and the cause."""
        error = FileOpenError("gone.h", FileNotFoundError(2, "No such file or directory"))

        line = format_event(TraceEvent(EventKind.ERROR, "gone.h", error=error))

        assert line.startswith("Error opening file gone.h: ")
        assert "No such file or directory" in line

    def test_errors_go_to_error_stream(self):
        """Test that the writer splits trace lines and error lines."""
        out = io.StringIO()
        err = io.StringIO()
        error = FileOpenError("gone.h", OSError("boom"))
        events = [
            TraceEvent(EventKind.ENTER, "gone.h"),
            TraceEvent(EventKind.ERROR, "gone.h", error=error),
        ]

        count = write_trace(events, out=out, err=err)

        assert count == 1
        assert out.getvalue() == "Processing gone.h\n"
        assert err.getvalue() == "Error opening file gone.h: boom\n"

    def test_errors_only(self):
        """Test that errors_only drops regular trace lines."""
        out = io.StringIO()
        err = io.StringIO()
        writer = TraceWriter(out=out, err=err, errors_only=True)

        writer(TraceEvent(EventKind.ENTER, "main.c"))
        writer(TraceEvent(EventKind.ERROR, "main.c", error=FileOpenError("main.c", OSError("x"))))

        assert out.getvalue() == ""
        assert "main.c" in err.getvalue()
        assert writer.error_count == 1


class TestMermaidExporter:
    """Tests for Mermaid exporter."""

    def test_empty_graph(self):
        """Test exporting empty graph."""
        output = to_mermaid(IncludeGraph(), Path("/repo"))

        assert output.startswith("flowchart LR")

    def test_simple_graph(self):
        """Test exporting a diamond."""
        root = Path("/repo")

        output = to_mermaid(_diamond(root), root)

        assert 'main_c["main.c"]' in output
        assert "main_c --> a_h" in output
        assert "b_h --> c_h" in output

    def test_orientation(self):
        """Test different orientations."""
        graph = IncludeGraph(root=Path("/repo/main.c"))

        for orientation in ["LR", "TD", "TB", "RL", "BT"]:
            output = to_mermaid(graph, Path("/repo"), orientation=orientation)
            assert output.startswith(f"flowchart {orientation}")

    def test_missing_and_system(self):
        """Test styling of missing files and system includes."""
        root = Path("/repo")
        graph = IncludeGraph(root=root / "main.c")
        graph.add_edge(root / "main.c", root / "gone.h")
        graph.mark_missing(root / "gone.h")
        graph.add_system(root / "main.c", "stdio.h")

        output = to_mermaid(graph, root)

        assert "gone.h [MISSING]" in output
        assert "main_c -.-> gone_h" in output
        assert "&lt;stdio.h&gt; [SYSTEM]" in output
        assert "main_c -.-> system_stdio_h" in output

        hidden = to_mermaid(graph, root, include_missing=False, include_system=False)
        assert "gone" not in hidden
        assert "stdio" not in hidden

    def test_similar_names_get_distinct_ids(self):
        """Test that files whose names sanitize alike stay separate nodes."""
        root = Path("/repo")
        graph = IncludeGraph(root=root / "main.c")
        graph.add_edge(root / "main.c", root / "a-b.h")
        graph.add_edge(root / "main.c", root / "a_b.h")

        output = to_mermaid(graph, root)

        assert 'a_b_h["a-b.h"]' in output
        assert 'a_b_h_2["a_b.h"]' in output
        assert "main_c --> a_b_h\n" in output
        assert output.endswith("main_c --> a_b_h_2")

    def test_grouped_output(self):
        """Test grouped output by directory."""
        root = Path("/repo")
        graph = IncludeGraph(root=root / "main.c")
        graph.add_edge(root / "main.c", root / "include" / "a.h")
        graph.add_edge(root / "main.c", root / "lib" / "b.h")

        output = to_mermaid(graph, root, group_by_directory=True)

        assert "subgraph dir_include[include]" in output
        assert "subgraph dir_lib[lib]" in output
        assert "subgraph dir_root[root]" in output


class TestASCIIExporter:
    """Tests for ASCII exporter."""

    def test_deep_chain(self):
        """Test a tree deeper than the interpreter recursion limit."""
        root = Path("/repo")
        depth = sys.getrecursionlimit() + 200
        graph = IncludeGraph(root=root / "h0.h")
        for i in range(depth):
            graph.add_edge(root / f"h{i}.h", root / f"h{i + 1}.h")

        lines = to_ascii(graph, root, style="ascii").split("\n")

        assert len(lines) == depth + 1
        assert lines[0] == "h0.h"
        assert lines[2] == "    \\-- h2.h"
        assert lines[-1] == " " * 4 * (depth - 1) + f"\\-- h{depth}.h"

    def test_empty_graph(self):
        """Test exporting empty graph."""
        assert to_ascii(IncludeGraph(), Path("/repo")) == ""

    def test_tree_follows_include_order(self):
        """Test that a shared header is expanded at its first include only."""
        root = Path("/repo")

        output = to_ascii(_diamond(root), root)

        assert output.split("\n") == [
            "main.c",
            "├── a.h",
            "│   └── c.h",
            "└── b.h",
            "    └── c.h [*]",
        ]

    def test_ascii_style(self):
        """Test pure ASCII tree style."""
        root = Path("/repo")

        output = to_ascii(_diamond(root), root, style="ascii")

        assert "├" not in output
        assert "└" not in output
        assert "│" not in output
        assert "|-- a.h" in output
        assert "\\-- b.h" in output

    def test_cycle_detection(self):
        """Test that cycles are marked with [*]."""
        root = Path("/repo")
        graph = IncludeGraph(root=root / "a.h")
        graph.add_edge(root / "a.h", root / "b.h")
        graph.add_edge(root / "b.h", root / "a.h")

        output = to_ascii(graph, root)

        assert output.split("\n") == ["a.h", "└── b.h", "    └── a.h [*]"]

    def test_cycle_without_known_root(self):
        """Test a graph with no recorded root where every node is included."""
        root = Path("/repo")
        graph = IncludeGraph()
        graph.add_edge(root / "a.h", root / "b.h")
        graph.add_edge(root / "b.h", root / "a.h")

        output = to_ascii(graph, root)

        assert output.startswith("a.h")
        assert "[*]" in output

    def test_missing_and_system(self):
        """Test markers for missing files and system includes."""
        root = Path("/repo")
        graph = IncludeGraph(root=root / "main.c")
        graph.add_edge(root / "main.c", root / "gone.h")
        graph.mark_missing(root / "gone.h")
        graph.add_system(root / "main.c", "vector")

        output = to_ascii(graph, root)

        assert output.split("\n") == [
            "main.c",
            "├── gone.h [MISSING]",
            "└── <vector> [SYSTEM]",
        ]

        hidden = to_ascii(graph, root, include_missing=False, include_system=False)
        assert hidden == "main.c"


class TestJSONExporter:
    """Tests for JSON and YAML exporters."""

    def test_empty_graph(self):
        """Test exporting empty graph."""
        data = json.loads(to_json(IncludeGraph(), Path("/repo")))

        assert data["root"] is None
        assert data["nodes"] == []
        assert data["edges"] == []
        assert data["system"] == []

    def test_simple_graph(self):
        """Test exporting a diamond."""
        root = Path("/repo")

        data = json.loads(to_json(_diamond(root), root))

        assert data["root"] == "main.c"
        assert data["nodes"] == ["a.h", "b.h", "c.h", "main.c"]
        assert {"source": "main.c", "target": "a.h"} in data["edges"]
        assert {"source": "b.h", "target": "c.h"} in data["edges"]

    def test_missing_and_system(self):
        """Test missing flags and the system list."""
        root = Path("/repo")
        graph = IncludeGraph(root=root / "main.c")
        graph.add_edge(root / "main.c", root / "gone.h")
        graph.mark_missing(root / "gone.h")
        graph.add_system(root / "main.c", "stdio.h")

        data = json.loads(to_json(graph, root))

        assert data["edges"] == [{"source": "main.c", "target": "gone.h", "missing": True}]
        assert data["system"] == [{"source": "main.c", "target": "stdio.h"}]

        hidden = json.loads(to_json(graph, root, include_missing=False, include_system=False))
        assert hidden["edges"] == []
        assert "system" not in hidden
        assert hidden["nodes"] == ["main.c"]

    def test_yaml_matches_json(self):
        """Test that the YAML document carries the same data as the JSON one."""
        root = Path("/repo")
        graph = _diamond(root)

        assert yaml.safe_load(to_yaml(graph, root)) == json.loads(to_json(graph, root))
