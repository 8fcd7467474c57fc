import textwrap

from conftest import parse_wants
from notr.config import load_config
from notr.checkers import TreeRecursionChecker
from notr.core import analyze_code, analyze_file
from notr.utils import Span


def _graph_edges(graph):
    # node_link_data names the edge list "links" (or "edges" on newer networkx)
    return graph.get("links", graph.get("edges"))


def test_analyze_code_reports_fixture_cases(cases_source):
    result = analyze_code(cases_source, mode="realtime")

    errors = result["errors"]
    assert [(e["line"], e["message"]) for e in errors] == parse_wants(cases_source)
    assert {e["errorType"] for e in errors} == {"W0802"}
    assert result["call_graph"] is None


def test_error_entries_have_full_location(cases_source):
    [first, *_] = analyze_code(cases_source, mode="realtime")["errors"]

    assert set(first) == {"message", "line", "column", "to_line", "end_column", "errorType"}
    assert first["to_line"] == first["line"]
    assert first["end_column"] > first["column"]


def test_static_mode_builds_recursion_graph(cases_source):
    result = analyze_code(cases_source, mode="static", module_name="cases")

    graph = result["call_graph"]
    node_ids = {node["id"] for node in graph["nodes"]}
    assert node_ids == {"cases.fib", "cases.complex_func", "cases.T.a", "cases.T.b", "cases.plain"}

    edges = {(edge["source"], edge["target"]) for edge in _graph_edges(graph)}
    assert edges == {
        ("cases.fib", "cases.fib"),
        ("cases.complex_func", "cases.complex_func"),
        ("cases.T.a", "cases.T.a"),
        ("cases.T.b", "cases.T.b"),
    }


def test_duplicate_locations_are_collapsed():
    code = textwrap.dedent("""
        def fib(n):
            return max(fib(n - 1) + fib(n - 2), 0)
    """)

    result = analyze_code(code, mode="static", module_name="m")

    assert [e["message"] for e in result["errors"]] == ["tree recursion in call 'fib'"]
    [edge] = _graph_edges(result["call_graph"])
    assert edge["count"] == 2


def test_syntax_errors_skip_detection():
    result = analyze_code("def fib(n):\n    return fib(n - 1) +\n")

    assert result["errors"]
    assert all(e["errorType"] == "SyntaxError" for e in result["errors"])
    assert result["call_graph"] is None


def test_unknown_mode():
    result = analyze_code("x = 1", mode="dynamic")

    assert result == {
        "errors": [{"message": "Unknown analysis mode: dynamic", "line": 1, "column": 0, "errorType": "ModeError"}],
        "call_graph": None,
    }


def test_disabled_checker_reports_nothing(cases_source):
    result = analyze_code(cases_source, conf={"tree-recursion": False})

    assert result == {"errors": [], "call_graph": None}


def test_fatal_error_discards_partial_reports():
    code = textwrap.dedent("""
        def fib(n):
            return fib(n - 1) + fib(n - 2)

        class Broken:
            def m():
                return 1
    """)

    result = analyze_code(code)

    [error] = result["errors"]
    assert error["errorType"] == "AstroidTraversalError"
    assert "Broken.m" in error["message"]
    assert result["call_graph"] is None


def test_operation_limit_from_config(cases_source):
    result = analyze_code(cases_source, conf=load_config({"max-operations": 1}))

    assert [e["errorType"] for e in result["errors"]] == ["AstroidTraversalError"]
    assert "operations limit exceeded: 1" in result["errors"][0]["message"]


def test_analyze_file_uses_file_stem_as_module_name(tmp_path):
    path = tmp_path / "algo.py"
    path.write_text("def fib(n):\n    return fib(n - 1) + fib(n - 2)\n", encoding="utf-8")

    result = analyze_file(str(path))

    assert [e["line"] for e in result["errors"]] == [2]
    assert [node["id"] for node in result["call_graph"]["nodes"]] == ["algo.fib"]


def test_vararg_method_does_not_abort_the_module():
    code = textwrap.dedent("""
        class A:
            def m(*args):
                return 1

            def f(self):
                return self.f() + self.f()
    """)

    result = analyze_code(code, mode="realtime")

    assert [(e["errorType"], e["message"]) for e in result["errors"]] == [
        ("W0802", "tree recursion in call 'self.f'"),
    ]


def test_checker_crash_is_recorded_and_partial_messages_dropped(monkeypatch, cases_source):
    def crash(self, node):
        self.add_message(Span(1, 0, 1, 1), "0802", ("fib",))
        raise RuntimeError("checker exploded")

    monkeypatch.setattr(TreeRecursionChecker, "check", crash)

    result = analyze_code(cases_source, mode="static")

    [error] = result["errors"]
    assert error["errorType"] == "InternalAstroidCheckerError"
    assert "checker exploded" in error["message"]
    assert result["call_graph"] is None
