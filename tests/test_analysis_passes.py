from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from gleaner import NeverThrown, configure_enforcement, run_scope
from gleaner.analysis import (
    DIAGNOSTICS,
    PASS_TRACE,
    BareExceptPass,
    Diagnostic,
    MutableDefaultPass,
    ShadowedBuiltinPass,
    analyze_paths,
    run_passes,
)
from gleaner.emission import collecting
from gleaner.report import format_diagnostic, render_json, render_text

_SAMPLE = textwrap.dedent(
    """
    def collect(items=[], *, seen=set()):
        try:
            return items
        except:
            return None

    list = [1]

    def ok(value=None):
        return value
    """
)


def _codes(diagnostics: list[Diagnostic]) -> list[str]:
    return [diagnostic.code for diagnostic in diagnostics]


def test_run_passes_collects_in_pass_order() -> None:
    diagnostics = run_passes(_SAMPLE, "sample.py")
    assert _codes(diagnostics) == ["GL001", "GL001", "GL002", "GL003"]
    assert diagnostics[0] == Diagnostic(
        path="sample.py",
        line=2,
        col=18,
        code="GL001",
        message="mutable default argument in 'collect'",
    )
    assert diagnostics[-1].message == "assignment shadows builtin 'list'"


def test_run_passes_fail_fast_stops_at_first_diagnostic() -> None:
    diagnostics = run_passes(_SAMPLE, "sample.py", fail_fast=True)
    assert _codes(diagnostics) == ["GL001"]


def test_run_passes_respects_ignore_and_pass_selection() -> None:
    assert _codes(run_passes(_SAMPLE, "s.py", ignore=["gl001"])) == ["GL002", "GL003"]
    assert _codes(run_passes(_SAMPLE, "s.py", [BareExceptPass])) == ["GL002"]


def test_syntax_errors_become_diagnostics() -> None:
    diagnostics = run_passes("def broken(:\n", "bad.py")
    assert _codes(diagnostics) == ["GL000"]
    assert diagnostics[0].message.startswith("syntax error")


def test_lambda_and_async_defaults_are_checked() -> None:
    source = "f = lambda x={}: x\nasync def g(y=dict()):\n    return y\n"
    diagnostics = run_passes(source, "m.py", [MutableDefaultPass])
    assert [d.message for d in diagnostics] == [
        "mutable default argument in lambda",
        "mutable default argument in 'g'",
    ]


def test_shadowed_builtin_parameters() -> None:
    diagnostics = run_passes("def f(id, value):\n    pass\n", "m.py", [ShadowedBuiltinPass])
    assert [d.message for d in diagnostics] == ["parameter shadows builtin 'id'"]


def test_diagnostics_reach_past_unrelated_inner_scopes() -> None:
    class NestedScopePass(BareExceptPass):
        def visit_ExceptHandler(self, node) -> None:
            run_scope(lambda: super(NestedScopePass, self).visit_ExceptHandler(node))

    diagnostics = run_passes("try:\n    pass\nexcept:\n    pass\n", "m.py", [NestedScopePass])
    assert _codes(diagnostics) == ["GL002"]


def test_pass_trace_is_inert_without_trace_scope() -> None:
    configure_enforcement(False)
    assert run_passes("x = 1\n", "m.py") == []


def test_pass_trace_is_fatal_under_enforcement_without_trace_scope() -> None:
    configure_enforcement(True)
    with pytest.raises(NeverThrown) as exc_info:
        run_passes("x = 1\n", "m.py")
    assert exc_info.value.env == {"tag": PASS_TRACE}


def test_pass_trace_records_passes_through_diagnostic_scope() -> None:
    with collecting(PASS_TRACE) as trace:
        run_passes("x = 1\n", "m.py")
    assert trace.values == ["mutable-default", "bare-except", "shadowed-builtin"]


def test_diagnostics_outside_scope_do_not_leak_to_caller() -> None:
    with collecting(DIAGNOSTICS) as outer:
        run_passes(_SAMPLE, "sample.py")
    assert outer.values == []


def test_analyze_paths_walks_directories(write_source, tmp_path: Path) -> None:
    write_source("pkg/a.py", "def f(x=[]):\n    return x\n")
    write_source("pkg/sub/b.py", "value = 1\n")
    write_source("pkg/notes.txt", "list = 1\n")
    result = analyze_paths([tmp_path / "pkg"])
    assert result.files_checked == 2
    assert _codes(result.diagnostics) == ["GL001"]
    assert result.passes_run == ["bare-except", "mutable-default", "shadowed-builtin"]
    assert result.stopped_early is False


def test_analyze_paths_fail_fast_stops_after_first_file(write_source, tmp_path: Path) -> None:
    first = write_source("a.py", "def f(x=[], y={}):\n    return x\n")
    second = write_source("b.py", "try:\n    pass\nexcept:\n    pass\n")
    result = analyze_paths([first, second], fail_fast=True)
    assert result.files_checked == 1
    assert _codes(result.diagnostics) == ["GL001"]
    assert result.stopped_early is True


def test_analyze_paths_reports_undecodable_and_skips_missing(tmp_path: Path) -> None:
    binary = tmp_path / "bin.py"
    binary.write_bytes(b"\xff\xfe\x00")
    result = analyze_paths([binary, tmp_path / "missing.py"])
    assert result.files_checked == 1
    assert _codes(result.diagnostics) == ["GL000"]


def test_report_rendering() -> None:
    diagnostic = Diagnostic(path="a.py", line=3, col=4, code="GL002", message="m")
    assert format_diagnostic(diagnostic) == "a.py:3:4: GL002 m"
    result = analyze_paths([])
    assert render_text(result) == "0 problems in 0 file(s)"
    result.diagnostics.append(diagnostic)
    result.files_checked = 1
    result.stopped_early = True
    assert render_text(result).splitlines() == [
        "a.py:3:4: GL002 m",
        "1 problem in 1 file(s) (stopped at first problem)",
    ]
    assert '"code": "GL002"' in render_json(result)
