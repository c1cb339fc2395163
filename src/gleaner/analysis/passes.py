"""Example AST passes that report through a diagnostics scope.

Passes never return their findings. Each one calls ``emit`` from wherever in
the traversal it notices a problem, and ``run_passes`` collects whatever
reached the enclosing ``DIAGNOSTICS`` scope. Pass names are also emitted to
``PASS_TRACE``, which only records anything when a caller further up opened a
trace scope.
"""

from __future__ import annotations

import ast
import builtins
from collections.abc import Iterable, Iterator, Sequence
import logging
from pathlib import Path
from typing import ClassVar

from gleaner.analysis.model import (
    DIAGNOSTICS,
    PASS_TRACE,
    SYNTAX_ERROR_CODE,
    AnalysisResult,
    Diagnostic,
)
from gleaner.emission import collecting, emit, run_scope

logger = logging.getLogger(__name__)

_BUILTIN_NAMES = frozenset(
    name for name in dir(builtins) if not name.startswith("_")
)
_MUTABLE_LITERALS = (ast.List, ast.Dict, ast.Set, ast.ListComp, ast.DictComp, ast.SetComp)
_MUTABLE_FACTORIES = frozenset({"list", "dict", "set", "bytearray"})


class AnalysisPass(ast.NodeVisitor):
    code: ClassVar[str] = ""
    name: ClassVar[str] = ""

    def __init__(self, path: str, *, fail_fast: bool = False) -> None:
        self.path = path
        self.fail_fast = fail_fast

    def run(self, tree: ast.AST) -> None:
        emit(self.name, tag=PASS_TRACE)
        self.visit(tree)

    def report(self, node: ast.AST, message: str) -> None:
        diagnostic = Diagnostic(
            path=self.path,
            line=getattr(node, "lineno", 1),
            col=getattr(node, "col_offset", 0),
            code=self.code,
            message=message,
        )
        emit(diagnostic, tag=DIAGNOSTICS, continue_=not self.fail_fast)


def _is_mutable_default(node: ast.expr) -> bool:
    if isinstance(node, _MUTABLE_LITERALS):
        return True
    if isinstance(node, ast.Call) and isinstance(node.func, ast.Name):
        return node.func.id in _MUTABLE_FACTORIES
    return False


class MutableDefaultPass(AnalysisPass):
    code = "GL001"
    name = "mutable-default"

    def _check_arguments(self, owner: str, args: ast.arguments) -> None:
        defaults = [*args.defaults, *(value for value in args.kw_defaults if value is not None)]
        for default in defaults:
            if _is_mutable_default(default):
                self.report(default, f"mutable default argument in {owner}")

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        self._check_arguments(f"'{node.name}'", node.args)
        self.generic_visit(node)

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> None:
        self._check_arguments(f"'{node.name}'", node.args)
        self.generic_visit(node)

    def visit_Lambda(self, node: ast.Lambda) -> None:
        self._check_arguments("lambda", node.args)
        self.generic_visit(node)


class BareExceptPass(AnalysisPass):
    code = "GL002"
    name = "bare-except"

    def visit_ExceptHandler(self, node: ast.ExceptHandler) -> None:
        if node.type is None:
            self.report(node, "bare 'except:' catches BaseException")
        self.generic_visit(node)


class ShadowedBuiltinPass(AnalysisPass):
    code = "GL003"
    name = "shadowed-builtin"

    def visit_Name(self, node: ast.Name) -> None:
        if isinstance(node.ctx, ast.Store) and node.id in _BUILTIN_NAMES:
            self.report(node, f"assignment shadows builtin '{node.id}'")

    def visit_arg(self, node: ast.arg) -> None:
        if node.arg in _BUILTIN_NAMES:
            self.report(node, f"parameter shadows builtin '{node.arg}'")


DEFAULT_PASSES: tuple[type[AnalysisPass], ...] = (
    MutableDefaultPass,
    BareExceptPass,
    ShadowedBuiltinPass,
)


def run_passes(
    source: str,
    path: str,
    passes: Sequence[type[AnalysisPass]] = DEFAULT_PASSES,
    *,
    fail_fast: bool = False,
    ignore: Iterable[str] = (),
) -> list[Diagnostic]:
    ignored = {code.upper() for code in ignore}

    def _body() -> None:
        try:
            tree = ast.parse(source, filename=path)
        except SyntaxError as exc:
            emit(
                Diagnostic(
                    path=path,
                    line=exc.lineno or 1,
                    col=max((exc.offset or 1) - 1, 0),
                    code=SYNTAX_ERROR_CODE,
                    message=f"syntax error: {exc.msg}",
                ),
                tag=DIAGNOSTICS,
            )
            return
        for pass_type in passes:
            if pass_type.code in ignored:
                continue
            pass_type(path, fail_fast=fail_fast).run(tree)

    values = run_scope(_body, tag=DIAGNOSTICS)
    return [value for value in values if isinstance(value, Diagnostic)]


def iter_python_files(paths: Iterable[Path]) -> Iterator[Path]:
    for path in paths:
        if path.is_dir():
            yield from sorted(path.rglob("*.py"))
        elif path.is_file():
            yield path
        else:
            logger.warning("skipping missing path %s", path)


def _read_source(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return None


def analyze_paths(
    paths: Iterable[Path],
    passes: Sequence[type[AnalysisPass]] = DEFAULT_PASSES,
    *,
    fail_fast: bool = False,
    ignore: Iterable[str] = (),
) -> AnalysisResult:
    result = AnalysisResult()
    ignored = tuple(ignore)
    with collecting(PASS_TRACE) as trace:
        for path in iter_python_files(paths):
            logger.debug("analyzing %s", path)
            result.files_checked += 1
            source = _read_source(path)
            if source is None:
                result.diagnostics.append(
                    Diagnostic(
                        path=str(path),
                        line=1,
                        col=0,
                        code=SYNTAX_ERROR_CODE,
                        message="source is not valid UTF-8",
                    )
                )
            else:
                result.diagnostics.extend(
                    run_passes(
                        source,
                        str(path),
                        passes,
                        fail_fast=fail_fast,
                        ignore=ignored,
                    )
                )
            if fail_fast and result.diagnostics:
                result.stopped_early = True
                break
    result.passes_run = sorted({str(name) for name in trace.values})
    return result
