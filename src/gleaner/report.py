from __future__ import annotations

import json
from typing import Iterable

from gleaner.analysis.model import AnalysisResult, Diagnostic


def format_diagnostic(diagnostic: Diagnostic) -> str:
    return (
        f"{diagnostic.path}:{diagnostic.line}:{diagnostic.col}: "
        f"{diagnostic.code} {diagnostic.message}"
    )


def render_lines(diagnostics: Iterable[Diagnostic]) -> list[str]:
    return [
        format_diagnostic(diagnostic)
        for diagnostic in sorted(diagnostics, key=Diagnostic.sort_key)
    ]


def render_text(result: AnalysisResult) -> str:
    lines = render_lines(result.diagnostics)
    count = len(result.diagnostics)
    noun = "problem" if count == 1 else "problems"
    summary = f"{count} {noun} in {result.files_checked} file(s)"
    if result.stopped_early:
        summary += " (stopped at first problem)"
    lines.append(summary)
    return "\n".join(lines)


def render_json(result: AnalysisResult) -> str:
    return json.dumps(result.as_payload(), indent=2, sort_keys=True)
