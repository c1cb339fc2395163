from __future__ import annotations

from dataclasses import dataclass, field

from gleaner.json_types import JSONObject

DIAGNOSTICS = "gleaner.diagnostics"
PASS_TRACE = "gleaner.pass_trace"

SYNTAX_ERROR_CODE = "GL000"


@dataclass(frozen=True)
class Diagnostic:
    path: str
    line: int
    col: int
    code: str
    message: str

    def sort_key(self) -> tuple[str, int, int, str]:
        return (self.path, self.line, self.col, self.code)

    def as_payload(self) -> JSONObject:
        return {
            "path": self.path,
            "line": self.line,
            "col": self.col,
            "code": self.code,
            "message": self.message,
        }


@dataclass
class AnalysisResult:
    diagnostics: list[Diagnostic] = field(default_factory=list)
    files_checked: int = 0
    passes_run: list[str] = field(default_factory=list)
    stopped_early: bool = False

    def as_payload(self) -> JSONObject:
        return {
            "diagnostics": [
                diagnostic.as_payload()
                for diagnostic in sorted(self.diagnostics, key=Diagnostic.sort_key)
            ],
            "files_checked": self.files_checked,
            "passes_run": list(self.passes_run),
            "stopped_early": self.stopped_early,
        }
