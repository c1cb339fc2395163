"""Example analysis passes built on collection scopes."""

from .model import DIAGNOSTICS, PASS_TRACE, AnalysisResult, Diagnostic
from .passes import (
    DEFAULT_PASSES,
    AnalysisPass,
    BareExceptPass,
    MutableDefaultPass,
    ShadowedBuiltinPass,
    analyze_paths,
    run_passes,
)

__all__ = [
    "DEFAULT_PASSES",
    "DIAGNOSTICS",
    "PASS_TRACE",
    "AnalysisPass",
    "AnalysisResult",
    "BareExceptPass",
    "Diagnostic",
    "MutableDefaultPass",
    "ShadowedBuiltinPass",
    "analyze_paths",
    "run_passes",
]
