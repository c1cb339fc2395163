"""Gleaner package root."""

from gleaner.emission import Collected, collecting, collects, emit, run_scope
from gleaner.exceptions import NeverRaise, NeverThrown, ScopeAbort
from gleaner.invariants import (
    configure_enforcement,
    enforcement_enabled,
    enforcement_scope,
    never,
)
from gleaner.scope_stack import (
    DEFAULT_TAG,
    ScopeFrame,
    ScopeStack,
    begin,
    depth,
    end,
    find,
    isolated_scope_stack,
)

__all__ = [
    "__version__",
    "DEFAULT_TAG",
    "Collected",
    "NeverRaise",
    "NeverThrown",
    "ScopeAbort",
    "ScopeFrame",
    "ScopeStack",
    "begin",
    "collecting",
    "collects",
    "configure_enforcement",
    "depth",
    "emit",
    "end",
    "enforcement_enabled",
    "enforcement_scope",
    "find",
    "isolated_scope_stack",
    "never",
    "run_scope",
]

__version__ = "0.1.0"
