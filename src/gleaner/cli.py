from __future__ import annotations

from pathlib import Path
from typing import List, Optional
import logging

import typer

from gleaner.analysis.passes import analyze_paths
from gleaner.config import (
    analysis_defaults,
    analysis_ignore_list,
    emission_defaults,
)
from gleaner.report import render_json, render_text
from gleaner.runtime.policy_runtime import resolve_runtime_policy, runtime_policy_scope

app = typer.Typer(add_completion=False)

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@app.callback()
def main() -> None:
    """Collect diagnostics from nested analysis passes."""


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=_LOG_FORMAT)


@app.command("check")
def check(
    paths: List[Path] = typer.Argument(..., exists=True, help="Files or directories to analyze."),
    fail_fast: bool = typer.Option(
        False, "--fail-fast", help="Stop at the first reported problem."
    ),
    json_output: bool = typer.Option(False, "--json", help="Emit a JSON report."),
    enforce: Optional[bool] = typer.Option(
        None,
        "--enforce/--no-enforce",
        help="Treat emissions without an enclosing scope as fatal.",
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to gleaner.toml."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Run the example passes over Python sources and report what they emit."""
    _configure_logging(verbose)
    policy = resolve_runtime_policy(
        enforce_flag=enforce,
        section=emission_defaults(config_path=config),
    )
    ignore = analysis_ignore_list(analysis_defaults(config_path=config))
    with runtime_policy_scope(policy):
        result = analyze_paths(paths, fail_fast=fail_fast, ignore=ignore)
    if json_output:
        typer.echo(render_json(result))
    else:
        typer.echo(render_text(result))
    if result.diagnostics:
        raise typer.Exit(code=1)
