"""CLI entry point for apidoc-validator."""

import json
import sys
from pathlib import Path

import click

from apidoc_validator.config import ConfigError, load_config
from apidoc_validator.diagnostics import Diagnostic, Severity
from apidoc_validator.docset import DocSet
from apidoc_validator.logging import configure_logging


def _load_docset(docset: Path, config_path: Path | None) -> DocSet:
    try:
        config = load_config(docset, config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    return DocSet(docset, config)


def _report(diagnostics: list[Diagnostic], fmt: str, verbose: bool) -> None:
    shown = [d for d in diagnostics if verbose or d.severity is not Severity.MESSAGE]
    if fmt == "json":
        click.echo(json.dumps([d.model_dump(mode="json") for d in shown], indent=2))
        return
    for d in shown:
        click.echo(str(d))


def _summary(label: str, diagnostics: list[Diagnostic]) -> str:
    errors = sum(1 for d in diagnostics if d.is_error)
    warnings = sum(1 for d in diagnostics if d.is_warning)
    return f"{label}: {errors} errors, {warnings} warnings."


def _dump_definitions(docs: DocSet, output: Path) -> None:
    data = {
        doc.display_name: [d.model_dump(mode="json") for d in doc.definitions]
        for doc in docs.files
    }
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(data, indent=2), encoding="utf-8")


docset_argument = click.argument("docset", type=click.Path(exists=True, file_okay=False, path_type=Path))
config_option = click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Config file (default: DOCSET/apidocs.yaml).")
format_option = click.option("--format", "fmt", default="text", type=click.Choice(["text", "json"]), help="Diagnostic output format.")
verbose_option = click.option("-v", "--verbose", is_flag=True, help="Show informational messages and debug logs.")


@click.group()
def main():
    """API Doc Validator — extract API definitions from Markdown docs and check their links."""
    pass


@main.command()
@docset_argument
@config_option
@click.option("--dump", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write extracted definitions as JSON.")
@format_option
@verbose_option
def scan(docset: Path, config_path: Path | None, dump: Path | None, fmt: str, verbose: bool):
    """Extract resources, methods, examples and tables from every document."""
    configure_logging(verbose=verbose)
    docs = _load_docset(docset, config_path)
    if fmt == "text":
        click.echo(f"Scanning {len(docs.files)} files in {docset}...")

    ok, diagnostics = docs.scan()
    _report(diagnostics, fmt, verbose)

    if dump is not None:
        _dump_definitions(docs, dump)
        if fmt == "text":
            click.echo(f"Definitions saved to {dump}")

    if fmt == "text":
        click.echo(f"Found {len(docs.resources)} resources and {len(docs.methods)} methods.")
        click.echo(_summary("Scan", diagnostics))
    if not ok:
        sys.exit(1)


@main.command("check-links")
@docset_argument
@config_option
@click.option("--warnings", "include_warnings", is_flag=True, help="Report skipped external and bookmark links.")
@format_option
@verbose_option
def check_links(docset: Path, config_path: Path | None, include_warnings: bool, fmt: str, verbose: bool):
    """Check that relative links resolve to files inside the doc set."""
    configure_logging(verbose=verbose)
    docs = _load_docset(docset, config_path)
    if fmt == "text":
        click.echo(f"Checking links in {len(docs.files)} files in {docset}...")

    ok, diagnostics = docs.validate_links(include_warnings or None)
    _report(diagnostics, fmt, verbose)

    if fmt == "text":
        click.echo(_summary("Links", diagnostics))
    if not ok:
        sys.exit(1)


@main.command()
@docset_argument
@config_option
@click.option("--warnings", "include_warnings", is_flag=True, help="Report skipped external and bookmark links.")
@format_option
@verbose_option
def run(docset: Path, config_path: Path | None, include_warnings: bool, fmt: str, verbose: bool):
    """Full pipeline: scan every document, then check its links."""
    configure_logging(verbose=verbose)
    docs = _load_docset(docset, config_path)

    # Step 1: Scan
    scan_ok, scan_diagnostics = docs.scan()

    # Step 2: Links
    links_ok, link_diagnostics = docs.validate_links(include_warnings or None)

    diagnostics = scan_diagnostics + link_diagnostics
    _report(diagnostics, fmt, verbose)
    if fmt == "text":
        click.echo(_summary("Scan", scan_diagnostics))
        click.echo(_summary("Links", link_diagnostics))
    if not (scan_ok and links_ok):
        sys.exit(1)
