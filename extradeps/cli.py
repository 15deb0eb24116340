"""CLI entry point: extradeps.

Subcommands:
    extradeps check src/index.js src/util.js          # report extraneous imports
    extradeps check --config extradeps.json --json src/*.js
    extradeps deps src/index.js --package-dir ../shared  # show the merged table
"""

from __future__ import annotations

import json
import os
import sys

import click

from extradeps.config import RuleOptions, load_options
from extradeps.core.logging import setup_logging
from extradeps.exceptions import ConfigError
from extradeps.manifest import build_dependency_table, manifest_failure_message
from extradeps.models import DEP_FIELDS, Diagnostic, ManifestFailure
from extradeps.rule import check_files


def _load(config: str | None, package_dirs: tuple[str, ...]) -> RuleOptions:
    """Load options from *config*, letting --package-dir override packageDir."""
    try:
        options = load_options(config) if config else RuleOptions()
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)
    if package_dirs:
        options = options.with_package_dirs(package_dirs)
    return options


def _print_diagnostics(diagnostics: list[Diagnostic], as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps([d.to_dict() for d in diagnostics], indent=2))
        return

    for d in diagnostics:
        click.echo(f"{d.file_path}:{d.line}:{d.column}: {d.message}")
    files = {d.file_path for d in diagnostics}
    if diagnostics:
        click.echo(f"\nFound {len(diagnostics)} problem(s) in {len(files)} file(s)")
    else:
        click.echo("No problems found.")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """extradeps: report imports of packages missing from package.json."""
    setup_logging(verbose)


@main.command("check")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "config", default=None, type=click.Path(), help="JSON options file")
@click.option(
    "--package-dir",
    "package_dirs",
    multiple=True,
    help="Extra directory whose package.json is merged in (repeatable)",
)
@click.option(
    "--no-resolve",
    is_flag=True,
    help="Treat every external specifier as resolvable (no node_modules needed)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def check(
    files: tuple[str, ...],
    config: str | None,
    package_dirs: tuple[str, ...],
    no_resolve: bool,
    as_json: bool,
) -> None:
    """Check FILES for imports not covered by declared dependencies."""
    options = _load(config, package_dirs)
    diagnostics = check_files(files, options, cwd=os.getcwd(), resolve=not no_resolve)
    _print_diagnostics(diagnostics, as_json)
    if diagnostics:
        sys.exit(1)


@main.command("deps")
@click.argument("file", type=click.Path(exists=True))
@click.option("--config", "config", default=None, type=click.Path(), help="JSON options file")
@click.option("--package-dir", "package_dirs", multiple=True, help="Extra package directory")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def deps(file: str, config: str | None, package_dirs: tuple[str, ...], as_json: bool) -> None:
    """Show the merged dependency table used when checking FILE."""
    options = _load(config, package_dirs)
    table = build_dependency_table(file, options.package_dirs())
    if isinstance(table, ManifestFailure):
        message = manifest_failure_message(table) or "No dependencies declared."
        click.echo(message, err=True)
        sys.exit(1 if table.is_reportable else 0)

    if as_json:
        rows = {key: dict(getattr(table, attr)) for attr, key in DEP_FIELDS.items()}
        click.echo(json.dumps(rows, indent=2))
        return

    for attr, key in DEP_FIELDS.items():
        section = getattr(table, attr)
        if not section:
            continue
        click.echo(f"{key}  ({len(section)})")
        for name, version in sorted(section.items()):
            click.echo(f"    {name} {version}")
        click.echo()


if __name__ == "__main__":
    main()
