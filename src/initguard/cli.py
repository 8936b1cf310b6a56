"""CLI interface for initguard."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from initguard import __version__
from initguard.config import InitGuardConfig, load_config
from initguard.exceptions import InitGuardError
from initguard.reporting import print_audit_report, print_source_report
from initguard.rules import get_all_static_rules
from initguard.rules.cache import RULE_CACHE_REFRESH_GATE, RULE_CACHE_STORE_WRITE
from initguard.static.analyzer import InitializerAuditor
from initguard.static.artifacts import ArtifactStore
from initguard.static.sources import SourceAuditor

console = Console()

# Exit status for runs that could not produce a report at all
EXIT_FATAL = 2


def _configure_logging(verbose: bool) -> None:
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, RichHandler):
            root_logger.removeHandler(handler)
    root_logger.addHandler(
        RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
    )
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _load_config(config_path: str | None, start: Path) -> InitGuardConfig:
    return load_config(Path(config_path) if config_path else None, start=start)


def _fatal(e: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
    ctx = click.get_current_context(silent=True)
    state = ctx.find_object(dict) if ctx is not None else None
    if state and state.get("debug"):
        raise e
    sys.exit(EXIT_FATAL)


@click.group()
@click.version_option(version=__version__, prog_name="initguard")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("--debug", is_flag=True, help="Re-raise fatal errors with a traceback")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """initguard - Audit upgradeable proxy deployments before they reach the chain."""
    ctx.ensure_object(dict)["debug"] = debug
    _configure_logging(verbose)


@cli.command("audit-initializers")
@click.argument("script", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--artifacts",
    "artifact_paths",
    multiple=True,
    type=click.Path(file_okay=False),
    help="Artifact directory (repeatable; defaults to config, then 'artifacts' and 'out')",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="TOML config file",
)
@click.option(
    "-o",
    "--output",
    type=click.Choice(["markdown", "console"]),
    default="markdown",
    help="Output format",
)
def audit_initializers(
    script: str,
    artifact_paths: tuple[str, ...],
    config_path: str | None,
    output: str,
) -> None:
    """Audit deployProxy(...) initializers in a deployment script.

    Every deployment must name an initializer that exists in the contract ABI
    with a matching arity. Deployments made with `initializer: false` must be
    followed by an explicit initialize(...) call on the same proxy.

    Examples:
        initguard audit-initializers scripts/deploy/deploylocal.ts
        initguard audit-initializers deploy.ts --artifacts ./artifacts
    """
    try:
        cwd = Path.cwd()
        config = _load_config(config_path, cwd)
        roots = (
            [Path(p) for p in artifact_paths]
            if artifact_paths
            else config.resolve_artifact_paths(cwd)
        )
        auditor = InitializerAuditor(config, ArtifactStore(roots))
        analysis = auditor.analyze_file(Path(script))
        report = auditor.audit(analysis)
    except (InitGuardError, OSError) as e:
        _fatal(e)
        return

    print_audit_report(report, console, output)
    sys.exit(report.exit_code)


@cli.command("cache-gates")
@click.argument("path", type=click.Path(exists=True))
@click.option("--include", multiple=True, help="Glob patterns to include (e.g., '**/*.sol')")
@click.option("--exclude", multiple=True, help="Glob patterns to exclude (e.g., '**/mocks/**')")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="TOML config file",
)
def cache_gates(
    path: str,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    config_path: str | None,
) -> None:
    """Audit cache refresh gating and module cache writes in contract sources.

    PATH can be a single .sol file or a directory (scanned recursively).
    The checks are lexical heuristics; review the INFO rows by hand.
    """
    try:
        config = _load_config(config_path, Path.cwd())
        auditor = SourceAuditor(config)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("[cyan]Scanning contract sources...", total=None)
            report = auditor.audit(
                Path(path),
                include=list(include) if include else None,
                exclude=list(exclude) if exclude else None,
                progress_callback=lambda file, current, total: progress.update(
                    task, description=f"[cyan]Scanning {file.name} ({current}/{total})"
                ),
            )
    except (InitGuardError, OSError) as e:
        _fatal(e)
        return

    gates = config.cache_gates
    print_source_report(
        report,
        console,
        groups=[
            (RULE_CACHE_REFRESH_GATE.rule_id, f"{gates.entrypoint}() implementations"),
            (
                RULE_CACHE_STORE_WRITE.rule_id,
                f"{gates.store_library} write callsites ({'/'.join(gates.write_methods)})",
            ),
        ],
    )
    sys.exit(report.exit_code)


@cli.command("rules")
def list_rules() -> None:
    """List the registered source rules."""
    table = Table(title="Source rules")
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Severity", style="magenta")
    table.add_column("Description")
    for rule in get_all_static_rules():
        table.add_row(rule.rule_id, rule.rule.severity.value, rule.rule.description)
    console.print(table)


def main() -> None:
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
