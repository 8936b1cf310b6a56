"""Report rendering.

This is the only module that writes audit results to the console.
"""

from __future__ import annotations

from textwrap import indent

from rich.console import Console
from rich.table import Table

from initguard.models.report import AuditReport, Outcome, SourceAuditReport, VerdictRow
from initguard.models.rules import RuleViolation

MARKDOWN_HEADER = [
    "| # | line | deployedKey | contract | initializer | argsLen | abi signature | result | notes |",
    "|---:|---:|---|---|---|---:|---|---|---|",
]


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def _args_len(row: VerdictRow) -> str:
    return "unknown" if row.args_count is None else str(row.args_count)


def _notes(row: VerdictRow) -> str:
    return row.reason or row.notes or ""


def summary_line(report: AuditReport) -> str:
    return f"Summary: OK={report.ok_count}, FAIL={report.fail_count}, TOTAL={report.total}"


def render_markdown(report: AuditReport, title: str | None = None) -> str:
    """Render an initializer audit as a markdown table plus summary line.

    Args:
        report: Audit report
        title: Heading printed above the table

    Returns:
        The report text (deterministic for identical inputs)
    """
    lines = [f"## {title or 'deployProxy initializer audit'}", ""]
    lines.extend(MARKDOWN_HEADER)
    for i, row in enumerate(report.rows, 1):
        cells = [
            str(i),
            str(row.line),
            row.deployment_key or "",
            row.contract_name,
            row.intent.describe(),
            _args_len(row),
            row.signature or "",
            row.outcome.value,
            _notes(row),
        ]
        lines.append("| " + " | ".join(_escape_cell(c) for c in cells) + " |")
    lines.append("")
    lines.append(summary_line(report))
    return "\n".join(lines)


def print_audit_report(report: AuditReport, console: Console, output: str = "markdown") -> None:
    """Print an initializer audit report.

    Args:
        report: Audit report
        console: Console to print to
        output: "markdown" (plain table) or "console" (rich table)
    """
    if output == "markdown":
        console.print(render_markdown(report), markup=False, highlight=False, soft_wrap=True)
        return

    table = Table(title=f"Initializer audit: {report.script_path}")
    table.add_column("#", justify="right")
    table.add_column("Line", justify="right")
    table.add_column("Deployed key")
    table.add_column("Contract", style="cyan")
    table.add_column("Initializer")
    table.add_column("Args", justify="right")
    table.add_column("ABI signature")
    table.add_column("Result")
    table.add_column("Notes", overflow="fold")

    for i, row in enumerate(report.rows, 1):
        result_style = "green" if row.outcome == Outcome.OK else "bold red"
        table.add_row(
            str(i),
            str(row.line),
            row.deployment_key or "",
            row.contract_name,
            row.intent.describe(),
            _args_len(row),
            row.signature or "",
            f"[{result_style}]{row.outcome.value}[/{result_style}]",
            _notes(row),
        )

    console.print(table)
    status_color = "green" if report.passed else "red"
    console.print(f"[{status_color}]{summary_line(report)}[/{status_color}]")


def _finding_line(violation: RuleViolation) -> str:
    location = violation.location
    where = f"{location.file_path}:{location.line_number:>4}" if location else "(unknown)"
    return f"- {where}  {violation.message}"


def print_source_report(
    report: SourceAuditReport,
    console: Console,
    groups: list[tuple[str, str]],
) -> None:
    """Print a source rule report grouped by rule.

    Args:
        report: Source audit report
        console: Console to print to
        groups: (rule_id, heading) pairs in print order
    """
    console.print("\n=== Cache Gate Audit (static) ===\n", markup=False)

    for rule_id, heading in groups:
        console.print(f"## {heading}\n", markup=False)
        rows = [v for v in report.for_rule(rule_id) if v.outcome == Outcome.OK]
        if not rows:
            console.print("(none found)\n", markup=False)
            continue
        for violation in rows:
            console.print(_finding_line(violation), markup=False, highlight=False)
        console.print()

    if report.errors:
        console.print("[bold red]## FAILURES[/bold red]\n")
        for violation in report.errors:
            console.print(_finding_line(violation), markup=False, highlight=False)
            if violation.recommendation:
                console.print(indent(violation.recommendation, "    "), markup=False, highlight=False)
        console.print()
    else:
        console.print("## RESULT\n", markup=False)
        console.print(
            "[green]PASS: No obvious violations found for refresh entrypoint gating.[/green]\n"
        )
