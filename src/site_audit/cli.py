"""CLI interface for site-audit."""

import json
import logging
import sys

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from . import __version__
from .auditor import audit_url
from .config import AuditConfig
from .errors import AuditFailed
from .models import AuditResult, Severity
from .revenue import BASE_PROJECTIONS


console = Console()

EXTRACTOR_LABELS = {
    "performance": "Performance",
    "mobile": "Mobile",
    "seo": "SEO",
    "local": "Local SEO",
    "conversion": "Conversion",
    "technical": "Technical",
}


def severity_style(severity: Severity) -> str:
    """Get Rich style for severity tier."""
    return {
        Severity.CRITICAL: "red",
        Severity.HIGH: "orange1",
        Severity.MEDIUM: "yellow",
    }.get(severity, "white")


def score_color(score: int) -> str:
    """Get color for a score value."""
    if score >= 80:
        return "green"
    elif score >= 60:
        return "yellow"
    elif score >= 40:
        return "orange1"
    else:
        return "red"


def print_score_bar(score: int, width: int = 20) -> Text:
    """Create a visual score bar."""
    filled = int((score / 100) * width)
    empty = width - filled
    color = score_color(score)

    bar = Text()
    bar.append("█" * filled, style=color)
    bar.append("░" * empty, style="dim")
    bar.append(f" {score}/100", style=f"bold {color}")
    return bar


def print_result(result: AuditResult, verbose: bool = False) -> None:
    """Print audit result to console."""
    perf = result.performance.data
    timing = ""
    if result.performance.available:
        timing = (
            f"\n[dim]Mobile load {perf['mobile']['load_time']:.1f}s • "
            f"Desktop load {perf['desktop']['load_time']:.1f}s[/dim]"
        )

    console.print()
    console.print(Panel(
        f"[bold]{result.target.url}[/bold]\n"
        f"[dim]{result.target.business_category} • {result.render_mode.value} mode[/dim]"
        f"{timing}",
        title="🔍 Website Audit",
        border_style="blue"
    ))

    console.print()
    console.print("  Health Score: ", end="")
    console.print(print_score_bar(result.health_score, width=25))
    console.print()

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Check", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Status")

    for name, extractor_result in result.extractor_results.items():
        if extractor_result.error:
            status = f"[red]failed: {extractor_result.error}[/red]"
        elif extractor_result.degraded:
            status = "[yellow]basic check[/yellow]"
        else:
            status = "[green]OK[/green]"
        table.add_row(
            EXTRACTOR_LABELS.get(name, name),
            f"[{score_color(extractor_result.score)}]{extractor_result.score}/100[/]",
            status,
        )

    console.print(table)

    tiers = [
        (Severity.CRITICAL, result.issues.critical),
        (Severity.HIGH, result.issues.high),
        (Severity.MEDIUM, result.issues.medium),
    ]
    if result.issues.total:
        console.print("\n[bold]Issues Found:[/bold]\n")
        for severity, issues in tiers:
            style = severity_style(severity)
            for issue in issues:
                console.print(f"  [{style}]{severity.value.upper():8}[/] {issue.title}")
                if verbose:
                    console.print(f"           [dim]{issue.description}[/dim]")
                console.print(f"           [cyan]→ {issue.solution}[/cyan]")

    if verbose:
        recommendations = [
            rec
            for extractor_result in result.extractor_results.values()
            for rec in extractor_result.recommendations
        ]
        if recommendations:
            console.print("\n[bold]Recommendations:[/bold]\n")
            for rec in recommendations:
                console.print(f"  • {rec}")

    projection = result.revenue_projection
    console.print(
        f"\n[bold]💰 Monthly revenue opportunity:[/bold] "
        f"[green]${projection.min:,} – ${projection.max:,}[/green] "
        f"[dim](×{projection.multiplier:.1f})[/dim]\n"
    )

    console.print("[dim]─" * 50 + "[/dim]")
    console.print(f"[dim]site-audit v{__version__}[/dim]")
    console.print()


@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version=__version__)
def cli(ctx):
    """Site Audit - Website health audits for small businesses.

    \b
    Quick start:
        site-audit scan example.com
        site-audit scan example.com -c restaurant --render
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("url")
@click.option(
    "-c", "--category", default="retail", show_default=True,
    help=f"Business category ({', '.join(BASE_PROJECTIONS)}); unknown values use retail",
)
@click.option("--render", is_flag=True, help="Use a headless browser for mobile layout checks")
@click.option("-t", "--timeout", default=30.0, help="Page load timeout in seconds")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Show descriptions, recommendations and logs")
def scan(url: str, category: str, render: bool, timeout: float, json_output: bool, verbose: bool):
    """Audit a URL and estimate the revenue opportunity.

    \b
    Examples:
        site-audit scan joespizza.com -c restaurant
        site-audit scan example.com --render --verbose
        site-audit scan example.com --json
    """
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = AuditConfig.from_env(timeout=timeout, render=render or None)

    try:
        with console.status(f"[bold blue]Auditing {url}...[/bold blue]"):
            result = audit_url(url, category, config=config)
    except AuditFailed as e:
        if json_output:
            click.echo(json.dumps({"url": e.url, "error": e.reason}, indent=2))
        else:
            console.print(f"\n[red]Error:[/red] {e.reason}")
        sys.exit(1)

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        print_result(result, verbose=verbose)


# Convenience: allow `site-audit URL` as shortcut for `site-audit scan URL`
def main():
    """Entry point that handles both `site-audit URL` and `site-audit scan URL`."""
    args = sys.argv[1:]

    if args and not args[0].startswith('-') and args[0] not in ['scan', '--help', '--version']:
        if '.' in args[0] or args[0] == 'localhost':
            sys.argv.insert(1, 'scan')

    cli()


if __name__ == "__main__":
    main()
