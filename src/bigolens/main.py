"""bigolens CLI - Estimate the Big-O of C-family code and check it against a time limit."""

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from bigolens.analysis.estimator import analyze
from bigolens.config import Settings
from bigolens.feasibility.checker import (
    check_analysis,
    check_feasibility,
    format_operation_count,
    status_summary,
)
from bigolens.feasibility.presets import COMPLEXITY_PRESETS, PRESETS_BY_ID, preset_for_depths

console = Console()

_VERDICT_STYLES = {"safe": "green", "borderline": "yellow", "unsafe": "red"}


def _configure_logging(verbose: bool) -> None:
    """Send bigolens debug logs through the shared rich console."""
    if not verbose:
        return
    package_logger = logging.getLogger("bigolens")
    package_logger.setLevel(logging.DEBUG)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=console, show_path=False))


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8", errors="replace")


def _parse_variables(pairs: list[str]) -> dict[str, str]:
    """Turn ``["N=200000", "M=5"]`` into ``{"N": "200000", "M": "5"}``."""
    variables = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Expected NAME=VALUE, got {pair!r}")
        variables[name.strip()] = value.strip()
    return variables


def cmd_analyze(args: argparse.Namespace) -> int:
    """Estimate the complexity of a source file."""
    settings: Settings = args.settings

    try:
        source = _read_source(args.path)
    except OSError as e:
        console.print(f"[red]Error:[/red] Cannot read {args.path}: {e}")
        return 1

    result = analyze(source, settings)

    if args.json:
        print(json.dumps(result.to_json(), indent=2, ensure_ascii=False))
        return 0

    if args.show_source:
        console.print(Syntax(source, "cpp", theme="monokai", line_numbers=True))
        console.print()

    table = Table(title=f"Estimated: [bold cyan]{result.expression}[/bold cyan]")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Loops", str(result.loop_count))
    table.add_row("Linear depth", str(result.max_linear_depth))
    table.add_row("Log depth", str(result.max_log_depth))
    table.add_row("Sort calls", str(result.sort_call_count))

    console.print(table)

    n = args.n if args.n is not None else settings.default_n
    time_limit = args.time_limit if args.time_limit is not None else settings.time_limit_sec
    feasibility = check_analysis(result, n, time_limit, settings.ops_per_second)
    style = _VERDICT_STYLES[feasibility.verdict]

    lines = [
        f"[bold {style}]{feasibility.marker}: {feasibility.verdict_label}[/bold {style}]",
        f"N = {format_operation_count(n)} | Time limit: {time_limit:g}s",
        status_summary(feasibility),
    ]
    preset = preset_for_depths(result.max_linear_depth, result.max_log_depth)
    if preset is not None and result.loop_count:
        lines.append(f"Preset: {preset.id} {preset.label}")

    console.print(Panel("\n".join(lines), title="Feasibility", border_style=style))
    console.print(f"[dim]{result.note}[/dim]")

    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Check a complexity preset against the time limit."""
    settings: Settings = args.settings

    try:
        variables = _parse_variables(args.var)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    if not variables:
        variables = {"N": settings.default_n, "M": settings.default_n}

    time_limit = args.time_limit if args.time_limit is not None else settings.time_limit_sec
    result = check_feasibility(args.preset, variables, time_limit, settings.ops_per_second)
    style = _VERDICT_STYLES[result.verdict]

    table = Table(title=f"Feasibility: {result.preset_label}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    for name, value in variables.items():
        table.add_row(f"Variable {name.strip().upper()}", str(value))
    table.add_row("Estimated ops", format_operation_count(result.estimated_ops))
    table.add_row("Budget ops", format_operation_count(result.limit_ops))
    table.add_row("Verdict", f"[{style}]{result.verdict_label}[/{style}]")

    console.print(table)
    console.print(status_summary(result))
    return 0


def cmd_presets(args: argparse.Namespace) -> int:
    """List the complexity presets."""
    table = Table(title="Complexity Presets")
    table.add_column("ID", style="cyan")
    table.add_column("Label", style="green")

    for preset in COMPLEXITY_PRESETS:
        table.add_row(preset.id, preset.label)

    console.print(table)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="bigolens",
        description="Static, heuristic Big-O estimation for C-family source code",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging from the analyzer",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Estimate the complexity of a file")
    analyze_parser.add_argument("path", help="Source file to analyze ('-' reads stdin)")
    analyze_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    analyze_parser.add_argument(
        "--show-source",
        action="store_true",
        help="Print the source with line numbers",
    )
    analyze_parser.add_argument("-n", type=float, help="Input size N for the feasibility verdict")
    analyze_parser.add_argument("-t", "--time-limit", type=float, help="Time limit in seconds")
    analyze_parser.set_defaults(func=cmd_analyze)

    # Check command
    check_parser = subparsers.add_parser("check", help="Check a complexity preset against a time limit")
    check_parser.add_argument(
        "-p", "--preset",
        required=True,
        choices=list(PRESETS_BY_ID),
        help="Complexity preset id (see 'bigolens presets')",
    )
    check_parser.add_argument(
        "--var",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Size variable, repeatable (default: N and M from settings)",
    )
    check_parser.add_argument("-t", "--time-limit", type=float, help="Time limit in seconds")
    check_parser.set_defaults(func=cmd_check)

    # Presets command
    presets_parser = subparsers.add_parser("presets", help="List complexity presets")
    presets_parser.set_defaults(func=cmd_presets)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        args.settings = Settings.from_env()
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
