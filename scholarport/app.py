"""ScholarPort command-line entry point."""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape as markup_escape
from rich.panel import Panel
from rich.table import Table

from scholarport.config import (
    ensure_data_dir,
    load_portfolio,
    load_profile,
    load_settings,
    log_path,
    save_portfolio,
)
from scholarport.importing.orchestrator import ImportOrchestrator, ImportOutcome
from scholarport.models.envelope import FinancialAnalytics
from scholarport.models.options import ExportType, MergeStrategy, SourceKind
from scholarport.output.encoders import ENCODERS
from scholarport.output.export import export_portfolio, safe_stem, write_export
from scholarport.processing.analytics import calculate_financial_analytics

console = Console()


def configure_logging() -> None:
    """Configure application logging."""
    ensure_data_dir()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING)

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    path = log_path()
    resolved = str(path.resolve())
    has_file_handler = any(
        isinstance(handler, logging.FileHandler)
        and handler.baseFilename == resolved
        for handler in root_logger.handlers
    )
    if not has_file_handler:
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(logging.WARNING)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def _parse_mapping(items: Optional[List[str]]) -> dict:
    mapping = {}
    for item in items or []:
        column, sep, index = item.rpartition("=")
        if not sep or not column:
            raise argparse.ArgumentTypeError(f"Expected COLUMN=INDEX, got {item!r}")
        try:
            mapping[column] = int(index)
        except ValueError as e:
            raise argparse.ArgumentTypeError(f"Column index must be an integer: {item!r}") from e
    return mapping


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scholarport",
        description="Export and import scholarship portfolios.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    export = subparsers.add_parser("export", help="Export the tracked portfolio.")
    export.add_argument(
        "--format",
        dest="target_format",
        choices=sorted(ENCODERS),
        default="json",
        help="Output format.",
    )
    export.add_argument(
        "--type",
        dest="export_type",
        choices=[t.value for t in ExportType],
        default=None,
        help="Export type. Defaults to the configured type.",
    )
    export.add_argument("--out", type=Path, default=Path("."), help="Output directory.")
    export.add_argument("--name", default=None, help="Filename stem.")
    export.add_argument("--personal", action="store_true", help="Include essays, documents and notes.")
    export.add_argument("--financial", action="store_true", help="Include financial goals.")
    export.add_argument("--anonymize", action="store_true", help="Replace identifying fields.")
    export.add_argument("--no-eligibility", action="store_true", help="Omit the eligibility flag.")
    export.add_argument("--no-progress", action="store_true", help="Omit application progress.")

    imp = subparsers.add_parser("import", help="Import a JSON export or CSV spreadsheet.")
    imp.add_argument("file", type=Path, help="File to import (.json or .csv).")
    imp.add_argument(
        "--strategy",
        choices=[s.value for s in MergeStrategy],
        default=None,
        help="Merge strategy for duplicates.",
    )
    imp.add_argument("--no-preserve-progress", action="store_true", help="Take the incoming status on merge.")
    imp.add_argument("--manual", action="store_true", help="Flag duplicates instead of resolving them.")
    imp.add_argument("--no-headers", action="store_true", help="CSV has no header row.")
    imp.add_argument(
        "--map",
        dest="mapping",
        action="append",
        metavar="COLUMN=INDEX",
        help="Map a CSV column to a zero-based index. Repeatable.",
    )
    imp.add_argument("--dry-run", action="store_true", help="Report without saving.")

    subparsers.add_parser("stats", help="Show financial analytics.")
    return parser


def _print_analytics(analytics: FinancialAnalytics) -> None:
    table = Table(title="Financial analytics", show_header=False)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for key, value in analytics.to_wire().items():
        if isinstance(value, dict):
            value = ", ".join(f"{k}={v}" for k, v in value.items())
        table.add_row(key, str(value))
    console.print(table)


def _print_outcome(outcome: ImportOutcome) -> None:
    style = "green" if outcome.success else "red"
    summary = outcome.summary
    console.print(
        Panel(
            f"State: {outcome.state.value}\n"
            f"Imported: {summary.scholarships_imported}\n"
            f"Duplicates: {summary.duplicates_found}\n"
            f"Resolved: {summary.conflicts_resolved}\n"
            f"Goals: {summary.goals_imported}",
            title="Import",
            border_style=style,
        )
    )

    if outcome.conflicts:
        table = Table(title="Conflicts")
        table.add_column("Scholarship")
        table.add_column("Type")
        table.add_column("Resolution")
        for conflict in outcome.conflicts:
            table.add_row(
                markup_escape(conflict.scholarship_name),
                conflict.conflict_type.value,
                conflict.resolution.value,
            )
        console.print(table)

    for message in outcome.errors:
        color = "yellow" if message.startswith("Warning:") else "red"
        console.print(f"[{color}]{markup_escape(message)}[/{color}]")


def run_export(args: argparse.Namespace) -> int:
    settings = load_settings()
    options = settings.export.model_copy(
        update={
            "include_personal_responses": args.personal or settings.export.include_personal_responses,
            "include_financial_info": args.financial or settings.export.include_financial_info,
            "anonymize_data": args.anonymize or settings.export.anonymize_data,
            "include_eligibility_criteria": (
                settings.export.include_eligibility_criteria and not args.no_eligibility
            ),
            "include_application_progress": (
                settings.export.include_application_progress and not args.no_progress
            ),
        }
    )
    export_type = ExportType(args.export_type or settings.export_type)

    scholarships, goals = load_portfolio()
    profile = load_profile()

    result = export_portfolio(
        scholarships,
        profile,
        goals,
        options,
        export_type,
        args.target_format,
        stem=safe_stem(args.name) if args.name else None,
    )
    path = write_export(result.payload, args.out / result.filename)
    console.print(f"Exported {len(scholarships)} scholarships to [bold]{markup_escape(str(path))}[/bold]")
    return 0


def run_import(args: argparse.Namespace) -> int:
    settings = load_settings()
    try:
        mapping = _parse_mapping(args.mapping)
    except argparse.ArgumentTypeError as e:
        console.print(f"[red]{markup_escape(str(e))}[/red]")
        return 2

    update = {
        "auto_resolve_conflicts": settings.import_.auto_resolve_conflicts and not args.manual,
        "preserve_existing_progress": (
            settings.import_.preserve_existing_progress and not args.no_preserve_progress
        ),
        "has_headers": settings.import_.has_headers and not args.no_headers,
    }
    if args.strategy:
        update["merge_strategy"] = MergeStrategy(args.strategy)
    if mapping:
        update["column_mapping"] = mapping
    options = settings.import_.model_copy(update=update)

    source_kind = SourceKind.DELIMITED if args.file.suffix.lower() == ".csv" else SourceKind.STRUCTURED
    payload = args.file.read_text(encoding="utf-8")

    scholarships, goals = load_portfolio()
    outcome = ImportOrchestrator().run(payload, scholarships, source_kind, options, existing_goals=goals)
    _print_outcome(outcome)

    if not outcome.success:
        return 1

    if not args.dry_run:
        path = save_portfolio(outcome.records, outcome.goals)
        console.print(f"Saved portfolio to [bold]{markup_escape(str(path))}[/bold]")
    return 0


def run_stats(args: argparse.Namespace) -> int:
    scholarships, goals = load_portfolio()
    _print_analytics(calculate_financial_analytics(scholarships, goals))
    return 0


COMMANDS = {
    "export": run_export,
    "import": run_import,
    "stats": run_stats,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the application."""
    load_dotenv()
    configure_logging()
    args = build_parser().parse_args(argv)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    raise SystemExit(main())
