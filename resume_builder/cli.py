"""CLI - Command line interface for resume-builder."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .config import DEFAULT_CONFIG_PATH, AppConfig, Severity, has_errors, load_config, load_raw_config, validate_config
from .domain.ats_scorer import format_ats_report, score_document
from .domain.layout import LayoutFormat
from .domain.models import ATSScore, load_document, save_document
from .domain.resume_validator import format_validation_report, validate_document
from .errors import ResumeBuilderError
from .exporter import ExportKind, export_document
from .extract import extract_text
from .observability import RenderObserver, setup_logging
from .optimizer import ResumeOptimizer
from .providers import create_provider
from .renderers.text import render_text
from .session import ResumeSession

console = Console()


def _read_job_description(path: Optional[str]) -> str:
    if not path:
        return ""
    return Path(path).read_text(encoding="utf-8")


def _print_score(score: ATSScore) -> None:
    table = Table(title="ATS Score", show_header=True, header_style="bold cyan")
    table.add_column("Category", style="cyan")
    table.add_column("Score", justify="right")
    table.add_row("Overall", str(score.overall))
    table.add_row("Keyword match", str(score.keyword_match))
    table.add_row("Formatting", str(score.formatting))
    table.add_row("Structure", str(score.structure))
    console.print(table)
    for suggestion in score.suggestions:
        console.print(f"  • {suggestion}", markup=False)


def _print_stats(observer: RenderObserver) -> None:
    stats = observer.get_stats()
    table = Table(title="Session Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Exports", str(stats["exports"]))
    table.add_row("Service calls", str(stats["service_calls"]))
    table.add_row("Failed service calls", str(stats["failed_service_calls"]))
    table.add_row("Errors", str(stats["errors"]))
    table.add_row("Total time", f"{stats['total_duration_ms']:.0f}ms")
    console.print(table)


def _check_service_config(config_path: Optional[str]) -> bool:
    """Print configuration issues; return False when any of them is an error."""
    try:
        raw_config = load_raw_config(config_path or DEFAULT_CONFIG_PATH)
    except FileNotFoundError:
        raw_config = {}

    issues = validate_config(raw_config)
    for issue in issues:
        icon = "❌" if issue.severity == Severity.ERROR else "⚠️"
        style = "red" if issue.severity == Severity.ERROR else "yellow"
        console.print(f"  {icon} [{issue.field}] {issue.message}", style=style, markup=False)

    if has_errors(issues):
        console.print(
            "\n💡 Fix the errors above, then try again.\n"
            "   Or copy config/config.yaml → config/config.local.yaml and edit it",
            style="dim",
        )
        return False
    return True


def _build_session(config: AppConfig, observer: RenderObserver, document=None) -> ResumeSession:
    provider = create_provider(
        provider=config.provider,
        api_key=config.api_key,
        model=config.model,
        api_base=config.api_base,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )
    return ResumeSession(
        document,
        layout_format=config.layout_format,
        optimizer=ResumeOptimizer(provider, observer=observer),
        observer=observer,
    )


def _write_or_print(session: ResumeSession, out: Optional[str]) -> None:
    if out:
        path = save_document(session.document, out)
        console.print(f"✅ Saved {path}", style="green")
    else:
        sys.stdout.write(session.document.to_json() + "\n")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_export(args: argparse.Namespace, config: AppConfig, observer: RenderObserver) -> int:
    document = load_document(args.document)
    layout_format = LayoutFormat.parse(args.format or config.layout_format)
    path = export_document(document, ExportKind.parse(args.to), args.out or config.export_dir, layout_format, observer)
    console.print(f"✅ Exported {path}", style="green")
    return 0


def cmd_text(args: argparse.Namespace, config: AppConfig, observer: RenderObserver) -> int:
    sys.stdout.write(render_text(load_document(args.document)))
    return 0


def cmd_score(args: argparse.Namespace, config: AppConfig, observer: RenderObserver) -> int:
    score = score_document(load_document(args.document), _read_job_description(args.jd))
    console.print(format_ats_report(score), markup=False, highlight=False)
    return 0


def cmd_validate(args: argparse.Namespace, config: AppConfig, observer: RenderObserver) -> int:
    result = validate_document(load_document(args.document))
    console.print(format_validation_report(args.document, result), markup=False, highlight=False)
    return 0 if result.valid else 1


def cmd_import(args: argparse.Namespace, config: AppConfig, observer: RenderObserver) -> int:
    if not _check_service_config(args.config):
        return 1

    path = Path(args.file)
    raw_text = extract_text(path.name, path.read_bytes())
    job_description = _read_job_description(args.jd)

    session = _build_session(config, observer)
    with console.status("Analyzing resume..."):
        if job_description.strip():
            asyncio.run(session.tailor(raw_text, job_description))
        else:
            asyncio.run(session.import_text(raw_text))

    _write_or_print(session, args.out)
    if session.analysis:
        for weakness in session.analysis.weaknesses:
            console.print(f"  ⚠️ {weakness}", style="yellow", markup=False)
    _print_score(session.ats_score)
    return 0


def cmd_optimize(args: argparse.Namespace, config: AppConfig, observer: RenderObserver) -> int:
    if not _check_service_config(args.config):
        return 1

    session = _build_session(config, observer, load_document(args.document))
    with console.status("Optimizing resume..."):
        asyncio.run(session.optimize(_read_job_description(args.jd) or None))

    _write_or_print(session, args.out)
    _print_score(session.ats_score)
    return 0


def cmd_serve(args: argparse.Namespace, config: AppConfig, observer: RenderObserver) -> int:
    from .web.app import main as serve

    setup_logging(level=config.log_level)
    serve(host=args.host, port=args.port, config=config)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resume-builder",
        description="resume-builder - render, score and optimize resume documents",
    )
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Verbose output (log lines and session statistics)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    export = subparsers.add_parser("export", help="Export a document to PDF, DOCX, TXT or HTML")
    export.add_argument("document", help="Resume document JSON file")
    export.add_argument("--to", required=True, choices=[k.value for k in ExportKind], help="Export kind")
    export.add_argument("--format", choices=[f.value for f in LayoutFormat], help="Layout format")
    export.add_argument("--out", help="Output directory (default: export_dir from config)")
    export.set_defaults(handler=cmd_export)

    text = subparsers.add_parser("text", help="Print the plain-text rendering")
    text.add_argument("document")
    text.set_defaults(handler=cmd_text)

    score = subparsers.add_parser("score", help="Local ATS score")
    score.add_argument("document")
    score.add_argument("--jd", help="Job description text file")
    score.set_defaults(handler=cmd_score)

    validate = subparsers.add_parser("validate", help="Check a document for completeness")
    validate.add_argument("document")
    validate.set_defaults(handler=cmd_validate)

    import_ = subparsers.add_parser("import", help="Import a PDF, DOCX or TXT resume")
    import_.add_argument("file")
    import_.add_argument("--jd", help="Job description text file; tailors while importing")
    import_.add_argument("--out", help="Write the document JSON here instead of stdout")
    import_.set_defaults(handler=cmd_import)

    optimize = subparsers.add_parser("optimize", help="Optimize a document with the AI service")
    optimize.add_argument("document")
    optimize.add_argument("--jd", help="Job description text file")
    optimize.add_argument("--out", help="Write the document JSON here instead of stdout")
    optimize.set_defaults(handler=cmd_optimize)

    serve = subparsers.add_parser("serve", help="Run the web API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.set_defaults(handler=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    # Load environment variables from .env file
    load_dotenv()

    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        console.print(f"❌ {e}", style="red", markup=False)
        return 1

    observer = RenderObserver()
    try:
        code = args.handler(args, config, observer)
    except (ResumeBuilderError, OSError, ValueError) as e:
        console.print(f"❌ {e}", style="red", markup=False)
        return 1

    if args.verbose and observer.events:
        _print_stats(observer)
    return code


if __name__ == "__main__":
    sys.exit(main())
