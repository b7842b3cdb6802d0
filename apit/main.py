"""CLI entrypoint for apit."""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import Optional

import typer

from .config import RunnerSettings
from .console_reporter import ConsoleReporter
from .engine import FlowEngine
from .loader import load_flows
from .logging_utils import configure_logging
from .output_config import OutputFormat, get_log_format
from .report import MarkdownReport, write_junit_report

app = typer.Typer(help="Run chained API test flows and write Markdown/Mermaid reports.")

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def _load_settings() -> RunnerSettings:
    try:
        return RunnerSettings.from_env()
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def start(
    target: Path = typer.Option(
        Path("."),
        "--target",
        file_okay=False,
        help="Directory receiving the example service, test and flow declarations.",
    ),
) -> None:
    """Copy example declarations into the target directory."""

    target.mkdir(parents=True, exist_ok=True)
    typer.echo("📂 Copying example files...")
    for template in sorted(TEMPLATES_DIR.glob("*.py")):
        destination = target / template.name
        if destination.exists():
            typer.secho(f"⚠️ File '{template.name}' already exists, skipping...", fg=typer.colors.YELLOW)
            continue
        shutil.copyfile(template, destination)
        typer.secho(f"✅ Copied '{template.name}'", fg=typer.colors.GREEN)
    typer.echo("🎉 Done! Run them with: apit run flows.py")


@app.command()
def run(
    flows_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Python file declaring FLOWS (or module-level Flow objects).",
    ),
    report: Optional[Path] = typer.Option(None, help="Markdown report path (env APIT_REPORT_FILE)."),
    mermaid_report: Optional[Path] = typer.Option(
        None,
        help="Mermaid diagram path (env APIT_MERMAID_REPORT_FILE).",
    ),
    junit: Optional[Path] = typer.Option(None, help="Optional JUnit XML output path."),
    output_format: Optional[OutputFormat] = typer.Option(
        None,
        case_sensitive=False,
        help="Console output format (env CONSOLE_OUTPUT_FORMAT).",
    ),
    log_level: Optional[str] = typer.Option(None, help="Log level (env APIT_LOG_LEVEL)."),
) -> None:
    """Run every flow declared in FLOWS_FILE."""

    settings = _load_settings().with_overrides(
        report_file=report,
        mermaid_report_file=mermaid_report,
        output_format=output_format,
        log_level=log_level,
    )
    logger = configure_logging(settings.log_level, get_log_format(settings.output_format))
    reporter = ConsoleReporter(output_format=settings.output_format)

    try:
        flows = load_flows(flows_file)
    except ValueError as exc:
        reporter.print_error(str(exc))
        raise typer.Exit(code=2) from exc

    engine = FlowEngine(
        markdown_report=MarkdownReport(settings.report_file),
        reporter=reporter,
        settings=settings,
    )
    for flow in flows:
        engine.add(flow)

    summary = asyncio.run(engine.run())
    engine.generate_mermaid_report()
    if junit is not None:
        write_junit_report(summary, junit, suite_name=flows_file.stem)

    logger.info(
        "reports_written",
        report=str(settings.report_file),
        mermaid=str(settings.mermaid_report_file),
        junit=str(junit) if junit else None,
    )
    if not summary.ok:
        raise typer.Exit(code=1)


def main() -> None:
    """Console_scripts hook."""

    app()


if __name__ == "__main__":  # pragma: no cover
    main()
