"""Console reporter with environment detection for flow execution output."""

import os
import sys
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .models import RunSummary, StepLog
from .output_config import OutputFormat


class ConsoleReporter:
    """
    Console reporter that adapts to the environment.

    Uses rich styling on interactive terminals and plain text when output is
    piped, redirected or running under CI.
    """

    def __init__(self, output_format: OutputFormat = OutputFormat.AUTO):
        self.output_format = output_format
        self._detect_environment()
        self.console: Optional[Console] = Console() if self.use_rich else None

    def _detect_environment(self) -> None:
        if self.output_format == OutputFormat.RICH:
            self.use_rich = True
        elif self.output_format in (OutputFormat.PLAIN, OutputFormat.JSON):
            self.use_rich = False
        else:  # AUTO
            is_terminal = sys.stdout.isatty()
            is_ci = any([
                'CI' in os.environ,
                'GITHUB_ACTIONS' in os.environ,
                'JENKINS_HOME' in os.environ,
                'GITLAB_CI' in os.environ,
                'TRAVIS' in os.environ,
            ])
            self.use_rich = is_terminal and not is_ci

    def start_run(self, total_steps: int, flow_count: int) -> None:
        if self.use_rich:
            self.console.print(
                f"[bold cyan]Running {flow_count} flow(s)[/] [dim]({total_steps} steps)[/]"
            )
        else:
            print(f"Running {flow_count} flow(s), {total_steps} steps")
            print("-" * 80)

    def report_flow_start(self, flow_name: str) -> None:
        if self.use_rich:
            self.console.print(f"📦 [bold]Running Flow:[/] {flow_name}")
        else:
            print(f"Running Flow: {flow_name}")

    def report_step_result(self, log: StepLog) -> None:
        """Print one line per finished step."""
        status = log.status_code if log.success else "NO-STATUS"
        if self.use_rich:
            line = Text()
            line.append("✅" if log.success else "❌")
            line.append(f" - {log.service_id} - ", style="bold")
            line.append(f"{log.method} {log.url}")
            line.append(f" - Status: {status}", style="green" if log.success else "red")
            line.append(f" ({log.duration_ms:.0f}ms)", style="dim")
            self.console.print(line)
            if log.error:
                self.console.print(Text(f"    Error: {log.error}", style="red"))
        else:
            mark = "✓ PASS" if log.success else "✗ FAIL"
            print(f"{mark} - {log.service_id} - {log.method} {log.url} - Status: {status} ({log.duration_ms:.0f}ms)")
            if log.error:
                print(f"  Error: {log.error}")

    def finish_run(self, summary: RunSummary) -> None:
        """Display the final run summary."""
        failed = summary.failed_steps + summary.not_run_steps
        if self.use_rich:
            summary_text = Text()
            summary_text.append(f"Total: {summary.total_steps}  ", style="bold")
            summary_text.append(f"Passed: {summary.passed_steps}  ", style="bold green")
            summary_text.append(f"Failed: {summary.failed_steps}  ", style="bold red" if failed else "bold green")
            if summary.not_run_steps:
                summary_text.append(f"Not run: {summary.not_run_steps}  ", style="bold yellow")
            summary_text.append(f"Duration: {summary.duration_ms:.0f}ms", style="bold cyan")

            status = "✓ ALL TESTS PASSED" if failed == 0 else "✗ SOME TESTS FAILED"
            self.console.print()
            self.console.print(Panel(
                summary_text,
                title=Text(status, style="bold green" if failed == 0 else "bold red"),
                border_style="green" if failed == 0 else "red",
            ))
        else:
            print("-" * 80)
            print(
                f"Total: {summary.total_steps} | Passed: {summary.passed_steps} | "
                f"Failed: {summary.failed_steps} | Not run: {summary.not_run_steps} | "
                f"Duration: {summary.duration_ms:.0f}ms"
            )
            print("✓ ALL TESTS PASSED" if failed == 0 else "✗ SOME TESTS FAILED")

    def print_error(self, message: str) -> None:
        if self.use_rich:
            self.console.print(f"[bold red]Error:[/] {message}")
        else:
            print(f"Error: {message}")
