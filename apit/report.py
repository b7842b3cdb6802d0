"""Markdown, Mermaid and JUnit report emitters."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Sequence
import json
import xml.etree.ElementTree as ET

from .models import RunResult, RunStatus, RunSummary, StepLog

COLOR_SUCCESS = "#389B35"
COLOR_FAILED = "#AD2A0A"
NO_STATUS = "NO-STATUS"
REPORT_TITLE = "# 📗 API Test Report\n\n"


def _json_block(data: Any) -> str:
    if data is None or data == "":
        return "_empty_\n"
    if isinstance(data, str):
        text = data
    else:
        text = json.dumps(data, indent=4, ensure_ascii=False, default=str)
    return f"```json\n{text}\n```\n"


def render_step_section(log: StepLog) -> str:
    mark = "✅" if log.success else "❌"
    if log.success:
        status = str(log.status_code)
        response_block = _json_block(log.response)
    else:
        status = NO_STATUS if log.status_code is None else f"{NO_STATUS} (HTTP {log.status_code})"
        response_block = f"```\n{log.error or 'Step failed'}\n```\n"
    return (
        f"\n## {mark} {log.step_id} ({log.service_id})\n\n"
        f"### Request\n\n{_json_block(log.request_summary())}\n"
        f"### Response\n\n> {status}\n\n{response_block}"
    )


class MarkdownReport:
    """Appends one section per executed step, in completion order."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def start(self) -> None:
        if self.path.parent != Path("."):
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(REPORT_TITLE, encoding="utf-8")

    def append(self, log: StepLog) -> None:
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(render_step_section(log))


def node_color(status: RunStatus) -> str:
    # a step that never ran is drawn like a failure
    if status == RunStatus.SUCCESS:
        return COLOR_SUCCESS
    return COLOR_FAILED


def render_mermaid(results: Sequence[RunResult]) -> str:
    """Left-to-right chain of step ids in seed order, coloured by status."""

    lines = ["```mermaid", "graph LR"]
    if len(results) == 1:
        lines.append(results[0].step_id)
    for current, following in zip(results, results[1:]):
        lines.append(f"{current.step_id} --> {following.step_id}")
    for result in results:
        lines.append(f"style {result.step_id} fill:{node_color(result.status)}")
    lines.append("```")
    return "\n".join(lines) + "\n"


def write_mermaid_report(results: Sequence[RunResult], path: Path) -> str:
    content = render_mermaid(results)
    path = Path(path)
    if path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return content


def _not_run_ids(results: Iterable[RunResult]) -> list[str]:
    return [result.step_id for result in results if result.status == RunStatus.NOT_RUN]


def write_junit_report(summary: RunSummary, path: Path, suite_name: str = "apit") -> None:
    """Write the run as a JUnit XML test suite."""

    not_run = _not_run_ids(summary.results)
    suite = ET.Element(
        "testsuite",
        attrib={
            "name": suite_name,
            "tests": str(len(summary.logs) + len(not_run)),
            "failures": str(len([log for log in summary.logs if not log.success])),
            "skipped": str(len(not_run)),
            "time": str(summary.duration_ms / 1000),
        },
    )
    for log in summary.logs:
        case = ET.SubElement(
            suite,
            "testcase",
            attrib={
                "classname": log.flow,
                "name": log.step_id,
                "time": str(log.duration_ms / 1000),
            },
        )
        if not log.success:
            failure = ET.SubElement(
                case,
                "failure",
                attrib={"message": log.error or "Step failed"},
            )
            failure.text = log.traceback or log.error or ""
    for step_id in not_run:
        case = ET.SubElement(suite, "testcase", attrib={"classname": suite_name, "name": step_id})
        ET.SubElement(case, "skipped", attrib={"message": "step did not run"})

    path = Path(path)
    if path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)
    ET.ElementTree(suite).write(path, encoding="utf-8", xml_declaration=True)
