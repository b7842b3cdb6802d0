"""Environment-driven runner settings."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import os

from .output_config import OutputFormat, get_output_format

DEFAULT_REPORT_FILE = "test-report.md"
DEFAULT_MERMAID_REPORT_FILE = "mermaid-test-report.md"
DEFAULT_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class RunnerSettings:
    """Paths and knobs shared by the engine, transport and CLI."""

    report_file: Path = Path(DEFAULT_REPORT_FILE)
    mermaid_report_file: Path = Path(DEFAULT_MERMAID_REPORT_FILE)
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL
    output_format: OutputFormat = OutputFormat.AUTO

    @classmethod
    def from_env(cls) -> "RunnerSettings":
        env_timeout = os.getenv("APIT_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(env_timeout)
        except ValueError as exc:
            raise ValueError(f"APIT_TIMEOUT must be a number of seconds, got {env_timeout!r}") from exc
        return cls(
            report_file=Path(os.getenv("APIT_REPORT_FILE", DEFAULT_REPORT_FILE)),
            mermaid_report_file=Path(os.getenv("APIT_MERMAID_REPORT_FILE", DEFAULT_MERMAID_REPORT_FILE)),
            timeout=timeout,
            log_level=os.getenv("APIT_LOG_LEVEL", DEFAULT_LOG_LEVEL),
            output_format=get_output_format(),
        )

    def with_overrides(self, **overrides: object) -> "RunnerSettings":
        """Return a copy with every non-None override applied."""

        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)
