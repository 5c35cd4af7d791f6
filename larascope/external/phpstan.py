"""PHPStan integration.

Runs `phpstan analyse --format=json` as a subprocess against a path in
the target project and folds the JSON output into a PhpstanReport with
messages bucketed into type issues, unused code, dead code and other.

analyze() raises only for an invalid path. Every process-level failure
(missing binary, timeout, non-zero exit, unparsable output) is reported
in PhpstanReport.error so callers can attach it to a larger report.
"""

import json
import logging
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_BINARY = "vendor/bin/phpstan"
DEFAULT_TIMEOUT = 30

ISSUE_CATEGORIES: tuple[str, ...] = ("type_issues", "unused_code", "dead_code", "other")

# Above this many errors a stricter long-term plan is suggested.
HIGH_ERROR_COUNT = 50


class PhpstanError(RuntimeError):
    """Raised when the analysis target is invalid."""


@dataclass
class PhpstanIssue:
    file: str
    message: str
    line: Optional[int] = None

    def to_dict(self) -> dict:
        return {"file": self.file, "message": self.message, "line": self.line}


@dataclass
class PhpstanReport:
    total_errors: int = 0
    files_with_errors: int = 0
    files_analyzed: list[str] = field(default_factory=list)
    issues: dict[str, list[PhpstanIssue]] = field(
        default_factory=lambda: {c: [] for c in ISSUE_CATEGORIES}
    )
    analysis_time_ms: float = 0.0
    error: Optional[str] = None
    raw_output: str = ""

    @property
    def is_success(self) -> bool:
        return self.error is None

    def errors_by_file(self) -> dict[str, list[dict]]:
        grouped: dict[str, list[dict]] = {}
        for bucket in self.issues.values():
            for issue in bucket:
                grouped.setdefault(issue.file, []).append(issue.to_dict())
        return grouped

    def to_dict(self) -> dict:
        if self.error is not None:
            return {
                "error": self.error,
                "raw_output": self.raw_output,
                "performance": {"analysis_time_ms": self.analysis_time_ms},
            }
        files = len(self.files_analyzed)
        return {
            "summary": {
                "total_errors": self.total_errors,
                "files_with_errors": self.files_with_errors,
                "files_analyzed": files,
            },
            "files_analyzed": self.files_analyzed,
            "errors_by_file": self.errors_by_file(),
            "categorized_issues": {
                name: [i.to_dict() for i in bucket] for name, bucket in self.issues.items()
            },
            "performance": {
                "analysis_time_ms": self.analysis_time_ms,
                "errors_per_file": round(self.total_errors / files, 2) if files else 0,
            },
        }


def categorize_message(message: str) -> str:
    text = message.lower()
    if "type" in text:
        return "type_issues"
    if "never read" in text or "unused" in text:
        return "unused_code"
    if "dead" in text or "never thrown" in text:
        return "dead_code"
    return "other"


def parse_phpstan_output(payload: dict, analysis_time_ms: float = 0.0) -> PhpstanReport:
    """Build a report from PHPStan's JSON error format."""
    totals = payload.get("totals") or {}
    files = payload.get("files") or {}
    if not isinstance(files, dict):
        files = {}

    report = PhpstanReport(
        total_errors=int(totals.get("errors", 0) or 0),
        files_with_errors=int(totals.get("file_errors", 0) or 0),
        files_analyzed=list(files),
        analysis_time_ms=analysis_time_ms,
    )
    for file_path, file_data in files.items():
        for message in (file_data or {}).get("messages", []):
            text = str(message.get("message", ""))
            report.issues[categorize_message(text)].append(
                PhpstanIssue(file=file_path, message=text, line=message.get("line"))
            )
    return report


class PhpstanIntegrator:
    def __init__(
        self,
        project_root: Optional[Path] = None,
        binary: str = DEFAULT_BINARY,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        self.project_root = Path(project_root) if project_root is not None else Path.cwd()
        self.binary = binary
        self.timeout = timeout

    def is_available(self) -> bool:
        try:
            result = subprocess.run(
                [self.binary, "--version"],
                cwd=str(self.project_root),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("PHPStan not available: %s", exc)
            return False
        return result.returncode == 0

    def build_command(
        self,
        path: str,
        level: Optional[int] = None,
        memory_limit: Optional[str] = None,
        config: Optional[str] = None,
    ) -> list[str]:
        command = [self.binary, "analyse", "--format=json", "--no-progress"]
        if level is not None:
            command.append(f"--level={level}")
        if memory_limit:
            command.append(f"--memory-limit={memory_limit}")
        if config:
            command.append(f"--configuration={config}")
        command.append(path)
        return command

    def analyze(
        self,
        path: str,
        level: Optional[int] = None,
        memory_limit: Optional[str] = None,
        config: Optional[str] = None,
    ) -> PhpstanReport:
        """Run PHPStan on `path` (relative to the project root or absolute).

        Raises:
            PhpstanError: If the path does not exist.
        """
        target = Path(path) if Path(path).is_absolute() else self.project_root / path
        if not target.exists():
            raise PhpstanError(f"Path does not exist or is not readable: {path}")

        command = self.build_command(path, level=level, memory_limit=memory_limit, config=config)
        logger.info("Running PHPStan: %s (cwd=%s)", " ".join(command), self.project_root)
        start = time.monotonic()

        try:
            result = subprocess.run(
                command,
                cwd=str(self.project_root),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            return PhpstanReport(
                error=f"PHPStan timed out after {self.timeout} seconds",
                analysis_time_ms=_elapsed_ms(start),
            )
        except OSError as exc:
            return PhpstanReport(
                error=f"PHPStan execution failed: {exc}",
                analysis_time_ms=_elapsed_ms(start),
            )

        elapsed = _elapsed_ms(start)

        # PHPStan exits 1 when it found errors but still prints the JSON report.
        try:
            payload = json.loads(result.stdout)
        except json.JSONDecodeError:
            if result.returncode != 0:
                error = f"PHPStan analysis failed: {result.stderr.strip() or 'exit code ' + str(result.returncode)}"
            else:
                error = "Failed to parse PHPStan output as JSON"
            logger.warning(error)
            return PhpstanReport(error=error, raw_output=result.stdout, analysis_time_ms=elapsed)

        if not isinstance(payload, dict):
            return PhpstanReport(
                error="Failed to parse PHPStan output as JSON",
                raw_output=result.stdout,
                analysis_time_ms=elapsed,
            )

        report = parse_phpstan_output(payload, elapsed)
        logger.info(
            "PHPStan complete: errors=%d files=%d (%.1fms)",
            report.total_errors, len(report.files_analyzed), elapsed,
        )
        return report


def generate_suggestions(report: PhpstanReport) -> dict:
    if not report.is_success:
        return {"error": "Cannot generate suggestions due to analysis errors"}

    priority_fixes: list[dict] = []
    type_issues = report.issues.get("type_issues", [])
    if type_issues:
        priority_fixes.append({
            "category": "Type Safety",
            "description": "Add missing return types and parameter types",
            "impact": "high",
            "effort": "medium",
            "count": len(type_issues),
        })

    quick_wins: list[dict] = []
    unused = report.issues.get("unused_code", [])
    if unused:
        quick_wins.append({
            "category": "Clean Up",
            "description": "Remove unused variables and properties",
            "impact": "medium",
            "effort": "low",
            "count": len(unused),
        })

    long_term: list[dict] = []
    if report.total_errors > HIGH_ERROR_COUNT:
        long_term.append({
            "category": "Code Quality",
            "description": "Consider implementing stricter PHPStan level (currently high error count)",
            "impact": "high",
            "effort": "high",
        })

    return {
        "priority_fixes": priority_fixes,
        "quick_wins": quick_wins,
        "long_term_improvements": long_term,
    }


def integration_insights(category: str, report: PhpstanReport) -> list[str]:
    """Category-aware commentary on a PHPStan report."""
    insights: list[str] = []
    if category == "api_service" and report.total_errors > 0:
        insights.append(
            "API services should have strict type safety. "
            "Consider addressing PHPStan errors for better reliability."
        )
    if category == "ecommerce" and report.issues.get("type_issues"):
        insights.append(
            "E-commerce applications handling sensitive data should prioritize type safety for security."
        )
    return insights


def _elapsed_ms(start: float) -> float:
    return round((time.monotonic() - start) * 1000, 2)
