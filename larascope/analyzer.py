"""Whole-project analysis.

ProjectAnalyzer composes the classifier, the structure scanner, the domain
analyzers, the recommendation engine and (optionally) PHPStan into one
report. Report sections:

  project_info              classifier characteristics
  structure_analysis        expected directories + structure health
  patterns_detected         architecture patterns inferred from the layout
  domain_specific_analysis  category-specific probes
  security_considerations   category-specific advice
  external_tool_results     only when include_external_analysis is set
  recommendations           four recommendation lists
  analysis_metadata         timing, version, confidence, handler, errors

analyze_project() never raises. An unexpected failure returns a partial
report with analysis_metadata.status == "partial_failure".
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

from larascope import __version__
from larascope.adapters import ProjectAdapter, resolve_adapter
from larascope.analysis.domain import analyze_domain, security_considerations
from larascope.analysis.recommendations import generate_recommendations
from larascope.core.config import Settings, get_settings
from larascope.core.normalizer import normalize, normalize_with_logging
from larascope.core.security import SecurityValidator
from larascope.detector.classifier import ProjectClassifier
from larascope.external.phpstan import (
    PhpstanError,
    PhpstanIntegrator,
    generate_suggestions,
    integration_insights,
)
from larascope.scanner.structure import StructureAnalyzer

logger = logging.getLogger(__name__)

# Directory the PHPStan integration analyses.
PHPSTAN_TARGET = "app"

_TRUE_STRINGS = {"1", "true", "yes", "on"}


class ProjectAnalyzer:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        classifier: Optional[ProjectClassifier] = None,
        structure_analyzer: Optional[StructureAnalyzer] = None,
        phpstan: Optional[PhpstanIntegrator] = None,
    ) -> None:
        self.settings = settings or get_settings()
        root = self.settings.project_root
        self.classifier = classifier or ProjectClassifier.from_settings(self.settings)
        self.structure_analyzer = structure_analyzer or StructureAnalyzer(
            SecurityValidator(
                allowed_paths=self.settings.allowed_paths,
                restricted_files=self.settings.restricted_files,
                developer_mode=self.settings.developer_mode,
                project_root=root,
                log_events=self.settings.log_security_events,
            ),
            project_root=root,
            max_file_size=self.settings.max_file_size_mb * 1024 * 1024,
        )
        self.phpstan = phpstan or PhpstanIntegrator(
            root,
            binary=self.settings.phpstan_binary,
            timeout=self.settings.analysis_timeout,
        )
        self._cached: Optional[dict] = None
        self._adapter: Optional[ProjectAdapter] = None
        self._adapter_handler: Optional[str] = None

    # ------------------------------------------------------------------
    # Whole-project report
    # ------------------------------------------------------------------

    def analyze_project(self, options: Any = None) -> dict:
        """Build the full analysis report.

        `options` may be a dict, a JSON object string, or None. Recognised
        keys: force_refresh, include_external_analysis.
        """
        normalized = normalize_with_logging(options, "options")
        opts = normalized if isinstance(normalized, dict) else {}
        force_refresh = _flag(opts.get("force_refresh"))
        include_external = _flag(opts.get("include_external_analysis"))

        if self._cached is not None and not force_refresh and self.settings.enable_caching:
            logger.debug("Returning cached project analysis")
            return self._cached

        start = time.monotonic()
        errors: list[dict] = []

        try:
            report = self._build_report(include_external, errors)
            report["analysis_metadata"] = {
                **self._metadata(start, errors),
                "detection_confidence": self.classifier.get_confidence(),
                "suggested_handler": self.classifier.suggested_handler(),
                "status": "success",
            }
            report["recommendations"] = generate_recommendations(report)
        except Exception as exc:
            logger.exception("Project analysis failed")
            errors.append({
                "type": "analysis_error",
                "exception": type(exc).__name__,
                "message": str(exc),
            })
            return {
                "project_info": {"name": "unknown", "type": "unknown"},
                "structure_analysis": {},
                "patterns_detected": {},
                "domain_specific_analysis": {},
                "recommendations": {},
                "analysis_metadata": {
                    **self._metadata(start, errors),
                    "status": "partial_failure",
                },
            }

        if self.settings.enable_caching:
            self._cached = report
        logger.info(
            "Project analysis complete: type=%s time=%.1fms",
            report["project_info"].get("type"),
            report["analysis_metadata"]["analysis_time"],
        )
        return report

    def _build_report(self, include_external: bool, errors: list[dict]) -> dict:
        project_info = self.classifier.describe().to_dict()
        category = project_info["type"]
        structure = self.structure_analyzer.analyze_project()

        report = {
            "project_info": project_info,
            "structure_analysis": structure,
            "patterns_detected": detect_patterns(structure),
            "domain_specific_analysis": analyze_domain(
                category, self.classifier.prober, self.classifier.manifest()
            ),
            "security_considerations": security_considerations(category),
        }
        if include_external:
            report["external_tool_results"] = self._external_tool_results(category, errors)
        return report

    def _external_tool_results(self, category: str, errors: list[dict]) -> dict:
        if not self.settings.phpstan_enabled:
            return {"phpstan_analysis": {"status": "disabled"}}
        if not self.phpstan.is_available():
            return {"phpstan_analysis": {"status": "not_available"}}

        config_path = self.settings.project_root / self.settings.phpstan_config
        try:
            phpstan_report = self.phpstan.analyze(
                PHPSTAN_TARGET,
                level=self.settings.phpstan_level,
                config=self.settings.phpstan_config if config_path.is_file() else None,
            )
        except PhpstanError as exc:
            errors.append({"type": "external_tool_error", "tool": "phpstan", "message": str(exc)})
            return {"phpstan_analysis": {"status": "failed", "error": str(exc)}}

        if not phpstan_report.is_success:
            errors.append({"type": "external_tool_error", "tool": "phpstan", "message": phpstan_report.error})
            return {"phpstan_analysis": {"status": "failed", **phpstan_report.to_dict()}}

        return {
            "phpstan_analysis": {"status": "completed", **phpstan_report.to_dict()},
            "suggestions": generate_suggestions(phpstan_report),
            "insights": integration_insights(category, phpstan_report),
        }

    def _metadata(self, start: float, errors: list[dict]) -> dict:
        return {
            "analysis_time": round((time.monotonic() - start) * 1000, 2),
            "analyzer_version": __version__,
            "analysis_timestamp": datetime.now(timezone.utc).isoformat(),
            "errors": errors,
        }

    # ------------------------------------------------------------------
    # File-level tools
    # ------------------------------------------------------------------

    def adapter(self) -> ProjectAdapter:
        """Adapter for the detected project, with its access rules applied.

        The adapter's restricted files are added to the validator. Its
        allowed paths replace the default allow-list unless `allowed_paths`
        was set explicitly in the settings.
        """
        handler = self.classifier.suggested_handler()
        if self._adapter is not None and self._adapter_handler == handler:
            return self._adapter

        adapter = resolve_adapter(
            handler,
            complexity_threshold=self.settings.complexity_threshold,
            confidence_threshold=self.settings.confidence_threshold,
        )
        security = self.structure_analyzer.security
        if "allowed_paths" not in self.settings.model_fields_set:
            security.set_allowed_paths(adapter.allowed_paths())
        security.add_restricted_files(adapter.restricted_files())

        self._adapter = adapter
        self._adapter_handler = handler
        return adapter

    def read_file(self, file_path: str) -> dict:
        """Structure of one file plus the suggested adapter's view of it.

        Raises:
            SecurityError: If the file may not be read.
        """
        adapter = self.adapter()
        report = self.structure_analyzer.read_file(file_path)
        compatibility = adapter.compatibility_score(self.classifier.prober, self.classifier.manifest())
        result = report.to_dict()
        result["domain_analysis"] = {
            "adapter": adapter.name,
            "compatibility_score": compatibility,
            "good_fit": compatibility >= adapter.confidence_threshold,
            **adapter.describe_file(report),
        }
        return result

    def list_files(
        self,
        directory: str = "app",
        name_filter: Optional[str] = None,
        include_tests: bool = False,
    ) -> dict:
        """PHP files under `directory`, capped at the configured batch limit.

        Raises:
            SecurityError: If the directory may not be listed.
        """
        self.adapter()
        listing = self.structure_analyzer.list_files(
            directory,
            name_filter=name_filter,
            include_tests=include_tests,
            limit=self.settings.batch_limit,
        )
        return {"directory": directory, **listing.to_dict()}


def detect_patterns(structure: dict) -> dict[str, str]:
    """Classify architecture patterns as detected / partial / not_detected."""
    directories = structure.get("directories", {})

    def exists(path: str) -> bool:
        return bool(directories.get(path, {}).get("exists"))

    def populated(path: str) -> bool:
        return directories.get(path, {}).get("php_files", 0) > 0

    mvc = [exists(p) for p in ("app/Models", "app/Http/Controllers", "resources/views")]
    return {
        "mvc_pattern": _pattern_state(all(mvc), any(mvc)),
        "service_layer_pattern": _pattern_state(populated("app/Services"), exists("app/Services")),
        "repository_pattern": _pattern_state(populated("app/Repositories"), exists("app/Repositories")),
    }


def _pattern_state(full: bool, partial: bool) -> str:
    if full:
        return "detected"
    if partial:
        return "partial"
    return "not_detected"


def _flag(value: Any) -> bool:
    value = normalize(value)
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)
