"""Default Laravel adapter.

Knows the standard Laravel layout and conventions without any domain
expertise. It is the fallback for every category without a dedicated
adapter and the parent of the domain adapters.
"""

from larascope.adapters.base import ProjectAdapter
from larascope.detector.prober import IndicatorProber
from larascope.detector.types import ManifestData
from larascope.scanner.types import FileReport

RESOURCE_METHODS: tuple[str, ...] = ("index", "show", "store", "update", "destroy")
FORM_REQUEST_METHODS: tuple[str, ...] = ("rules", "authorize")

# Paths whose presence marks a standard Laravel project; each adds 0.15.
_LARAVEL_PATHS: tuple[str, ...] = (
    "app/Http/Controllers",
    "app/Models",
    "config/app.php",
    "routes/web.php",
    "artisan",
)

# Path segment → Laravel-specific category. First match wins.
_LARAVEL_CATEGORIES: list[tuple[str, str]] = [
    ("/Http/Middleware/", "HttpMiddleware"),
    ("/Http/Requests/", "FormRequest"),
    ("/Models/", "EloquentModel"),
    ("/Jobs/", "QueueableJob"),
    ("/Events/", "LaravelEvent"),
    ("/Listeners/", "EventListener"),
    ("/Providers/", "ServiceProvider"),
    ("/Console/Commands/", "ArtisanCommand"),
    ("/Observers/", "ModelObserver"),
    ("/Policies/", "AuthorizationPolicy"),
    ("/Rules/", "ValidationRule"),
]

_CRITICAL_CATEGORIES: dict[str, float] = {
    "HttpController": 0.8,
    "EloquentModel": 0.8,
    "ServiceProvider": 0.7,
    "HttpMiddleware": 0.7,
    "FormRequest": 0.6,
    "QueueableJob": 0.6,
}


class GenericLaravelAdapter(ProjectAdapter):
    name = "generic"
    project_type = "generic"
    complexity_threshold = 10
    confidence_threshold = 0.7

    def allowed_paths(self) -> list[str]:
        return [
            "app/",
            "config/",
            "routes/",
            "database/migrations/",
            "database/seeders/",
            "resources/views/",
            "resources/js/",
            "resources/css/",
            "tests/",
            "storage/framework/",
        ]

    def restricted_files(self) -> list[str]:
        return super().restricted_files() + ["config/auth.php"]

    def domain_patterns(self) -> dict:
        return {
            "mvc_controller": {
                "class_name_contains": "Controller",
                "extends": ["Controller", "BaseController"],
                "methods": list(RESOURCE_METHODS),
            },
            "eloquent_model": {
                "class_name_contains": "Model",
                "extends": ["Model", "Authenticatable"],
                "properties": ["fillable", "guarded", "casts"],
            },
            "service_class": {
                "class_name_contains": "Service",
                "methods": ["handle", "execute", "process"],
            },
            "repository_pattern": {
                "class_name_contains": "Repository",
                "methods": ["find", "create", "update", "delete"],
            },
            "middleware": {
                "class_name_contains": "Middleware",
                "methods": ["handle"],
                "implements": ["MiddlewareInterface"],
            },
            "form_request": {
                "extends": ["FormRequest"],
                "methods": list(FORM_REQUEST_METHODS),
            },
            "job_class": {"implements": ["ShouldQueue"], "methods": ["handle"]},
            "event_class": {"class_name_contains": "Event"},
            "listener_class": {"class_name_contains": "Listener", "methods": ["handle"]},
        }

    def compatibility_score(self, prober: IndicatorProber, manifest: ManifestData) -> float:
        score = 0.0
        for path in _LARAVEL_PATHS:
            if prober.file_exists(path) or prober.directory_exists(path):
                score += 0.15
        if "laravel/framework" in manifest.dependencies:
            score += 0.25
        return min(1.0, round(score, 2))

    def categorize_domain_file(self, file_path: str) -> str:
        if "/Http/Controllers/" in file_path:
            if file_path.endswith("Resource.php"):
                return "ApiResource"
            if file_path.endswith("Controller.php"):
                return "HttpController"
        for segment, category in _LARAVEL_CATEGORIES:
            if segment in file_path:
                return category
        return super().categorize_domain_file(file_path)

    def importance_score(self, report: FileReport) -> float:
        score = super().importance_score(report)
        critical = _CRITICAL_CATEGORIES.get(self.categorize_domain_file(report.path))
        return max(score, critical) if critical is not None else score

    def domain_recommendations(self, report: FileReport) -> list[dict]:
        recommendations: list[dict] = []
        if _is_controller(report):
            recommendations.extend(_controller_checks(report))
        if _is_model(report):
            recommendations.append({
                "type": "security",
                "priority": "medium",
                "message": "Ensure fillable or guarded properties are properly configured",
                "file": report.path,
            })
        if _is_form_request(report):
            recommendations.extend(_form_request_checks(report))
        return recommendations


def _method_names(report: FileReport) -> list[str]:
    return [m.name for m in report.structure.methods]


def _is_controller(report: FileReport) -> bool:
    return any("Controller" in c.name for c in report.structure.classes)


def _is_model(report: FileReport) -> bool:
    return any(c.extends == "Model" for c in report.structure.classes) or (
        bool(report.structure.classes) and "/Models/" in report.path
    )


def _is_form_request(report: FileReport) -> bool:
    return any(c.extends == "FormRequest" for c in report.structure.classes)


def _controller_checks(report: FileReport) -> list[dict]:
    recommendations: list[dict] = []
    methods = _method_names(report)

    found = [m for m in RESOURCE_METHODS if m in methods]
    if 3 <= len(found) < len(RESOURCE_METHODS):
        missing = [m for m in RESOURCE_METHODS if m not in found]
        recommendations.append({
            "type": "best_practice",
            "priority": "low",
            "message": "Consider implementing missing resource methods: " + ", ".join(missing),
            "file": report.path,
        })

    if "__construct" not in methods and len(methods) > 2:
        recommendations.append({
            "type": "architecture",
            "priority": "medium",
            "message": "Consider using dependency injection for better testability",
            "file": report.path,
        })

    return recommendations


def _form_request_checks(report: FileReport) -> list[dict]:
    methods = _method_names(report)
    missing = [m for m in FORM_REQUEST_METHODS if m not in methods]
    if not missing:
        return []
    return [{
        "type": "implementation",
        "priority": "high",
        "message": "Form request missing required methods: " + ", ".join(missing),
        "file": report.path,
    }]
