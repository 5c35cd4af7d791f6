"""Domain-specific analysis keyed by detected category.

Each category has one DomainAnalyzer subclass; DOMAIN_ANALYZERS maps the
category string to it. Categories without an entry ("generic", "unknown",
custom rules) fall back to GenericDomainAnalyzer.

Analyzers only ask existence questions through the IndicatorProber and
membership questions of the manifest, so they never raise on a broken tree.
"""

from abc import ABC, abstractmethod

from larascope.detector.prober import IndicatorProber
from larascope.detector.types import ManifestData


class DomainAnalyzer(ABC):
    """Base class for per-category analyzers.

    analyze() returns a mapping of finding groups, each a flat dict of
    named observations (mostly booleans).
    """

    #: Category this analyzer handles
    category: str = ""

    def __init__(self, prober: IndicatorProber, manifest: ManifestData) -> None:
        self.prober = prober
        self.manifest = manifest

    @abstractmethod
    def analyze(self) -> dict[str, dict]:
        ...

    def _file(self, path: str) -> bool:
        return self.prober.file_exists(path)

    def _dir(self, path: str) -> bool:
        return self.prober.directory_exists(path)

    def _requires(self, package: str) -> bool:
        return package in self.manifest.dependencies


class ECommerceDomainAnalyzer(DomainAnalyzer):
    category = "ecommerce"

    def analyze(self) -> dict[str, dict]:
        return {
            "payment_security": {
                "payment_model_exists": self._file("app/Models/Payment.php"),
                "payment_services_organized": self._dir("app/Services/Payment"),
                "gateway_abstraction_present": self._dir("app/Services/PaymentGateway"),
            },
            "cart_architecture": {
                "cart_model_exists": self._file("app/Models/Cart.php"),
                "cart_service_exists": self._dir("app/Services/Cart"),
                "session_configured": self._file("config/session.php"),
                "persistence_strategy": "database" if self._file("app/Models/Cart.php") else "session",
            },
            "order_management": {"implemented": self._file("app/Models/Order.php")},
            "inventory_patterns": {"product_model": self._file("app/Models/Product.php")},
        }


class ApiDomainAnalyzer(DomainAnalyzer):
    category = "api_service"

    def analyze(self) -> dict[str, dict]:
        return {
            "api_structure": {
                "api_routes_organized": self._file("routes/api.php"),
                "api_controllers_structured": self._dir("app/Http/Controllers/API"),
                "resources_present": self._dir("app/Http/Resources"),
                "versioning_strategy": self._versioning_strategy(),
            },
            "authentication_analysis": {
                "sanctum_present": self._requires("laravel/sanctum"),
                "passport_present": self._requires("laravel/passport"),
                "jwt_present": self._requires("tymon/jwt-auth"),
                "auth_middleware_configured": self._file("app/Http/Middleware/Authenticate.php"),
            },
            "endpoint_coverage": {"api_routes_exist": self._file("routes/api.php")},
            "response_consistency": {"resources_used": self._dir("app/Http/Resources")},
        }

    def _versioning_strategy(self) -> str:
        for base in ("app/Http/Controllers/API", "app/Http/Controllers/Api"):
            if self._dir(f"{base}/V1") or self._dir(f"{base}/v1"):
                return "uri"
        return "none"


class AdminDomainAnalyzer(DomainAnalyzer):
    category = "admin_dashboard"

    def analyze(self) -> dict[str, dict]:
        return {
            "admin_structure": {"admin_controllers": self._dir("app/Http/Controllers/Admin")},
            "authorization_patterns": {"policies_present": self._dir("app/Policies")},
            "crud_patterns": {"form_requests_present": self._dir("app/Http/Requests")},
            "ui_consistency": {"admin_views": self._dir("resources/views/admin")},
        }


class GenericDomainAnalyzer(DomainAnalyzer):
    category = "generic"

    def analyze(self) -> dict[str, dict]:
        return {
            "mvc_structure": {
                "models_organized": self._dir("app/Models"),
                "controllers_organized": self._dir("app/Http/Controllers"),
                "views_present": self._dir("resources/views"),
                "routes_organized": self._file("routes/web.php"),
            },
            "service_patterns": {"services_organized": self._dir("app/Services")},
            "repository_patterns": {"repositories_present": self._dir("app/Repositories")},
            "general_architecture": {
                "conventional_structure": all(self._dir(d) for d in ("app", "config", "routes")),
            },
        }


# Registry: maps category -> analyzer class
DOMAIN_ANALYZERS: dict[str, type[DomainAnalyzer]] = {
    "ecommerce": ECommerceDomainAnalyzer,
    "api_service": ApiDomainAnalyzer,
    "admin_dashboard": AdminDomainAnalyzer,
    "generic": GenericDomainAnalyzer,
}

SECURITY_CONSIDERATIONS: dict[str, dict[str, str]] = {
    "ecommerce": {
        "payment_data_security": "Ensure PCI compliance for payment processing",
        "user_data_protection": "Implement proper encryption for sensitive customer data",
        "session_security": "Secure cart sessions and prevent session hijacking",
    },
    "api_service": {
        "authentication_security": "Implement proper API authentication",
        "rate_limiting": "Add rate limiting to prevent abuse",
        "input_validation": "Validate all API inputs to prevent injection attacks",
    },
    "admin_dashboard": {
        "authorization_checks": "Implement proper role-based access control",
        "csrf_protection": "Ensure CSRF protection on all admin forms",
        "audit_logging": "Log all administrative actions",
    },
    "generic": {
        "general_security": "Implement basic Laravel security best practices",
        "input_validation": "Validate all user inputs",
        "authentication": "Secure user authentication system",
    },
}


def get_domain_analyzer(category: str, prober: IndicatorProber, manifest: ManifestData) -> DomainAnalyzer:
    analyzer_cls = DOMAIN_ANALYZERS.get(category, GenericDomainAnalyzer)
    return analyzer_cls(prober, manifest)


def analyze_domain(category: str, prober: IndicatorProber, manifest: ManifestData) -> dict[str, dict]:
    return get_domain_analyzer(category, prober, manifest).analyze()


def security_considerations(category: str) -> dict[str, str]:
    return dict(SECURITY_CONSIDERATIONS.get(category, SECURITY_CONSIDERATIONS["generic"]))
