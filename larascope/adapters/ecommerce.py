"""E-commerce adapter: Laravel conventions plus cart / payment focus."""

from larascope.adapters.generic import GenericLaravelAdapter
from larascope.detector.prober import IndicatorProber
from larascope.detector.types import ManifestData
from larascope.scanner.types import FileReport

CRITICAL_PATHS: tuple[str, ...] = ("app/Services/Cart", "app/Services/Payment")

_PAYMENT_PACKAGES: tuple[str, ...] = ("stripe/stripe-php", "paypal/paypal-checkout-sdk", "laravel/cashier")


class ECommerceAdapter(GenericLaravelAdapter):
    name = "ecommerce"
    project_type = "ecommerce"
    # Payment code tends to be denser; tolerate a little more before flagging.
    complexity_threshold = 12
    confidence_threshold = 0.75

    def domain_patterns(self) -> dict:
        patterns = super().domain_patterns()
        patterns.update({
            "cart": {"class_name_contains": "Cart", "methods": ["add", "remove", "total"]},
            "checkout": {"class_name_contains": "Checkout", "methods": ["handle", "process"]},
            "payment": {"class_name_contains": "Payment", "methods": ["charge", "refund"]},
            "inventory": {"class_name_contains": "Inventory", "methods": ["reserve", "release"]},
        })
        return patterns

    def analysis_config(self) -> dict:
        config = super().analysis_config()
        config.update({
            "focus_areas": ["payment_security", "cart_persistence"],
            "critical_paths": list(CRITICAL_PATHS),
        })
        return config

    def compatibility_score(self, prober: IndicatorProber, manifest: ManifestData) -> float:
        score = super().compatibility_score(prober, manifest)
        if any(p in manifest.all_dependency_names for p in _PAYMENT_PACKAGES):
            score += 0.2
        if prober.file_exists("app/Models/Cart.php"):
            score += 0.1
        return min(1.0, round(score, 2))

    def importance_score(self, report: FileReport) -> float:
        if any(report.path.startswith(p + "/") for p in CRITICAL_PATHS):
            return 0.9
        return super().importance_score(report)

    def domain_recommendations(self, report: FileReport) -> list[dict]:
        recommendations = super().domain_recommendations(report)
        if report.path.startswith("app/Services/Payment/") and not any(
            c.implements for c in report.structure.classes
        ):
            recommendations.append({
                "type": "architecture",
                "priority": "medium",
                "message": "Payment services should implement a gateway interface",
                "file": report.path,
            })
        return recommendations
