"""Unit tests for the regex-based PHP structure scanner."""

import pytest

from larascope.core.security import SecurityError, SecurityValidator
from larascope.scanner.structure import (
    EXPECTED_DIRECTORIES,
    StructureAnalyzer,
    analyze_source,
    categorize_file,
    complexity_score,
    line_metrics,
    strip_strings_and_comments,
)

CONTROLLER = """<?php

namespace App\\Http\\Controllers;

// Handles the catalogue
class ProductController extends Controller implements HasMiddleware
{
    public function index()
    {
        return "class Fake {";
    }

    protected static function boot()
    {
    }

    private function helper($x) { return $x; }
}
"""

MIXED = """<?php
/* class Commented { } */
abstract class BaseGateway
{
    abstract public function charge($amount);
}

final class StripeGateway extends BaseGateway
{
}

interface PaymentGateway {}

trait Loggable {}

enum Status: string
{
    case Paid = 'paid';
}

function helper_fn() {}
"""


class TestAnalyzeSource:
    def test_class_with_parent_and_interfaces(self):
        structure = analyze_source(CONTROLLER)
        assert len(structure.classes) == 1
        cls = structure.classes[0]
        assert cls.name == "ProductController"
        assert cls.extends == "Controller"
        assert cls.implements == ["HasMiddleware"]
        assert cls.kind == "Controller"

    def test_methods(self):
        methods = {m.name: m for m in analyze_source(CONTROLLER).methods}
        assert set(methods) == {"index", "boot", "helper"}
        assert methods["boot"].visibility == "protected"
        assert methods["boot"].is_static is True
        assert methods["index"].is_static is False

    def test_strings_and_comments_ignored(self):
        names = [c.name for c in analyze_source(MIXED).classes]
        assert "Commented" not in names
        assert "Fake" not in [c.name for c in analyze_source(CONTROLLER).classes]

    def test_class_kinds(self):
        kinds = {c.name: c.kind for c in analyze_source(MIXED).classes}
        assert kinds == {"BaseGateway": "Abstract Class", "StripeGateway": "Final Class"}

    def test_other_declarations(self):
        structure = analyze_source(MIXED)
        assert structure.interfaces == ["PaymentGateway"]
        assert structure.traits == ["Loggable"]
        assert structure.functions == ["helper_fn"]
        assert [(e.name, e.backed_type) for e in structure.enums] == [("Status", "string")]

    def test_name_derived_kind(self):
        structure = analyze_source("<?php\nclass OrderService\n{\n}\n")
        assert structure.classes[0].kind == "Service"

    def test_invalid_names_rejected(self):
        structure = analyze_source("<?php\nclass lower {}\nclass X {}\nclass Found {}\n")
        assert structure.classes == []

    def test_to_dict_uses_type_key(self):
        data = analyze_source(CONTROLLER).to_dict()
        assert data["classes"][0]["type"] == "Controller"
        assert data["metrics"]["total_lines"] > 0


class TestHelpers:
    def test_line_metrics(self):
        metrics = line_metrics("<?php\n\n// note\n$x = 1;\n")
        assert metrics.total_lines == 5
        assert metrics.blank_lines == 2
        assert metrics.comment_lines == 1
        assert metrics.code_lines == 2

    def test_strip(self):
        assert strip_strings_and_comments("$a = 'x'; // c") == "$a = ''; "

    def test_complexity(self):
        # 1 class * 3 + 3 methods * 2
        assert complexity_score(analyze_source(CONTROLLER)) == 9

    @pytest.mark.parametrize(
        "path, category",
        [
            ("app/Models/User.php", "Model"),
            ("app/Services/Cart/CartService.php", "Service"),
            ("app/Http/Controllers/HomeController.php", "Controller"),
            ("database/migrations/2024_create_users.php", "Migration"),
            ("app/Support/helpers.php", "Other"),
        ],
    )
    def test_categorize_file(self, path, category):
        assert categorize_file(path) == category


@pytest.fixture
def project(make_project):
    return make_project(
        manifest={},
        sources={
            "app/Http/Controllers/ProductController.php": CONTROLLER,
            "app/Models/Order.php": "<?php\nclass Order extends Model\n{\n    protected $fillable = [];\n}\n",
            "app/Models/Cart.php": "<?php\nclass Cart extends Model {}\n",
            "app/Models/tests/FakeTest.php": "<?php\n",
            "config/database.php": "<?php return ['password' => 'x'];\n",
            "app/Services/Billing.php": "<?php\nreturn ['api_key' => 'sk_live_123', ];\n",
            "app/notes.txt": "plain",
        },
        directories=("routes", "tests", "resources/views"),
    )


@pytest.fixture
def analyzer(project):
    return StructureAnalyzer(SecurityValidator(project_root=project))


class TestReadFile:
    def test_reads_and_analyses(self, analyzer):
        report = analyzer.read_file("app/Http/Controllers/ProductController.php")
        assert report.category == "Controller"
        assert report.complexity_score == 9
        assert report.structure.classes[0].name == "ProductController"
        assert report.to_dict()["metadata"]["lines"] == report.lines

    def test_content_sanitised(self, analyzer):
        report = analyzer.read_file("app/Services/Billing.php")
        assert "sk_live_123" not in report.content
        assert "***MASKED***" in report.content

    def test_restricted_file(self, analyzer):
        with pytest.raises(SecurityError, match="sensitive"):
            analyzer.read_file("config/database.php")

    def test_missing_file(self, analyzer):
        with pytest.raises(SecurityError):
            analyzer.read_file("app/Models/Ghost.php")

    def test_non_php_rejected(self, analyzer):
        with pytest.raises(SecurityError, match="Only PHP"):
            analyzer.read_file("app/notes.txt")

    def test_directory_rejected(self, analyzer):
        with pytest.raises(SecurityError, match="does not exist"):
            analyzer.read_file("app/Models")

    def test_oversize_rejected(self, project):
        analyzer = StructureAnalyzer(SecurityValidator(project_root=project), max_file_size=10)
        with pytest.raises(SecurityError, match="limit"):
            analyzer.read_file("app/Models/Order.php")

    def test_traversal_rejected(self, analyzer):
        with pytest.raises(SecurityError, match="Dangerous"):
            analyzer.read_file("app/../.env")


class TestListFiles:
    def test_sorted_by_category_then_name(self, analyzer):
        listing = analyzer.list_files("app")
        assert [f.path for f in listing.files] == [
            "app/Http/Controllers/ProductController.php",
            "app/Models/Cart.php",
            "app/Models/Order.php",
            "app/Services/Billing.php",
        ]
        assert listing.truncated is False

    def test_include_tests(self, analyzer):
        paths = [f.path for f in analyzer.list_files("app", include_tests=True).files]
        assert "app/Models/tests/FakeTest.php" in paths

    def test_filter(self, analyzer):
        listing = analyzer.list_files("app", name_filter="cart")
        assert [f.name for f in listing.files] == ["Cart.php"]

    def test_limit_truncates(self, analyzer):
        listing = analyzer.list_files("app", limit=2)
        assert len(listing.files) == 2
        assert listing.truncated is True
        assert listing.to_dict()["total_files"] == 2

    def test_missing_directory(self, analyzer):
        with pytest.raises(SecurityError):
            analyzer.list_files("app/Nope")


class TestAnalyzeProject:
    def test_structure_health(self, analyzer):
        result = analyzer.analyze_project()
        health = result["structure_health"]

        assert health["expected"] == len(EXPECTED_DIRECTORIES)
        # app/Models, app/Http/Controllers, app/Services, resources/views, routes, tests
        assert health["present"] == 6
        assert health["score"] == 60
        assert "app/Repositories" in health["missing"]

    def test_php_file_counts(self, analyzer):
        directories = analyzer.analyze_project()["directories"]
        assert directories["app/Models"] == {"exists": True, "php_files": 3}
        assert directories["app/Providers"] == {"exists": False, "php_files": 0}
