"""Unit tests for ProjectClassifier.

Covers the host-marker and manifest gates, scoring and tie-breaks, the
score floor, result caching and cache invalidation on rule registration.
"""

import pytest

from larascope.core.config import Settings
from larascope.detector.classifier import ProjectClassifier
from larascope.detector.prober import IndicatorProber
from larascope.detector.rules import IndicatorSet, Rule, RuleValidationError


class CountingProber(IndicatorProber):
    """IndicatorProber that counts every existence query."""

    def __init__(self, project_root):
        super().__init__(project_root)
        self.calls = 0

    def file_exists(self, relative_path):
        self.calls += 1
        return super().file_exists(relative_path)

    def directory_exists(self, relative_path):
        self.calls += 1
        return super().directory_exists(relative_path)


def _plain_manifest():
    return {"name": "acme/app", "require": {"php": "^8.2", "laravel/framework": "^10.0"}}


class TestGates:
    def test_missing_host_marker_is_unknown(self, make_project):
        root = make_project(
            artisan=False,
            manifest={"require": {"stripe/stripe-php": "^13.0"}},
            files=("app/Models/Cart.php",),
        )
        classifier = ProjectClassifier(root)
        assert classifier.detect_category() == "unknown"
        assert classifier.get_confidence() == 0.0

    def test_missing_manifest_is_unknown(self, make_project):
        root = make_project()
        assert ProjectClassifier(root).detect_category() == "unknown"

    def test_corrupt_manifest_is_unknown(self, make_project):
        root = make_project(manifest_text="{ this is not json", files=("routes/api.php",))
        classifier = ProjectClassifier(root)
        assert classifier.detect_category() == "unknown"
        assert classifier.get_confidence() == 0.0

    def test_custom_host_marker(self, make_project):
        root = make_project(artisan=False, manifest=_plain_manifest())
        (root / "bootstrap.php").write_text("")
        assert ProjectClassifier(root, host_marker="bootstrap.php").detect_category() == "generic"


class TestScenarios:
    def test_ecommerce(self, ecommerce_project):
        classifier = ProjectClassifier(ecommerce_project)
        assert classifier.detect_category() == "ecommerce"
        assert classifier.get_confidence() > 0.1
        assert classifier.get_confidence() == pytest.approx(6 / 9)
        assert classifier.suggested_handler() == "ecommerce"

    def test_generic_fallback(self, make_project):
        root = make_project(manifest=_plain_manifest())
        classifier = ProjectClassifier(root)
        assert classifier.detect_category() == "generic"
        assert classifier.get_confidence() == 0.5
        assert classifier.suggested_handler() == "generic"

    def test_api_service(self, make_project):
        root = make_project(
            manifest={"require": {"laravel/sanctum": "^3.0"}},
            files=("routes/api.php",),
            directories=("app/Http/Controllers/API", "app/Http/Resources"),
        )
        classifier = ProjectClassifier(root)
        assert classifier.detect_category() == "api_service"
        assert classifier.get_confidence() == pytest.approx(4 / 7 * 0.8)

    def test_generic_confidence_configurable(self, make_project):
        root = make_project(manifest=_plain_manifest())
        assert ProjectClassifier(root, generic_confidence=0.3).get_confidence() == 0.3

    def test_determinism_across_instances(self, ecommerce_project):
        results = {
            (c.detect_category(), c.get_confidence())
            for c in (ProjectClassifier(ecommerce_project) for _ in range(3))
        }
        assert len(results) == 1

    def test_reason_recorded(self, ecommerce_project):
        assert ProjectClassifier(ecommerce_project).classify().reason == "highest score"


class TestFloorAndZeroSignals:
    def test_score_below_floor_is_generic(self, make_project):
        # one of ten signals at weight 0.5 -> 0.05
        root = make_project(manifest=_plain_manifest(), files=("weak/one.php",))
        classifier = ProjectClassifier(root)
        classifier.register_custom_rules({
            "weak": Rule(
                category="weak",
                indicators=IndicatorSet(files=tuple(f"weak/{n}.php" for n in (
                    "one", "two", "three", "four", "five", "six", "seven", "eight", "nine", "ten",
                ))),
                confidence_weight=0.5,
            )
        })
        result = classifier.classify()

        assert result.scores["weak"].score == pytest.approx(0.05)
        assert result.category == "generic"
        assert "below floor" in result.reason

    def test_floor_configurable(self, make_project):
        root = make_project(manifest=_plain_manifest(), files=("routes/api.php",))
        # api_service: 1/7 * 0.8 ~= 0.114
        assert ProjectClassifier(root).detect_category() == "api_service"
        assert ProjectClassifier(root, score_floor=0.2).detect_category() == "generic"

    def test_zero_signal_rule_never_selected(self, make_project):
        root = make_project(manifest=_plain_manifest())
        classifier = ProjectClassifier(root)
        classifier.register_custom_rules({"empty": Rule(category="empty", confidence_weight=1.0)})
        assert classifier.detect_category() == "generic"
        assert "empty" not in classifier.classify().scores


def _nine_signal_rule(category, hit):
    """Custom rule with nine file signals, only `hit` present in the project."""
    return {
        category: {
            "indicators": {"files": [hit] + [f"{category}/missing{n}.php" for n in range(8)]},
            "confidence_weight": 1.0,
        }
    }


class TestTieBreak:
    def _tied_project(self, make_project):
        # ecommerce 1/9 * 1.0, storefront 1/9 * 1.0
        return make_project(
            manifest={"require": {"stripe/stripe-php": "^13.0"}},
            files=("app/Storefront.php",),
        )

    def _tied_scores(self, classifier):
        classifier.register_custom_rules(_nine_signal_rule("storefront", "app/Storefront.php"))
        scores = classifier.classify().scores
        assert scores["storefront"].score == scores["ecommerce"].score == pytest.approx(1 / 9)
        return classifier

    def test_builtin_beats_custom_on_equal_score(self, make_project):
        root = self._tied_project(make_project)
        classifier = self._tied_scores(ProjectClassifier(root))
        assert classifier.detect_category() == "ecommerce"

    def test_catalog_order_between_custom_rules(self, make_project):
        root = make_project(manifest=_plain_manifest(), files=("app/Blog.php", "app/News.php"))
        classifier = ProjectClassifier(root)
        classifier.register_custom_rules(_nine_signal_rule("news", "app/News.php"))
        classifier.register_custom_rules(_nine_signal_rule("blog", "app/Blog.php"))
        assert classifier.classify().scores["news"].score == classifier.classify().scores["blog"].score
        assert classifier.detect_category() == "news"

    def test_priority_list_wins(self, make_project):
        root = self._tied_project(make_project)
        classifier = self._tied_scores(ProjectClassifier(root, category_priority=["storefront"]))
        assert classifier.detect_category() == "storefront"

    def test_priority_list_ignored_without_tie(self, ecommerce_project):
        (ecommerce_project / "routes").mkdir()
        (ecommerce_project / "routes" / "api.php").write_text("<?php\n")
        classifier = ProjectClassifier(ecommerce_project, category_priority=["api_service"])
        assert classifier.detect_category() == "ecommerce"

    def test_from_settings_uses_priority(self, make_project):
        root = self._tied_project(make_project)
        settings = Settings(project_root=root, category_priority=["storefront", "ecommerce"])
        classifier = self._tied_scores(ProjectClassifier.from_settings(settings))
        assert classifier.detect_category() == "storefront"


class TestCaching:
    def test_second_call_does_not_probe(self, ecommerce_project):
        prober = CountingProber(ecommerce_project)
        classifier = ProjectClassifier(ecommerce_project, prober=prober)

        first = classifier.detect_category()
        probes_after_first = prober.calls
        second = classifier.detect_category()
        classifier.get_confidence()

        assert first == second
        assert probes_after_first > 0
        assert prober.calls == probes_after_first

    def test_manifest_loaded_once(self, ecommerce_project):
        classifier = ProjectClassifier(ecommerce_project)
        classifier.detect_category()
        (ecommerce_project / "composer.json").write_text("{broken")
        classifier.register_custom_rules({"blog": {"indicators": {"files": ["x.php"]}}})
        assert classifier.detect_category() == "ecommerce"

    def test_registration_invalidates_cache(self, make_project):
        root = make_project(manifest=_plain_manifest(), directories=("app/Blog",))
        prober = CountingProber(root)
        classifier = ProjectClassifier(root, prober=prober)
        assert classifier.detect_category() == "generic"
        probes = prober.calls

        classifier.register_custom_rules({
            "blog": {"indicators": {"directories": ["app/Blog"]}, "confidence_weight": 0.9}
        })

        assert classifier.detect_category() == "blog"
        assert prober.calls > probes

    def test_invalid_registration_keeps_catalog_and_cache(self, ecommerce_project):
        classifier = ProjectClassifier(ecommerce_project)
        classifier.detect_category()
        cached = classifier.classify()

        with pytest.raises(RuleValidationError):
            classifier.register_custom_rules({
                "blog": {"confidence_weight": 0.4},
                "broken": {"confidence_weight": 7},
            })

        assert "blog" not in classifier.list_rules()
        assert classifier.classify() is cached


class TestCatalogQueries:
    def test_list_rules_includes_custom(self, tmp_path):
        classifier = ProjectClassifier(tmp_path)
        classifier.register_custom_rules({"blog": {}})
        assert list(classifier.list_rules()) == ["ecommerce", "api_service", "admin_dashboard", "blog"]

    def test_custom_rule_overrides_builtin(self, tmp_path):
        classifier = ProjectClassifier(tmp_path)
        classifier.register_custom_rules({"ecommerce": {"suggested_handler": "shop"}})
        assert classifier.suggested_handler_for("ecommerce") == "shop"

    def test_handler_for_unknown_category(self, tmp_path):
        classifier = ProjectClassifier(tmp_path)
        assert classifier.suggested_handler_for("unknown") == "generic"
        assert classifier.suggested_handler_for("nope") == "generic"

    def test_empty_registration_is_noop(self, ecommerce_project):
        classifier = ProjectClassifier(ecommerce_project)
        cached = classifier.classify()
        classifier.register_custom_rules({})
        assert classifier.classify() is cached


class TestSignalContainment:
    def test_absolute_signal_outside_project_never_hits(self, tmp_path):
        secret = tmp_path / "secret.php"
        secret.write_text("<?php\n")
        root = tmp_path / "project"
        root.mkdir()
        (root / "artisan").write_text("")
        (root / "composer.json").write_text('{"require": {}}')

        classifier = ProjectClassifier(root)
        classifier.register_custom_rules({"x": {"indicators": {"files": [str(secret)]}, "confidence_weight": 1.0}})

        assert classifier.detect_category() == "generic"
        assert "x" not in classifier.classify().scores
