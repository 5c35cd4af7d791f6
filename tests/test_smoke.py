"""Smoke tests: package imports and public API wiring."""

import larascope
from larascope.adapters import HANDLER_REGISTRY
from larascope.analysis.domain import DOMAIN_ANALYZERS
from larascope.detector import ProjectClassifier, builtin_rules


def test_version():
    assert larascope.__version__ == "1.0.0"
    assert larascope.SERVICE_NAME == "larascope"


def test_builtin_handlers_are_registered():
    for rule in builtin_rules().values():
        assert rule.suggested_handler in HANDLER_REGISTRY


def test_builtin_categories_have_domain_analyzers():
    for category in builtin_rules():
        assert category in DOMAIN_ANALYZERS


def test_classifier_on_empty_dir(tmp_path):
    assert ProjectClassifier(tmp_path).detect_category() == "unknown"
