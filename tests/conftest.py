"""Shared fixtures: build fake Laravel project trees under tmp_path."""

import json
from pathlib import Path
from typing import Callable, Optional

import pytest


def build_project(
    root: Path,
    *,
    artisan: bool = True,
    manifest: Optional[dict] = None,
    manifest_text: Optional[str] = None,
    files: tuple[str, ...] = (),
    directories: tuple[str, ...] = (),
    sources: Optional[dict[str, str]] = None,
) -> Path:
    """Create a project tree. `sources` maps relative paths to file contents."""
    if artisan:
        (root / "artisan").write_text("#!/usr/bin/env php\n")
    if manifest_text is not None:
        (root / "composer.json").write_text(manifest_text)
    elif manifest is not None:
        (root / "composer.json").write_text(json.dumps(manifest))
    for directory in directories:
        (root / directory).mkdir(parents=True, exist_ok=True)
    for file in files:
        path = root / file
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("<?php\n")
    for file, content in (sources or {}).items():
        path = root / file
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


@pytest.fixture
def make_project(tmp_path) -> Callable[..., Path]:
    def _make(**kwargs) -> Path:
        return build_project(tmp_path, **kwargs)

    return _make


@pytest.fixture
def ecommerce_project(make_project) -> Path:
    return make_project(
        manifest={
            "name": "acme/shop",
            "description": "Acme storefront",
            "require": {"php": "^8.2", "laravel/framework": "^10.0", "stripe/stripe-php": "^13.0"},
            "require-dev": {"phpunit/phpunit": "^10.0"},
        },
        files=("app/Models/Cart.php", "app/Models/Product.php", "app/Models/Order.php"),
        directories=("app/Services/Cart", "app/Services/Payment"),
    )
