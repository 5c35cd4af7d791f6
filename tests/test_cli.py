"""CLI tests via typer's CliRunner."""

import json
import logging

import pytest
import structlog
from typer.testing import CliRunner

from larascope.cli import app

runner = CliRunner()

# keep stdout pure JSON
QUIET = {"LARASCOPE_LOG_LEVEL": "error"}


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    structlog.reset_defaults()
    logging.basicConfig(force=True, level=logging.WARNING)


def _invoke(*args):
    result = runner.invoke(app, list(args), env=QUIET)
    return result


class TestCommands:
    def test_info(self, tmp_path):
        result = _invoke("info", "--project-root", str(tmp_path))
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["service"] == "larascope"
        assert payload["project_root"] == str(tmp_path)

    def test_detect(self, ecommerce_project):
        result = _invoke("detect", "--project-root", str(ecommerce_project))
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["type"] == "ecommerce"
        assert payload["suggested_handler"] == "ecommerce"
        assert "ecommerce" in payload["scores"]

    def test_describe(self, ecommerce_project):
        result = _invoke("describe", "--project-root", str(ecommerce_project))
        assert result.exit_code == 0
        assert json.loads(result.stdout)["name"] == "acme/shop"

    def test_analyze(self, ecommerce_project):
        result = _invoke("analyze", "--project-root", str(ecommerce_project), "--external")
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["analysis_metadata"]["status"] == "success"
        assert payload["external_tool_results"]["phpstan_analysis"]["status"] == "disabled"

    def test_list_files(self, ecommerce_project):
        result = _invoke("list-files", "app", "--filter", "cart", "--project-root", str(ecommerce_project))
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert [f["name"] for f in payload["files"]] == ["Cart.php"]

    def test_list_files_default_directory(self, ecommerce_project):
        result = _invoke("list-files", "--project-root", str(ecommerce_project))
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["directory"] == "app"
        assert payload["total_files"] == 3

    def test_read_file(self, ecommerce_project):
        result = _invoke("read-file", "app/Models/Order.php", "--project-root", str(ecommerce_project))
        assert result.exit_code == 0
        assert json.loads(result.stdout)["path"] == "app/Models/Order.php"

    def test_read_file_rejected(self, ecommerce_project):
        result = _invoke("read-file", "../etc/passwd", "--project-root", str(ecommerce_project))
        assert result.exit_code == 1
