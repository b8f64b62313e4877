"""Tests for the CLI and the browser manager guards."""

import pytest
from typer.testing import CliRunner

from netledger.browser.manager import BrowserManager
from netledger.cli.app import cli, print_render
from netledger.network.models import NotFound, OpaqueBody, TextBody

runner = CliRunner()


def test_version_command():
    result = runner.invoke(cli, ["version"])
    assert result.exit_code == 0
    assert "netledger" in result.stdout


def test_print_render_reports_errors():
    assert print_render("x", NotFound(request_id="x")) is False
    assert print_render("x", TextBody(text="hello")) is True
    assert print_render("x", OpaqueBody(content_type="font/woff2")) is True


@pytest.mark.parametrize("accessor", ["page", "context", "ledger"])
def test_manager_accessors_require_start(accessor):
    with pytest.raises(RuntimeError, match="Browser not started"):
        getattr(BrowserManager(), accessor)
