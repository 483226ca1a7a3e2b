"""Tests de la CLI (Typer CliRunner)."""

import pytest
from typer.testing import CliRunner

from cli.doctor import probeable_operations
from cli.main import app

runner = CliRunner()


@pytest.fixture
def no_connection(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TSOFT_BASE_URL", "")
    monkeypatch.setenv("TSOFT_API_TOKEN", "")


def test_products_without_configuration_exits_with_hint(no_connection) -> None:
    result = runner.invoke(app, ["--quiet", "products"])

    assert result.exit_code == 2
    assert "TSOFT_BASE_URL" in result.output


def test_doctor_reports_missing_configuration(no_connection) -> None:
    result = runner.invoke(app, ["--quiet", "doctor", "run"])

    assert result.exit_code == 2
    assert "MISSING" in result.output


def test_probeable_operations_are_read_only_and_parameterless() -> None:
    names = {op.name for op in probeable_operations()}

    assert "products" in names
    assert "category tree" in names
    assert "product creation" not in names
    assert "order details" not in names
    assert "customer" not in names
