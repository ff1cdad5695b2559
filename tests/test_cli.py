"""Tests for the culturekit command-line interface."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from culturekit.cli import app
from culturekit.cli_errors import CLIError, ErrorCode, classify_error
from culturekit.config import ConfigValidationError
from culturekit.errors import ParseError, UnsupportedCultureError


ENV = {"CULTUREKIT_SUPPORTED_CULTURES": "en-GB,de,ar-EG"}


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner: CliRunner, *args: str, env: dict[str, str] | None = None):
    return runner.invoke(app, list(args), env={**ENV, **(env or {})})


class TestClassifyError:
    """Test the error to exit code mapping."""

    def test_library_errors(self):
        assert classify_error(ParseError("x", "en"))[0] == ErrorCode.PARSE_ERROR
        code, hint = classify_error(UnsupportedCultureError("fr"))
        assert code == ErrorCode.UNSUPPORTED_CULTURE
        assert "supported_cultures" in hint

    def test_config_errors(self):
        assert classify_error(ConfigValidationError(["bad"]))[0] == ErrorCode.CONFIG_INVALID

    def test_cli_error(self):
        error = CLIError("boom", ErrorCode.USAGE_ERROR, hint="try again")
        assert classify_error(error) == (ErrorCode.USAGE_ERROR, "try again")
        assert str(error) == "boom\nHint: try again"

    def test_unknown_error(self):
        assert classify_error(RuntimeError())[0] == ErrorCode.GENERAL_ERROR


class TestDateCommands:
    """Test format-date and parse-date."""

    def test_format_date_default_culture(self, runner):
        result = invoke(runner, "format-date", "2018-02-18T19:45:57")
        assert result.exit_code == 0
        assert result.stdout.strip() == "18/02/2018"

    def test_format_date_with_preset(self, runner):
        result = invoke(runner, "format-date", "2018-02-18T19:45:57", "-c", "de", "--date", "long")
        assert result.exit_code == 0
        assert result.stdout.strip() == "18. Februar 2018"

    def test_format_datetime(self, runner):
        result = invoke(runner, "format-date", "2018-02-18T19:45:57", "--datetime", "short")
        assert result.stdout.strip() == "18/02/2018, 19:45"

    def test_format_date_invalid_iso(self, runner):
        result = invoke(runner, "format-date", "yesterday")
        assert result.exit_code == ErrorCode.USAGE_ERROR.value
        assert "Invalid ISO 8601 date" in result.output

    def test_format_date_unsupported_culture(self, runner):
        result = invoke(runner, "format-date", "2018-02-18", "-c", "fr")
        assert result.exit_code == ErrorCode.UNSUPPORTED_CULTURE.value
        assert "Hint:" in result.output

    def test_format_date_unknown_preset(self, runner):
        result = invoke(runner, "format-date", "2018-02-18", "--date", "tiny")
        assert result.exit_code == ErrorCode.USAGE_ERROR.value

    def test_parse_date(self, runner):
        result = invoke(runner, "parse-date", "18.2.2018", "-c", "de")
        assert result.exit_code == 0
        assert result.stdout.strip() == "2018-02-18T00:00:00"

    def test_parse_date_invalid(self, runner):
        result = invoke(runner, "parse-date", "30/02/2018")
        assert result.exit_code == ErrorCode.PARSE_ERROR.value
        assert "Error:" in result.output


class TestNumberCommands:
    """Test format-number and parse-number."""

    def test_format_number(self, runner):
        result = invoke(runner, "format-number", "1234567.891", "-c", "de")
        assert result.exit_code == 0
        assert result.stdout.strip() == "1.234.567,891"

    def test_format_currency(self, runner):
        result = invoke(runner, "format-number", "1234.56", "--currency", "GBP")
        assert result.stdout.strip() == "£1,234.56"

    def test_format_percent(self, runner):
        result = invoke(runner, "format-number", "0.256", "--number", "percent")
        assert result.stdout.strip() == "26%"

    def test_format_number_invalid_argument(self, runner):
        result = invoke(runner, "format-number", "lots")
        assert result.exit_code == ErrorCode.USAGE_ERROR.value
        assert "Invalid number" in result.output

    def test_format_number_unknown_preset(self, runner):
        result = invoke(runner, "format-number", "1", "--number", "roman")
        assert result.exit_code == ErrorCode.USAGE_ERROR.value

    def test_parse_number(self, runner):
        result = invoke(runner, "parse-number", "1.234.567,891", "-c", "de")
        assert result.exit_code == 0
        assert result.stdout.strip() == "1234567.891"

    def test_parse_integer(self, runner):
        result = invoke(runner, "parse-number", "1,234")
        assert result.stdout.strip() == "1234"

    def test_parse_currency(self, runner):
        result = invoke(runner, "parse-number", "£1,234.56", "--currency", "GBP")
        assert result.stdout.strip() == "1234.56"

    def test_parse_number_invalid(self, runner):
        result = invoke(runner, "parse-number", "twelve")
        assert result.exit_code == ErrorCode.PARSE_ERROR.value


class TestConvertCommand:
    """Test convert."""

    def test_convert_number(self, runner):
        result = invoke(runner, "convert", "1.234,5", "--to", "number", "-c", "de")
        assert result.exit_code == 0
        assert result.stdout.strip() == "1234.5"

    def test_convert_boolean(self, runner):
        assert invoke(runner, "convert", "TRUE", "--to", "boolean").stdout.strip() == "true"
        assert invoke(runner, "convert", "1", "-t", "boolean").stdout.strip() == "false"

    def test_convert_date(self, runner):
        result = invoke(runner, "convert", "18/02/2018", "--to", "date")
        assert result.stdout.strip() == "2018-02-18T00:00:00"

    def test_convert_failure(self, runner):
        result = invoke(runner, "convert", "abc", "--to", "number")
        assert result.exit_code == ErrorCode.CONVERSION_ERROR.value

    def test_convert_unknown_kind(self, runner):
        result = invoke(runner, "convert", "abc", "--to", "other")
        assert result.exit_code == ErrorCode.USAGE_ERROR.value
        assert "Unknown target kind" in result.output


class TestCulturesCommand:
    """Test cultures."""

    def test_lists_supported_cultures(self, runner):
        result = invoke(runner, "cultures")
        assert result.exit_code == 0
        for culture in ("en-GB", "de", "ar-EG"):
            assert culture in result.stdout
        assert "rtl" in result.stdout

    def test_reports_missing_data(self, runner):
        result = invoke(runner, "cultures", env={"CULTUREKIT_SUPPORTED_CULTURES": "en-GB,pt-BR"})
        assert result.exit_code == 0
        assert "pt-BR" in result.stdout
        assert "no" in result.stdout


class TestConfiguration:
    """Test global options."""

    def test_config_file(self, runner, tmp_path: Path):
        path = tmp_path / "culturekit.yaml"
        path.write_text("culturekit:\n  supported_cultures: [de, en-GB]\n", encoding="utf-8")
        result = runner.invoke(app, ["--config", str(path), "format-number", "1234.5"], env={})
        assert result.exit_code == 0
        assert result.stdout.strip() == "1.234,5"

    def test_default_culture_from_environment(self, runner):
        result = invoke(runner, "format-number", "1234.5", env={"CULTUREKIT_DEFAULT_CULTURE": "de"})
        assert result.stdout.strip() == "1.234,5"

    def test_invalid_configuration(self, runner):
        result = invoke(runner, "cultures", env={"CULTUREKIT_DEFAULT_CULTURE": "fr"})
        assert result.exit_code == ErrorCode.CONFIG_INVALID.value

    def test_missing_config_file(self, runner, tmp_path: Path):
        result = invoke(runner, "--config", str(tmp_path / "missing.yaml"), "cultures")
        assert result.exit_code == ErrorCode.CONFIG_INVALID.value

    def test_invalid_log_level(self, runner):
        result = invoke(runner, "--log-level", "chatty", "cultures")
        assert result.exit_code == ErrorCode.CONFIG_INVALID.value
