"""Command-line interface for culturekit."""

from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from culturekit.cli_errors import CLIError, ErrorCode, error_boundary
from culturekit.config import load_config
from culturekit.conversion import ValueKind, number_to_text
from culturekit.factory import Services, build_services
from culturekit.log import configure_logging
from culturekit.protocols import FormatOptions, LocaleInfo

app = typer.Typer(
    name="culturekit",
    help="Culture-aware formatting, parsing and conversion of dates and numbers",
    add_completion=False,
)

SAMPLE_NUMBER = 1234567.891
SAMPLE_DATE = datetime(2018, 2, 18, 19, 45, 57)

CultureOption = Annotated[
    Optional[str],
    typer.Option("--culture", "-c", help="Culture tag (default: the configured default culture)"),
]
DateOption = Annotated[
    Optional[str], typer.Option("--date", help="Date preset (short, medium, long, full)")
]
TimeOption = Annotated[
    Optional[str], typer.Option("--time", help="Time preset (short, medium, long, full)")
]
DateTimeOption = Annotated[
    Optional[str], typer.Option("--datetime", help="Combined date and time preset")
]
NumberOption = Annotated[
    Optional[str],
    typer.Option("--number", help="Number preset (decimal, integer, percent, scientific)"),
]
CurrencyOption = Annotated[
    Optional[str],
    typer.Option("--currency", help="ISO 4217 code, optionally with :symbol, :code or :name"),
]


def _services(ctx: typer.Context) -> Services:
    if ctx.obj is None:
        ctx.obj = build_services(load_config())
    return ctx.obj


@app.callback()
@error_boundary
def main(
    ctx: typer.Context,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", help="Configuration file (YAML, JSON or TOML)"),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)"),
    ] = None,
) -> None:
    """Format and parse values the way a culture writes them."""
    overrides = {"log_level": log_level} if log_level else None
    settings = load_config(config_path=config, overrides=overrides)
    configure_logging(settings.log_level)
    ctx.obj = build_services(settings)


def _parse_iso(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise CLIError(
            f"Invalid ISO 8601 date: {value!r}",
            ErrorCode.USAGE_ERROR,
            hint="Use a value such as 2018-02-18 or 2018-02-18T19:45:57.",
        ) from None


def _parse_number_argument(value: str) -> int | float | Decimal:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        raise CLIError(
            f"Invalid number: {value!r}",
            ErrorCode.USAGE_ERROR,
            hint="Use plain decimal notation such as 1234.5, 1e6, nan or -inf.",
        ) from None


def _render(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        return number_to_text(value)
    return "" if value is None else str(value)


@app.command(name="format-date")
@error_boundary
def format_date_cmd(
    ctx: typer.Context,
    value: Annotated[str, typer.Argument(help="ISO 8601 date or datetime")],
    culture: CultureOption = None,
    date_style: DateOption = None,
    time_style: TimeOption = None,
    datetime_style: DateTimeOption = None,
) -> None:
    """Format an ISO 8601 date in a culture.

    Examples:
        culturekit format-date 2018-02-18T19:45:57 -c de --date long
        culturekit format-date 2018-02-18T19:45:57 -c en-GB --datetime short
    """
    options = FormatOptions(date=date_style, time=time_style, datetime=datetime_style)
    services = _services(ctx)
    typer.echo(services.globalization.format_date(_parse_iso(value), culture, options))


@app.command(name="parse-date")
@error_boundary
def parse_date_cmd(
    ctx: typer.Context,
    text: Annotated[str, typer.Argument(help="Culture-formatted date text")],
    culture: CultureOption = None,
    date_style: DateOption = None,
    time_style: TimeOption = None,
    datetime_style: DateTimeOption = None,
) -> None:
    """Parse culture-formatted date text and print it as ISO 8601.

    Examples:
        culturekit parse-date 18.2.2018 -c de
        culturekit parse-date "18 February 2018" -c en-GB --date long
    """
    options = FormatOptions(date=date_style, time=time_style, datetime=datetime_style)
    services = _services(ctx)
    typer.echo(_render(services.globalization.parse_date(text, culture, options)))


@app.command(name="format-number")
@error_boundary
def format_number_cmd(
    ctx: typer.Context,
    value: Annotated[str, typer.Argument(help="Number in plain decimal notation")],
    culture: CultureOption = None,
    number_style: NumberOption = None,
    currency: CurrencyOption = None,
) -> None:
    """Format a number in a culture.

    Examples:
        culturekit format-number 1234567.891 -c de
        culturekit format-number 1234.56 -c en-GB --currency GBP
    """
    options = FormatOptions(number=number_style, currency=currency)
    services = _services(ctx)
    typer.echo(services.globalization.format_number(_parse_number_argument(value), culture, options))


@app.command(name="parse-number")
@error_boundary
def parse_number_cmd(
    ctx: typer.Context,
    text: Annotated[str, typer.Argument(help="Culture-formatted number text")],
    culture: CultureOption = None,
    number_style: NumberOption = None,
    currency: CurrencyOption = None,
) -> None:
    """Parse culture-formatted number text.

    Examples:
        culturekit parse-number 1.234.567,891 -c de
        culturekit parse-number "£1,234.56" -c en-GB --currency GBP
    """
    options = FormatOptions(number=number_style, currency=currency)
    services = _services(ctx)
    typer.echo(_render(services.globalization.parse_number(text, culture, options)))


@app.command(name="convert")
@error_boundary
def convert_cmd(
    ctx: typer.Context,
    value: Annotated[str, typer.Argument(help="Text to convert")],
    to: Annotated[str, typer.Option("--to", "-t", help="Target kind (string, number, boolean, date)")],
    culture: CultureOption = None,
) -> None:
    """Convert text to another value kind using the culture's rules.

    Examples:
        culturekit convert "1.234,5" --to number -c de
        culturekit convert TRUE --to boolean
    """
    try:
        target = ValueKind(to.lower())
        if target in (ValueKind.NONE, ValueKind.OTHER):
            raise ValueError(to)
    except ValueError:
        raise CLIError(
            f"Unknown target kind: {to!r}",
            ErrorCode.USAGE_ERROR,
            hint="Use one of: string, number, boolean, date.",
        ) from None

    services = _services(ctx)
    if culture:
        services.cultures.set_culture(culture)
    typer.echo(_render(services.converter.convert(value, target)))


@app.command(name="cultures")
@error_boundary
def cultures_cmd(ctx: typer.Context) -> None:
    """List the supported cultures and whether their data is loaded."""
    services = _services(ctx)
    console = Console()

    table = Table(show_header=True, header_style="bold")
    table.add_column("Culture", style="cyan")
    table.add_column("Default", justify="center")
    table.add_column("Loaded", justify="center")
    table.add_column("Direction", justify="center")
    table.add_column("Date")
    table.add_column("Number", justify="right")

    for culture in services.cultures.supported_cultures:
        loaded = services.provider.has_locale(culture)
        if loaded:
            sample_date = services.globalization.format_date(SAMPLE_DATE, culture)
            sample_number = services.globalization.format_number(SAMPLE_NUMBER, culture)
        else:
            sample_date = sample_number = "-"
        table.add_row(
            culture,
            "✓" if culture == services.cultures.default_culture else "",
            "[green]yes[/green]" if loaded else "[red]no[/red]",
            LocaleInfo.parse(culture).direction.value,
            sample_date,
            sample_number,
        )

    console.print(table)


if __name__ == "__main__":
    app()
