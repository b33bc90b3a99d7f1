"""CLI interface for fieldverify using Typer framework."""

import importlib
import json as jsonlib
import logging
import sys
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fieldverify import __description__, __version__
from fieldverify.config import LogLevel, OutputFormat, VerifyConfig, load_config
from fieldverify.expression import parse_expression
from fieldverify.kinds import is_record_type
from fieldverify.walker import RecordVerifier

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="fieldverify",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

VALID_FORMATS = ["table", "json"]

_LOG_LEVELS = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"fieldverify version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """fieldverify - declarative field-level validation for flat records."""


def _load_settings(config: Path | None, format: str | None) -> tuple[VerifyConfig, str]:
    """Load configuration, apply its logging level and pick the output format."""
    try:
        verify_config = load_config(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    logging.basicConfig(level=_LOG_LEVELS[LogLevel(verify_config.logging.level)])

    output_format = format or OutputFormat(verify_config.output.format).value
    if output_format not in VALID_FORMATS:
        console.print(f"[red]Error:[/red] Invalid format '{output_format}'. Must be one of: {', '.join(VALID_FORMATS)}")
        raise typer.Exit(1)

    return verify_config, output_format


def _load_target(target: str) -> Any:
    """Import ``module:attribute`` and return the attribute."""
    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Target '{target}' must have the form module:attribute")

    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    module = importlib.import_module(module_name)
    obj = module
    for part in attribute.split("."):
        obj = getattr(obj, part)
    return obj


def _build_record(record_type: type, data_file: Path) -> Any:
    """Instantiate a record class from a JSON object file."""
    with open(data_file, encoding="utf-8") as f:
        data = jsonlib.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{data_file} must contain a JSON object")

    if issubclass(record_type, BaseModel):
        return record_type.model_validate(data)
    return record_type(**data)


def _print_json(payload: dict) -> None:
    console.print(jsonlib.dumps(payload, indent=2), markup=False, highlight=False, soft_wrap=True)


@app.command()
def check(
    target: Annotated[
        str,
        typer.Argument(help="Record to verify as module:attribute")
    ],
    data: Annotated[
        Optional[Path],
        typer.Option("--data", "-d", help="JSON file to build the record from; TARGET must then be a record class")
    ] = None,
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: table, json (default: from config, else table)")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .fieldverify.json)")
    ] = None,
) -> None:
    """Verify a record against the rules declared on its fields."""
    verify_config, output_format = _load_settings(config, format)

    try:
        obj = _load_target(target)
        if data is not None:
            if not is_record_type(obj):
                raise ValueError(f"Target '{target}' must be a dataclass or pydantic model class when --data is given")
            obj = _build_record(obj, data)
    except (ImportError, AttributeError, ValueError, TypeError, OSError, ModelValidationError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    logger.info(f"Checking {target}")
    error = RecordVerifier(verify_config).check(obj)
    logger.info(f"Finished checking {target}: {'fail' if error else 'pass'}")

    if output_format == "json":
        payload: dict[str, Any] = {"target": target, "status": "fail" if error else "pass"}
        if error is not None:
            payload["error"] = error.to_dict()
        _print_json(payload)
    elif error is None:
        console.print("[green]Status: PASS[/green]")
    else:
        console.print("[red]Status: FAIL[/red]")
        console.print(f"Category: {error.category}")
        if error.field:
            console.print(f"Field: {escape(error.field)}")
        console.print(f"Message: {escape(error.message)}", soft_wrap=True)

    raise typer.Exit(1 if error else 0)


@app.command()
def explain(
    expression: Annotated[
        str,
        typer.Argument(help="Rule expression, e.g. 'required,min=3'")
    ],
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: table, json (default: from config, else table)")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .fieldverify.json)")
    ] = None,
) -> None:
    """Show how a rule expression is split into clauses."""
    _, output_format = _load_settings(config, format)

    clauses = parse_expression(expression)

    if output_format == "json":
        _print_json({
            "expression": expression,
            "clauses": [
                {
                    "keyword": clause.keyword,
                    "value": clause.raw_value,
                    "recognized": clause.is_recognized,
                    "literal": clause.literal_kind.value,
                }
                for clause in clauses
            ]
        })
        return

    table = Table(title="Rule Clauses")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Keyword", style="cyan")
    table.add_column("Value", style="white")
    table.add_column("Recognized", style="white")
    table.add_column("Literal", style="white")

    for index, clause in enumerate(clauses, start=1):
        recognized = "[green]yes[/green]" if clause.is_recognized else "[yellow]ignored[/yellow]"
        table.add_row(
            str(index),
            escape(repr(clause.keyword)),
            escape(clause.raw_value) if clause.raw_value is not None else "-",
            recognized,
            clause.literal_kind.value,
        )

    console.print(table)


if __name__ == "__main__":
    app()
