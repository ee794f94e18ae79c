"""CLI interface for the agent runtime.

This module provides a Typer-based command-line interface for trying the
input guard and the parameter resolver against the configured settings,
without running a model.
"""

import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from agent_runtime.config import get_settings
from agent_runtime.errors import ParameterResolutionError
from agent_runtime.security import GuardConfig, InputGuard, SecurityConfig
from agent_runtime.tools import ParameterResolver, ToolParameter

app = typer.Typer(help="Agent runtime developer tools")
console = Console()


@app.command(name="validate")
def validate_command(
    text: str = typer.Argument(..., help="Input text to run through the input guard"),
    sanitize: Optional[bool] = typer.Option(
        None, "--sanitize/--no-sanitize", help="Override the configured sanitization"
    ),
    max_length: Optional[int] = typer.Option(
        None, "--max-length", help="Override the configured maximum input length"
    ),
    detect: Optional[bool] = typer.Option(
        None,
        "--detect-malicious/--no-detect-malicious",
        help="Override the configured malicious-content detection",
    ),
) -> None:
    """Validate input the way the orchestrator admits it.

    Examples:
        agent-runtime validate "What's the weather in Paris?"
        agent-runtime validate "drop table users" --detect-malicious
    """
    guard_config = SecurityConfig.from_settings(get_settings()).guard
    overrides = {}
    if sanitize is not None:
        overrides["sanitize_input"] = sanitize
    if max_length is not None:
        overrides["max_input_length"] = max_length
    if detect is not None:
        overrides["detect_malicious_content"] = detect
    guard = InputGuard(GuardConfig(**{**guard_config.model_dump(), **overrides}))

    result = guard.validate(text)
    if not result.is_valid:
        console.print("[red]Input rejected:[/red]")
        for error in result.errors:
            console.print(f"  - {error}")
        raise typer.Exit(1)

    console.print("[green]Input accepted[/green]")
    console.print(result.sanitized_input, markup=False)


@app.command(name="resolve")
def resolve_command(
    text: str = typer.Argument(..., help="Raw tool input (free text or JSON object)"),
    schema: Path = typer.Option(
        ...,
        "--schema",
        "-s",
        exists=True,
        dir_okay=False,
        help='JSON parameter schema, e.g. {"city": {"type": "string", "required": true}}',
    ),
) -> None:
    """Resolve tool input against a parameter schema.

    Examples:
        agent-runtime resolve "weather in Paris" --schema weather.json
        agent-runtime resolve '{"a": 2, "b": 3}' --schema calculator.json
    """
    try:
        raw_schema = json.loads(schema.read_text(encoding="utf-8"))
        parameters = {
            name: ToolParameter.model_validate(definition)
            for name, definition in raw_schema.items()
        }
    except (json.JSONDecodeError, AttributeError, ValidationError) as e:
        console.print(f"[red]Invalid schema: {e}[/red]")
        raise typer.Exit(2) from e

    try:
        resolved = ParameterResolver().resolve(text, parameters, tool_name=schema.stem)
    except ParameterResolutionError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e

    console.print(json.dumps(resolved, indent=2), markup=False)


@app.command(name="config")
def config_command(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON instead of a table"),
) -> None:
    """Show the effective admission configuration."""
    settings = get_settings()
    security = SecurityConfig.from_settings(settings)
    data = {
        "environment": settings.environment.value,
        "rate_limit": security.rate_limit.model_dump() if security.rate_limit else None,
        "guard": security.guard.model_dump(),
        "authentication": {
            "scheme": security.authentication.scheme,
            "api_keys": len(security.authentication.api_keys),
        },
        "orchestrator_max_iterations": settings.orchestrator_max_iterations,
        "default_model": settings.default_model,
    }

    if json_output:
        console.print(json.dumps(data, indent=2), markup=False)
        return

    table = Table(title="Agent Runtime Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white", overflow="fold")
    for key, value in data.items():
        table.add_row(key, "disabled" if value is None else json.dumps(value))
    console.print(table)


if __name__ == "__main__":
    app()
