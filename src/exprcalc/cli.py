"""
exprcalc CLI - Entry point.

Commands:

- eval: evaluate one or more expressions
- parse: show the parsed tree of an expression
- check: report unknown names and arity problems without evaluating
- functions: list built-in constants and functions
- repl: evaluate expressions interactively
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from exprcalc._version import __version__
from exprcalc.calculator import format_error, format_value, try_calculate
from exprcalc.core.config import CalculatorConfig, find_config, load_config
from exprcalc.core.errors import ExprCalcError
from exprcalc.core.expression_lang.checker import check_names
from exprcalc.core.expression_lang.parser import parse_expr
from exprcalc.core.expression_lang.registry import REGISTRY
from exprcalc.core.ir.expressions import tree_depth

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="exprcalc",
    help="Evaluate arithmetic expressions safely.",
    no_args_is_help=True,
    add_completion=False,
)

_QUIT_WORDS = {"quit", "exit"}


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"exprcalc {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to exprcalc.toml (default: ./exprcalc.toml if present).",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """exprcalc CLI main callback for global options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config_path = config or find_config()
    if config_path is None:
        ctx.obj = CalculatorConfig()
        return

    try:
        ctx.obj = load_config(config_path)
    except ExprCalcError as e:
        typer.secho(f"Invalid config {config_path}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    logger.debug("Loaded config from %s", config_path)


def _get_config(ctx: typer.Context) -> CalculatorConfig:
    return ctx.obj if isinstance(ctx.obj, CalculatorConfig) else CalculatorConfig()


def _parse_variables(assignments: list[str] | None) -> dict[str, float]:
    """Turn ``name=value`` options into a variables mapping."""
    variables: dict[str, float] = {}
    for item in assignments or []:
        name, sep, raw = item.partition("=")
        name = name.strip()
        if not sep or not name:
            raise typer.BadParameter(f"expected name=value, got {item!r}", param_hint="--var")
        try:
            variables[name] = float(raw)
        except ValueError:
            raise typer.BadParameter(f"{raw!r} is not a number", param_hint="--var")
    return variables


@app.command("eval")
def eval_command(
    ctx: typer.Context,
    expressions: list[str] = typer.Argument(..., help="Expressions to evaluate."),
    var: list[str] | None = typer.Option(
        None,
        "--var",
        help="Bind a variable for this run, as name=value. Repeatable.",
    ),
    json_output: bool = typer.Option(False, "--json", help="Emit results as JSON."),
) -> None:
    """Evaluate expressions and print their results."""
    config = _get_config(ctx)
    variables = _parse_variables(var)

    results = [try_calculate(e, variables=variables, config=config) for e in expressions]

    if json_output:
        payload = [json.loads(r.model_dump_json()) for r in results]
        typer.echo(json.dumps(payload if len(payload) > 1 else payload[0], indent=2))
    else:
        show_source = len(results) > 1
        for result in results:
            if result.ok:
                assert result.value is not None
                text = format_value(result.value, config.output.precision)
                typer.echo(f"{result.expression} = {text}" if show_source else text)
            else:
                prefix = f"{result.expression}: " if show_source else ""
                typer.secho(f"{prefix}Error: {result.error}", fg=typer.colors.RED, err=True)

    if not all(r.ok for r in results):
        raise typer.Exit(code=1)


@app.command("parse")
def parse_command(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Expression to parse."),
    json_output: bool = typer.Option(False, "--json", help="Dump the tree as JSON."),
) -> None:
    """Show how an expression is parsed (fully parenthesized)."""
    config = _get_config(ctx)
    try:
        expr = parse_expr(expression, config.limits)
    except ExprCalcError as e:
        typer.secho(f"Error: {format_error(e)}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if json_output:
        typer.echo(json.dumps(expr.model_dump(), indent=2))
    else:
        typer.echo(str(expr))
        typer.echo(f"depth: {tree_depth(expr)}")


@app.command("check")
def check_command(
    ctx: typer.Context,
    expressions: list[str] = typer.Argument(..., help="Expressions to check."),
    var: list[str] | None = typer.Option(
        None,
        "--var",
        help="Treat name as bound, as name=value. Repeatable.",
    ),
) -> None:
    """Report syntax errors, unknown names and arity problems without evaluating."""
    config = _get_config(ctx)
    variables = _parse_variables(var)
    failed = False

    for expression in expressions:
        try:
            expr = parse_expr(expression, config.limits)
        except ExprCalcError as e:
            typer.secho(f"{expression}: {format_error(e)}", fg=typer.colors.RED)
            failed = True
            continue

        problems = check_names(expr, REGISTRY, variables)
        if not problems:
            typer.secho(f"{expression}: ok", fg=typer.colors.GREEN)
            continue

        failed = True
        for problem in problems:
            typer.secho(f"{expression}: {format_error(problem)}", fg=typer.colors.RED)

    if failed:
        raise typer.Exit(code=1)


@app.command("functions")
def functions_command() -> None:
    """List built-in constants and functions."""
    console = Console()

    table = Table(title="Built-in names")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Arity", justify="right")
    table.add_column("Description")

    for name, value in sorted(REGISTRY.constants.items()):
        table.add_row(name, "constant", "-", repr(value))
    for name, entry in sorted(REGISTRY.functions.items()):
        table.add_row(name, "function", str(entry.arity), entry.description)

    console.print(table)


@app.command("repl")
def repl_command(ctx: typer.Context) -> None:
    """Evaluate expressions interactively until EOF or 'quit'."""
    config = _get_config(ctx)
    console = Console()

    while True:
        try:
            line = console.input("[bold]> [/bold]")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        line = line.strip()
        if not line:
            continue
        if line in _QUIT_WORDS:
            break

        result = try_calculate(line, config=config)
        if result.ok:
            assert result.value is not None
            console.print(format_value(result.value, config.output.precision), highlight=False)
        else:
            console.print(f"Error: {result.error}", style="red", markup=False, highlight=False)


def main(argv: list[str] | None = None) -> None:
    app(args=argv)


if __name__ == "__main__":
    main()
