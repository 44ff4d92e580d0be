"""Typer-based CLI entry point."""

from __future__ import annotations

import logging
import math
import numbers
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .core import round_value
from .distributions import Parametrization, get_distribution, iter_distributions
from .sampling import SamplingConfig, sample_parametrization

app = typer.Typer(help="distlab probability distribution explorer.")
console = Console()

DISTRIBUTION_ARGUMENT = typer.Argument(..., help="Distribution name (see `distlab registry`).")
POINT_ARGUMENT = typer.Argument(..., help="Point at which to evaluate the density and CDF.")

PARAMETRIZATION_OPTION = typer.Option(
    None,
    "--parametrization",
    "-P",
    help="Parametrization name (defaults to the distribution's first parametrization).",
    show_default=False,
)

PARAM_OPTION = typer.Option(
    None,
    "--param",
    "-p",
    help="Parameter value as name=value (repeat for multiples; omitted ones use defaults).",
    show_default=False,
)

KIND_OPTION = typer.Option("pdf", "--kind", "-k", help="Curve to sample: pdf or cdf.")
POINTS_OPTION = typer.Option(200, "--points", help="Sample points for continuous curves.")
OUTPUT_OPTION = typer.Option(
    None,
    "--output",
    "-o",
    help="Optional path to write the sampled curve as CSV.",
    show_default=False,
)

VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable verbose output.")
VERSION_OPTION = typer.Option(False, "--version", help="Show version and exit.")


@app.callback(invoke_without_command=True)
def cli_callback(  # noqa: B008
    ctx: typer.Context,
    verbose: bool = VERBOSE_OPTION,
    version: bool = VERSION_OPTION,
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    if verbose or version:
        console.print(f"[bold green]distlab {__version__}[/bold green]")
    if ctx.invoked_subcommand is None and not ctx.resilient_parsing:
        raise typer.Exit()


def _format_metric(value: Any, digits: int = 4) -> str:
    if value is None:
        return "undefined"
    if isinstance(value, numbers.Real):
        val = float(value)
        if math.isnan(val):
            return "undefined"
        if math.isinf(val):
            return "inf" if val > 0 else "-inf"
        return f"{round_value(val, digits):g}"
    return str(value)


def _resolve_parametrization(distribution: str, parametrization: str | None) -> Parametrization:
    try:
        return get_distribution(distribution).get_parametrization(parametrization)
    except KeyError as exc:
        console.print(f"[red]{exc.args[0]}[/red]")
        raise typer.Exit(code=1) from exc


def _parse_params(parametrization: Parametrization, items: list[str] | None) -> dict[str, float]:
    """Combine ``name=value`` items with the parameter defaults."""
    values = dict(zip(parametrization.parameter_names, parametrization.defaults(), strict=True))
    for item in items or []:
        name, sep, raw = item.partition("=")
        name = name.strip()
        try:
            if not sep:
                raise ValueError(f"Expected name=value, got '{item}'.")
            if name not in values:
                raise ValueError(
                    f"Unknown parameter '{name}'. Expected one of {list(values)}."
                )
            values[name] = float(raw)
        except ValueError as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(code=1) from exc
    if not parametrization.is_valid(values):
        pretty = ", ".join(f"{key}={val:g}" for key, val in values.items())
        console.print(f"[red]Invalid parameters for '{parametrization.name}': {pretty}[/red]")
        raise typer.Exit(code=1)
    return values


@app.command()
def registry() -> None:
    """List catalogued distributions."""
    table = Table(title="Distributions")
    table.add_column("Name", no_wrap=True)
    table.add_column("Label")
    table.add_column("Type", no_wrap=True)
    table.add_column("Parametrizations", overflow="fold")
    for dist in iter_distributions():
        table.add_row(dist.name, dist.label, dist.kind, ", ".join(dist.list_parametrizations()))
    console.print(table)


@app.command()
def describe(  # noqa: B008
    distribution: str = DISTRIBUTION_ARGUMENT,
    parametrization: str | None = PARAMETRIZATION_OPTION,
) -> None:
    """Show the parameters and quantities of a parametrization."""
    chosen = _resolve_parametrization(distribution, parametrization)
    dist = get_distribution(distribution)
    console.print(f"[bold]{dist.label}[/bold] ({dist.kind}) - {chosen.name}")
    if dist.description:
        console.print(dist.description)
    if dist.reference:
        console.print(f"{dist.reference.name}: {dist.reference.link}")

    table = Table(title="Parameters")
    for column in ("Name", "Label", "Legal range", "Slider range", "Scale", "Default", "Kind"):
        table.add_column(column, no_wrap=True)
    table.add_column("Note", overflow="fold")
    for param in chosen.parameters:
        table.add_row(
            param.name,
            param.label,
            f"[{param.legal_range[0]:g}, {param.legal_range[1]:g}]",
            f"[{param.interactive_range[0]:g}, {param.interactive_range[1]:g}]",
            "log" if param.log_scale else "linear",
            f"{param.default:g}",
            param.kind,
            param.description,
        )
    console.print(table)

    quantities = Table(title="Quantities")
    quantities.add_column("Quantity")
    quantities.add_column("Formula", overflow="fold")
    for name, quantity in chosen.quantities.items():
        quantities.add_row(name, quantity.display)
    console.print(quantities)


@app.command()
def evaluate(  # noqa: B008
    distribution: str = DISTRIBUTION_ARGUMENT,
    x: float = POINT_ARGUMENT,
    parametrization: str | None = PARAMETRIZATION_OPTION,
    params: list[str] | None = PARAM_OPTION,
) -> None:
    """Evaluate the density and CDF at a point."""
    chosen = _resolve_parametrization(distribution, parametrization)
    values = _parse_params(chosen, params)
    table = Table(title=f"{distribution} ({chosen.name}) at x={x:g}")
    table.add_column("Function")
    table.add_column("Value", justify="right")
    table.add_row("density", _format_metric(chosen.evaluate(x, values, kind="pdf"), digits=6))
    table.add_row("cdf", _format_metric(chosen.evaluate(x, values, kind="cdf"), digits=6))
    console.print(table)


@app.command()
def summary(  # noqa: B008
    distribution: str = DISTRIBUTION_ARGUMENT,
    parametrization: str | None = PARAMETRIZATION_OPTION,
    params: list[str] | None = PARAM_OPTION,
) -> None:
    """Show the derived quantities of a parameter vector."""
    chosen = _resolve_parametrization(distribution, parametrization)
    values = _parse_params(chosen, params)
    result = chosen.summarize(values, distribution=distribution)
    table = Table(title=f"{distribution} ({chosen.name})")
    table.add_column("Quantity")
    table.add_column("Value", justify="right")
    for name, value in result.quantities.items():
        table.add_row(name, _format_metric(value))
    console.print(table)


@app.command()
def curve(  # noqa: B008
    distribution: str = DISTRIBUTION_ARGUMENT,
    parametrization: str | None = PARAMETRIZATION_OPTION,
    params: list[str] | None = PARAM_OPTION,
    kind: str = KIND_OPTION,
    points: int = POINTS_OPTION,
    output: Path | None = OUTPUT_OPTION,
) -> None:
    """Sample the pdf or cdf over the plot range."""
    if kind not in ("pdf", "cdf"):
        console.print(f"[red]Unknown curve kind '{kind}'. Expected pdf or cdf.[/red]")
        raise typer.Exit(code=1)
    chosen = _resolve_parametrization(distribution, parametrization)
    values = _parse_params(chosen, params)
    try:
        sampled = sample_parametrization(
            chosen, values, kind=kind, config=SamplingConfig(points=points)  # type: ignore[arg-type]
        )
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    frame = sampled.to_frame()
    if output is not None:
        frame.to_csv(output, index=False)
        console.print(f"[green]Curve written[/green] {output} (rows={len(frame)}, kind={kind})")
    else:
        console.print(frame.to_string(index=False))


def main() -> None:  # pragma: no cover - console entry
    app()
