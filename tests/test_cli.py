import pandas as pd
import pytest
from typer.testing import CliRunner

from distlab import __version__
from distlab.cli import app

runner = CliRunner()

_TABLE_PREFIXES = tuple("┏┓┛┗┃┡┠┨┬┴┼┽┾┿╀╁╂╃╄╅╆╇╈╉╊╋│└┘┌┐")


def _parse_table_lines(lines: list[str]) -> tuple[list[str], dict[str, dict[str, str]]]:
    header: list[str] = []
    rows: dict[str, dict[str, str]] = {}
    for line in lines:
        if line.startswith("┃"):
            header = [cell.strip() for cell in line.split("┃")[1:-1]]
        elif line.startswith("│") and header:
            cells = [cell.strip() for cell in line.split("│")[1:-1]]
            if len(cells) != len(header) or not cells[0]:
                continue
            rows[cells[0]] = dict(zip(header[1:], cells[1:], strict=False))
    return header, rows


def _parse_cli_tables(output: str) -> list[tuple[list[str], dict[str, dict[str, str]]]]:
    tables: list[tuple[list[str], dict[str, dict[str, str]]]] = []
    current: list[str] = []
    for line in output.splitlines():
        if line and line[0] in _TABLE_PREFIXES:
            current.append(line)
        else:
            if current:
                tables.append(_parse_table_lines(current))
                current = []
    if current:
        tables.append(_parse_table_lines(current))
    return tables


def test_registry_command_lists_distributions() -> None:
    result = runner.invoke(app, ["registry"])
    assert result.exit_code == 0
    _, rows = _parse_cli_tables(result.stdout)[0]
    assert {"normal", "gamma", "poisson", "negativebinomial"} <= set(rows)
    assert rows["poisson"]["Type"] == "discrete"
    assert rows["beta"]["Type"] == "continuous"


def test_version_option() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_describe_command_shows_parametrization() -> None:
    result = runner.invoke(app, ["describe", "weibull"])
    assert result.exit_code == 0
    assert "shift/scale/shape" in result.stdout
    assert "en.wikipedia.org" in result.stdout
    tables = _parse_cli_tables(result.stdout)
    _, quantities = tables[-1]
    assert {"mean", "variance", "median", "mode"} <= set(quantities)


def test_describe_unknown_parametrization_errors() -> None:
    result = runner.invoke(app, ["describe", "normal", "--parametrization", "precision"])
    assert result.exit_code == 1
    assert "precision" in result.stdout


def test_evaluate_command_reports_density_and_cdf() -> None:
    result = runner.invoke(app, ["evaluate", "normal", "0"])
    assert result.exit_code == 0
    _, rows = _parse_cli_tables(result.stdout)[0]
    assert float(rows["density"]["Value"]) == pytest.approx(0.398942, abs=1e-6)
    assert float(rows["cdf"]["Value"]) == 0.5


def test_evaluate_command_accepts_parameters() -> None:
    result = runner.invoke(app, ["evaluate", "poisson", "4", "--param", "lambda=4"])
    assert result.exit_code == 0
    _, rows = _parse_cli_tables(result.stdout)[0]
    assert float(rows["density"]["Value"]) == pytest.approx(0.1954, abs=1e-4)


@pytest.mark.parametrize(
    "params,message",
    [
        (["sigma=-1"], "Invalid parameters"),
        (["tau=1"], "Unknown parameter"),
        (["sigma"], "Expected name=value"),
    ],
)
def test_evaluate_command_rejects_bad_parameters(params: list[str], message: str) -> None:
    args = ["evaluate", "normal", "0"]
    for item in params:
        args += ["-p", item]
    result = runner.invoke(app, args)
    assert result.exit_code == 1
    assert message in result.stdout


def test_summary_marks_undefined_quantities() -> None:
    result = runner.invoke(app, ["summary", "studentt", "-p", "nu=1", "-p", "mu=3"])
    assert result.exit_code == 0
    _, rows = _parse_cli_tables(result.stdout)[0]
    assert rows["mean"]["Value"] == "undefined"
    assert rows["variance"]["Value"] == "undefined"
    assert float(rows["median"]["Value"]) == 3.0


def test_summary_binomial_defaults() -> None:
    result = runner.invoke(app, ["summary", "binomial"])
    assert result.exit_code == 0
    _, rows = _parse_cli_tables(result.stdout)[0]
    assert float(rows["mean"]["Value"]) == 10.0
    assert float(rows["variance"]["Value"]) == 5.0


def test_curve_command_writes_csv(tmp_path) -> None:
    output = tmp_path / "curve.csv"
    result = runner.invoke(
        app,
        ["curve", "gamma", "-p", "k=2", "--kind", "cdf", "--points", "40", "--output", str(output)],
    )
    assert result.exit_code == 0
    assert "Curve written" in result.stdout
    frame = pd.read_csv(output)
    assert list(frame.columns) == ["x", "cdf"]
    assert len(frame) == 40
    assert frame["cdf"].is_monotonic_increasing


def test_curve_command_rejects_unknown_kind() -> None:
    result = runner.invoke(app, ["curve", "normal", "--kind", "sf"])
    assert result.exit_code == 1
    assert "Unknown curve kind" in result.stdout


def test_unknown_distribution_errors() -> None:
    result = runner.invoke(app, ["summary", "not-a-dist"])
    assert result.exit_code != 0
    assert "not-a-dist" in result.stdout.lower()


def test_evaluate_command_far_in_the_tail() -> None:
    result = runner.invoke(app, ["evaluate", "poisson", "1e20", "-p", "lambda=4"])
    assert result.exit_code == 0
    _, rows = _parse_cli_tables(result.stdout)[0]
    assert float(rows["density"]["Value"]) == 0.0
    assert float(rows["cdf"]["Value"]) == 1.0
