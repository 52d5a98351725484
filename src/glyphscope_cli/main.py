import json
import logging
from pathlib import Path
from typing import Optional

import typer
from glyphscope_analyzer import AnalyzerConfig, Capabilities, analyze as run_analysis
from glyphscope_ast import ConfigError
from glyphscope_risk import registry

from .config import GlyphScopeConfig
from .converters import analysis_to_report
from .models import AnalysisReport, RiskIssue

app = typer.Typer(help="GlyphScope - Explain regular expressions and flag likely risks")

SEVERITY_RANK = {"INFO": 0, "LOW": 1, "MEDIUM": 2, "HIGH": 3}


def _configure_logging(verbose: bool):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _load_config(config_file: Path) -> AnalyzerConfig:
    try:
        return GlyphScopeConfig(config_file).to_analyzer_config()
    except ConfigError as e:
        typer.echo(f"Error: invalid config {config_file}: {e}")
        raise typer.Exit(code=2)


def _read_sample(sample: Optional[str], sample_file: Optional[Path]) -> str:
    if sample is not None and sample_file is not None:
        typer.echo("Error: Provide either --sample or --sample-file, not both")
        raise typer.Exit(code=2)
    if sample_file is not None:
        try:
            return sample_file.read_text(encoding="utf-8")
        except OSError as e:
            typer.echo(f"Error: cannot read {sample_file}: {e}")
            raise typer.Exit(code=2)
    return sample or ""


def _echo_parse_error(report: AnalysisReport):
    error = report.error
    where = f" (at index {error.index})" if error.index is not None else ""
    typer.echo(f"Error: pattern did not compile: {error.message}{where}")


def _echo_issue(issue: RiskIssue):
    typer.echo(f"{issue.severity.value}: [{issue.rule_id}] {issue.title} - {issue.message}")
    for example in issue.examples:
        typer.echo(f"    {example}")


def _echo_section(title: str, lines: list[str]):
    typer.echo(f"\n{title}:")
    for line in lines:
        typer.echo(f"  {line}")


def _echo_report(report: AnalysisReport):
    typer.echo(f"Pattern: {report.pattern}  Flags: {report.flags or '(none)'}")
    _echo_section("Summary", report.explanation.summary)
    _echo_section("Components", report.explanation.components)
    if report.explanation.constraints:
        _echo_section("Constraints", report.explanation.constraints)

    intent = report.intent
    _echo_section(f"Intent: {intent.label} ({intent.confidence:.2f})", intent.rationale)

    if report.matches:
        _echo_section(
            f"Matches ({len(report.matches)})",
            [f"line {m.line_number}, col {m.column}: {m.text!r}" for m in report.matches],
        )

    if report.risks:
        typer.echo("\nRisks:")
        for issue in report.risks:
            _echo_issue(issue)
    else:
        typer.echo("\nNo obvious risks detected.")

    if report.fp_fn is not None:
        fp_fn = report.fp_fn
        if fp_fn.likely_false_positives:
            _echo_section(
                "Likely false positives",
                [f"{c.text!r}: {c.reason}" for c in fp_fn.likely_false_positives],
            )
        if fp_fn.likely_false_negatives:
            _echo_section(
                "Likely false negatives",
                [f"{c.text!r}: {c.reason}" for c in fp_fn.likely_false_negatives],
            )
        _echo_section("Notes", fp_fn.notes)


@app.command()
def analyze(
    pattern: str = typer.Argument(..., help="Pattern body (Python re syntax)"),
    flags: str = typer.Option("", "--flags", "-f", help="Flag letters from 'gimsuy'"),
    sample: Optional[str] = typer.Option(None, "--sample", "-s", help="Sample text to match against"),
    sample_file: Optional[Path] = typer.Option(None, help="Read sample text from a file"),
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    config_file: Path = typer.Option(Path(".glyphscope.toml"), "--config", help="Path to config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Explain a pattern and report intent, matches and risks"""
    _configure_logging(verbose)
    config = _load_config(config_file)
    text = _read_sample(sample, sample_file)

    report = analysis_to_report(run_analysis(pattern, flags, text, config))

    if json_output:
        typer.echo(report.model_dump_json(indent=2))
    elif report.ok:
        _echo_report(report)
    else:
        _echo_parse_error(report)

    if not report.ok:
        raise typer.Exit(code=1)


@app.command()
def risks(
    pattern: str = typer.Argument(..., help="Pattern body (Python re syntax)"),
    flags: str = typer.Option("", "--flags", "-f", help="Flag letters from 'gimsuy'"),
    sample: Optional[str] = typer.Option(None, "--sample", "-s", help="Sample text to match against"),
    sample_file: Optional[Path] = typer.Option(None, help="Read sample text from a file"),
    severity: str = typer.Option("INFO", help="Minimum severity to show"),
    json_output: bool = typer.Option(False, "--json", help="Print the warnings as JSON"),
    config_file: Path = typer.Option(Path(".glyphscope.toml"), "--config", help="Path to config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Report likely risks in a pattern"""
    _configure_logging(verbose)
    min_rank = SEVERITY_RANK.get(severity.upper())
    if min_rank is None:
        typer.echo(f"Error: unknown severity '{severity}'")
        raise typer.Exit(code=2)

    config = _load_config(config_file)
    config.capabilities = Capabilities(risk_detection=True, false_positive_negative=False)
    text = _read_sample(sample, sample_file)
    report = analysis_to_report(run_analysis(pattern, flags, text, config))

    if not report.ok:
        _echo_parse_error(report)
        raise typer.Exit(code=1)

    shown = [i for i in report.risks if SEVERITY_RANK[i.severity.value] >= min_rank]
    if json_output:
        typer.echo(json.dumps([i.model_dump(mode="json") for i in shown], indent=2))
    else:
        for issue in shown:
            _echo_issue(issue)
        typer.echo(f"\nTotal risks found: {len(report.risks)} ({len(shown)} reported)")

    if any(i.severity.value == "HIGH" for i in report.risks):
        raise typer.Exit(code=1)


@app.command()
def rules():
    """List the registered risk rules"""
    for rule in registry.get_all_rules():
        typer.echo(f"{rule.rule_id:<34} {rule.severity.value.upper():<7} {rule.name}")


if __name__ == "__main__":
    app()
