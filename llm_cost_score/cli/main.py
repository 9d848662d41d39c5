"""
CLI interface for LLM Cost Score.

Provides command-line access to monthly cost estimation.
"""

import sys
from typing import Optional

import structlog
import typer
import yaml
from rich.console import Console
from rich.table import Table

from llm_cost_score.config.loader import CostConfig, default_cost_config, load_cost_config
from llm_cost_score.core.estimator import CostResult, estimate
from llm_cost_score.core.pricing import ModelCandidate, cost_tier
from llm_cost_score.logging import setup_logging

app = typer.Typer()
console = Console()
logger = structlog.get_logger()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1


def _load_config(config_path: Optional[str], max_cost: Optional[float]) -> CostConfig:
    """Load config from file (or defaults) and apply a ceiling override."""
    config = load_cost_config(config_path) if config_path else default_cost_config()
    if max_cost is not None:
        config = CostConfig(max_monthly_cost=max_cost, usage=config.usage)
    return config


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging"
    ),
):
    """LLM Cost Score CLI."""
    setup_logging("debug" if verbose else "warning")
    if ctx.invoked_subcommand is None:
        console.print("LLM Cost Score - Use --help to see available commands")


@app.command("estimate")
def estimate_command(
    model_id: str = typer.Argument(..., help="Model identifier"),
    prompt_price: float = typer.Option(
        ...,
        "--prompt-price",
        "-p",
        help="Price per 1M prompt tokens"
    ),
    completion_price: float = typer.Option(
        ...,
        "--completion-price",
        "-c",
        help="Price per 1M completion tokens"
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="YAML file with usage table and cost ceiling"
    ),
    max_cost: Optional[float] = typer.Option(
        None,
        "--max-cost",
        "-m",
        help="Override the monthly cost ceiling"
    ),
):
    """Estimate monthly cost per user and affordability score for a model."""
    try:
        config = _load_config(config_path, max_cost)
        candidate = ModelCandidate(
            id=model_id,
            prompt_price=prompt_price,
            completion_price=completion_price
        )
        result = estimate(candidate, config.usage, config.max_monthly_cost)
        logger.debug(
            "cost_estimated",
            model_id=result.model_id,
            monthly_cost=result.monthly_cost_per_user,
            score=result.score,
            patterns=len(result.breakdown),
        )
    except (ValueError, FileNotFoundError, yaml.YAMLError) as e:
        logger.debug("estimate_failed", model_id=model_id, error=str(e))
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    _display_cost_result(result, candidate, config.max_monthly_cost)
    sys.exit(EXIT_CODE_PASS)


@app.command()
def usage(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="YAML file with usage table and cost ceiling"
    ),
):
    """Show the monthly usage table used for estimates."""
    try:
        config = _load_config(config_path, None)
    except (ValueError, FileNotFoundError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    table = Table(title="Monthly Usage per User")
    table.add_column("Pattern")
    table.add_column("Calls", justify="right")
    table.add_column("Input tokens", justify="right")
    table.add_column("Output tokens", justify="right")
    for pattern in config.usage:
        table.add_row(
            pattern.pattern,
            f"{pattern.calls:,}",
            f"{pattern.input_tokens:,}",
            f"{pattern.output_tokens:,}",
        )
    console.print(table)
    console.print(f"Cost ceiling: {_format_currency(config.max_monthly_cost)}/month")


def _format_currency(amount: float, places: int = 2) -> str:
    """Format currency with proper symbols and formatting."""
    return f"${amount:,.{places}f}"


def _display_cost_result(result: CostResult, candidate: ModelCandidate, max_monthly_cost: float):
    """Display a cost estimate as a breakdown table followed by totals."""
    table = Table(title=f"Monthly Cost: {candidate.display_name}")
    table.add_column("Pattern")
    table.add_column("Calls", justify="right")
    table.add_column("In", justify="right")
    table.add_column("Out", justify="right")
    table.add_column("$/month", justify="right")
    for entry in result.breakdown:
        table.add_row(
            entry.pattern,
            f"{entry.calls_per_month:,}",
            f"{entry.input_tokens:,}",
            f"{entry.output_tokens:,}",
            _format_currency(entry.monthly_cost, 4),
        )
    console.print(table)

    console.print(f"Monthly cost per user: {_format_currency(result.monthly_cost_per_user, 4)}")
    console.print(f"Cost ceiling: {_format_currency(max_monthly_cost)}")
    console.print(f"Score: {result.score:.1f} ({result.grade})")
    console.print(f"Tier: {cost_tier(candidate.completion_price).value}")


if __name__ == "__main__":
    app()
