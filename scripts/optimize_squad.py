#!/usr/bin/env python3
"""Squad Optimizer - pick the best team for a budget from a CSV player pool.

The CSV needs one row per player with `player_id`, `position`, `cost` and
`score` columns (names configurable). Optional `name`, `team`, `status` and
`is_injured` columns are used for display and eligibility filtering.

Usage:
    # Best formation from the whole catalog, exact solver
    uv run python scripts/optimize_squad.py --players pool.csv --budget 1000

    # Fixed formation with the approximate solver
    uv run python scripts/optimize_squad.py --players pool.csv --budget 100000 --formation 4-3-3 --solver approximate

    # Exclude players and emit JSON
    uv run python scripts/optimize_squad.py --players pool.csv --budget 1000 --exclude 17 --exclude 42 --json

    # Tuned settings from a file, and a look at what is in effect
    uv run python scripts/optimize_squad.py --config squad.json --show-config
    uv run python scripts/optimize_squad.py --config squad.json --players pool.csv --budget 100000 --solver approximate
"""

import json
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd
import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from squad_picker.config import VALID_SOLVERS, config, load_config  # noqa: E402
from squad_picker.config.utils import (  # noqa: E402
    export_config_to_json,
    print_config_summary,
)
from squad_picker.domain.models import AUTO_FORMATION, SelectionOutcome  # noqa: E402
from squad_picker.domain.services import (  # noqa: E402
    CandidatePoolService,
    OptimizationService,
)

app = typer.Typer(help="Squad Optimizer - budget-constrained team selection")
console = Console()


@app.command()
def main(
    players: Optional[Path] = typer.Option(
        None, "--players", "-p", help="CSV file with one row per player"
    ),
    budget: Optional[int] = typer.Option(None, "--budget", "-b", help="Total budget"),
    formation: str = typer.Option(
        AUTO_FORMATION,
        "--formation",
        "-f",
        help="Formation name (e.g. 4-3-3) or 'auto' to try the whole catalog",
    ),
    solver: Optional[str] = typer.Option(
        None,
        "--solver",
        "-s",
        help="Solver: exact, approximate, greedy (default from settings)",
    ),
    exclude: Optional[List[str]] = typer.Option(
        None, "--exclude", "-x", help="Player id to exclude (repeatable)"
    ),
    score_column: str = typer.Option(
        "score", "--score-column", help="Column holding the player score"
    ),
    cost_column: str = typer.Option(
        "cost", "--cost-column", help="Column holding the player cost"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    alternatives: int = typer.Option(
        3, "--alternatives", "-a", help="Number of alternative formations to show"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="JSON settings file (SQUAD_* env vars still apply)"
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Print the effective settings and exit"
    ),
    save_config: Optional[Path] = typer.Option(
        None, "--save-config", help="Write the effective settings to a JSON file and exit"
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """Select the highest-scoring team that fits the budget."""
    # Configure logging
    logger.remove()
    if debug:
        logger.add(sys.stderr, level="DEBUG")
    else:
        logger.add(sys.stderr, level="WARNING" if as_json else "INFO")

    if config_file is not None:
        if not config_file.exists():
            logger.error(f"Config file not found: {config_file}")
            raise typer.Exit(2)
        settings = load_config(config_path=config_file)
    else:
        settings = config

    if show_config or save_config is not None:
        if show_config:
            print_config_summary(settings)
        if save_config is not None:
            export_config_to_json(settings, save_config)
        raise typer.Exit(0)

    if players is None or budget is None:
        logger.error("--players and --budget are required")
        raise typer.Exit(2)

    solver = solver or settings.optimization.default_solver
    if solver not in VALID_SOLVERS:
        logger.error(f"Solver must be one of {VALID_SOLVERS}, got '{solver}'")
        raise typer.Exit(2)

    if not players.exists():
        logger.error(f"Players file not found: {players}")
        raise typer.Exit(2)

    try:
        players_df = pd.read_csv(players)
        candidates = CandidatePoolService(settings=settings).build_pool(
            players_df,
            score_column=score_column,
            cost_column=cost_column,
            excluded_ids=exclude,
        )
        result = OptimizationService(settings=settings).select_formation(
            candidates, budget=budget, formation=formation, solver=solver
        )
    except ValueError as e:
        logger.error(f"❌ Invalid input: {e}")
        if debug:
            logger.exception("Full traceback:")
        raise typer.Exit(2)

    if result.is_failure:
        if as_json:
            typer.echo(json.dumps({"error": result.error.model_dump(mode="json")}))
        else:
            console.print(f"[bold red]❌ {result.error.message}[/bold red]")
        raise typer.Exit(1)

    outcome = result.value
    if as_json:
        typer.echo(json.dumps(outcome_to_dict(outcome)))
    else:
        print_outcome(outcome, alternatives)


def outcome_to_dict(outcome: SelectionOutcome) -> dict:
    """JSON-friendly view of a selection outcome."""
    best = outcome.best
    return {
        "formation": best.formation,
        "solver": best.solver.value,
        "total_cost": best.total_cost,
        "total_score": best.total_score,
        "budget": best.budget,
        "assignments": best.to_records(),
        "alternatives": [
            {
                "formation": s.formation,
                "total_cost": s.total_cost,
                "total_score": s.total_score,
            }
            for s in outcome.alternatives[1:]
        ],
        "stats": outcome.stats.model_dump(),
    }


def print_outcome(outcome: SelectionOutcome, alternatives: int):
    """Print the selection in rich formatted output."""
    best = outcome.best
    console.print(
        f"\n[bold green]🏆 {best.formation}[/bold green] "
        f"score [bold]{best.total_score:.2f}[/bold], "
        f"cost {best.total_cost}/{best.budget} ({best.solver.value})"
    )

    team_table = Table(show_header=True, box=None, padding=(0, 1))
    team_table.add_column("Slot", style="cyan")
    team_table.add_column("Player")
    team_table.add_column("Pos")
    team_table.add_column("Team")
    team_table.add_column("Cost", justify="right")
    team_table.add_column("Score", justify="right", style="green")
    for record in best.to_records():
        team_table.add_row(
            record["slot_id"],
            record["name"],
            record["category"],
            record["team"] or "",
            str(record["cost"]),
            f"{record['score']:.2f}",
        )
    console.print(team_table)

    others = outcome.alternatives[1 : alternatives + 1]
    if others:
        console.print("\n[bold]📋 Alternatives[/bold]")
        alt_table = Table(show_header=True, box=None, padding=(0, 2))
        alt_table.add_column("Formation", style="cyan")
        alt_table.add_column("Score", justify="right")
        alt_table.add_column("Cost", justify="right")
        for solution in others:
            alt_table.add_row(
                solution.formation,
                f"{solution.total_score:.2f}",
                str(solution.total_cost),
            )
        console.print(alt_table)

    stats = outcome.stats
    console.print(
        f"\n[dim]{stats.formations_feasible}/{stats.formations_evaluated} formations feasible, "
        f"{stats.candidates_considered} candidates, {stats.generation_time_ms:.0f}ms[/dim]"
    )


if __name__ == "__main__":
    app()
