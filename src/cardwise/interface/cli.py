"""cardwise CLI: card management, reviews, queues, and config."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError

from cardwise.application.config import AppConfig, resolve_config
from cardwise.application.scheduler import format_interval
from cardwise.domain.errors import CardwiseError
from cardwise.domain.scheduling.models import CardRecord

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="cardwise: spaced-repetition scheduling for flashcards.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage cardwise configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def _configure_logging(verbose: int) -> None:
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.getLogger("cardwise").setLevel(level)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    store: Annotated[
        Path | None, typer.Option("--store", help="Card store file. Defaults to config.")
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for cardwise."""
    ctx.ensure_object(dict)
    ctx.obj["store_path"] = store
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


def _resolve(ctx: typer.Context, **overrides: Any) -> AppConfig:
    obj = ctx.obj or {}
    return resolve_config({"store_path": obj.get("store_path"), **overrides})


def _service(ctx: typer.Context, strict: bool | None = None):
    from cardwise.application.factory import get_review_service

    return get_review_service(_resolve(ctx), strict=strict)


def _fail(err: CardwiseError) -> None:
    typer.secho(f"Error: {err}", fg="red", err=True)
    raise typer.Exit(1)


def _card_dict(card: CardRecord) -> dict[str, Any]:
    return {"id": card.card_id, **card.to_record()}


# ---------------------------------------------------------------------------
# Card commands
# ---------------------------------------------------------------------------


@app.command()
def add(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Id of the new card.")],
):
    """[bold green]Add[/bold green] a new card. It is due immediately."""
    try:
        card = _service(ctx).add_card(card_id)
    except CardwiseError as e:
        _fail(e)
    typer.secho(f"Added '{card.card_id}'.", fg="green")


@app.command()
def show(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card id.")],
):
    """Print a card's stored scheduling record as JSON."""
    try:
        card = _service(ctx).get_card(card_id)
    except CardwiseError as e:
        _fail(e)
    typer.echo(json.dumps(_card_dict(card), indent=2))


@app.command()
def remove(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card id.")],
):
    """Delete a card and its scheduling record."""
    try:
        _service(ctx).remove_card(card_id)
    except CardwiseError as e:
        _fail(e)
    typer.secho(f"Removed '{card_id}'.", fg="green")


# ---------------------------------------------------------------------------
# Review commands
# ---------------------------------------------------------------------------


@app.command()
def review(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card id.")],
    outcome: Annotated[str, typer.Argument(help="Recall rating: again, hard, good, easy.")],
    lenient: Annotated[
        bool,
        typer.Option("--lenient", help="Score unrecognized ratings as 'again' instead of failing."),
    ] = False,
):
    """[bold green]Review[/bold green] a card and schedule its next appearance."""
    try:
        result = _service(ctx, strict=False if lenient else None).review(card_id, outcome)
    except CardwiseError as e:
        _fail(e)

    memory = result.card.memory
    color = "green" if result.passed else "yellow"
    typer.secho(
        f"{card_id}: {result.outcome.value} -> next review in {format_interval(memory.interval)}",
        fg=color,
    )
    typer.echo(f"Repetitions: {memory.repetitions}  Ease: {memory.ease_factor:.2f}")


@app.command()
def preview(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card id.")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show when the card would come back for each rating, without reviewing it."""
    try:
        projected = _service(ctx).preview(card_id)
    except CardwiseError as e:
        _fail(e)

    if json_output:
        typer.echo(json.dumps({o.value: days for o, days in projected.items()}, indent=2))
        return
    for outcome, days in projected.items():
        typer.echo(f"{outcome.value:<6} {format_interval(days)}")


# ---------------------------------------------------------------------------
# Queue commands
# ---------------------------------------------------------------------------


@app.command()
def due(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List due cards, most overdue first."""
    try:
        cards = _service(ctx).due_cards()
    except CardwiseError as e:
        _fail(e)

    if json_output:
        typer.echo(json.dumps([_card_dict(c) for c in cards], indent=2))
        return
    if not cards:
        typer.secho("No cards due.", fg="green")
        return
    typer.echo(f"Due cards: {len(cards)}")
    for card in cards:
        typer.echo(f"  {card.card_id}")


@app.command()
def forecast(
    ctx: typer.Context,
    days: Annotated[int | None, typer.Option(help="Number of days to forecast.")] = None,
):
    """Count cards coming due on each of the next few days."""
    from cardwise.application.factory import get_review_service

    try:
        config = _resolve(ctx, forecast_days=days)
    except ValidationError as e:
        typer.secho(f"Invalid option: {e.errors()[0]['msg']}", fg="red", err=True)
        raise typer.Exit(2)

    try:
        rows = get_review_service(config).forecast(config.forecast_days)
    except CardwiseError as e:
        _fail(e)

    for i, (day, count) in enumerate(rows):
        label = "Today" if i == 0 else day.strftime("%a %Y-%m-%d")
        typer.echo(f"{label:<15} {count}")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
