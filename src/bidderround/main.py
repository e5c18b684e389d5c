"""CLI entry point for bidder round resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from bidderround import __version__

if TYPE_CHECKING:
    from bidderround.config.models import AppConfig
    from bidderround.resolution.domain import ResolutionOutcome, ResolutionStatus
    from bidderround.state.repository import BidderRoundRepository

# Exit codes of the resolve command. A batch exits with the highest code seen.
EXIT_SUCCESS = 0
EXIT_ALREADY_RESOLVED = 2
EXIT_NOT_ALL_OFFERS_GIVEN = 3
EXIT_NOT_ENOUGH_MONEY = 4
EXIT_FAULT = 5


def exit_code_for(status: ResolutionStatus) -> int:
    """Map an outcome kind to the process exit code."""
    from bidderround.resolution.domain import ResolutionStatus

    return {
        ResolutionStatus.SUCCESS: EXIT_SUCCESS,
        ResolutionStatus.ALREADY_RESOLVED: EXIT_ALREADY_RESOLVED,
        ResolutionStatus.NOT_ALL_OFFERS_GIVEN: EXIT_NOT_ALL_OFFERS_GIVEN,
        ResolutionStatus.NOT_ENOUGH_MONEY: EXIT_NOT_ENOUGH_MONEY,
        ResolutionStatus.FAULT: EXIT_FAULT,
    }[status]


def _bootstrap(config_dir: str) -> tuple[AppConfig, BidderRoundRepository]:
    from bidderround.config.loader import load_config
    from bidderround.monitoring.logging import setup_logging
    from bidderround.state.database import create_db_engine, get_session_factory, init_db
    from bidderround.state.repository import BidderRoundRepository

    config = load_config(config_dir=config_dir)
    setup_logging(
        level=config.logging.level,
        json_output=config.logging.json_output,
        log_dir=config.logging.log_dir,
    )
    engine = create_db_engine(url=config.database.url, echo=config.database.echo)
    init_db(engine)
    return config, BidderRoundRepository(get_session_factory(engine))


def _describe(outcome: ResolutionOutcome) -> str:
    from bidderround.resolution.domain import ResolutionStatus

    if outcome.status == ResolutionStatus.SUCCESS:
        return f"round {outcome.round_won} won with {outcome.reached_amount}"
    if outcome.status == ResolutionStatus.ALREADY_RESOLVED and outcome.report is not None:
        return f"already resolved (round {outcome.report.round_won})"
    if outcome.status == ResolutionStatus.FAULT:
        return f"fault: {outcome.error}"
    return outcome.status.value.replace("_", " ")


@click.group()
@click.version_option(version=__version__, prog_name="bidderround")
def cli() -> None:
    """Bidder round resolution for cooperative contribution rounds."""


@cli.command()
@click.argument("bidder_round_id", type=int, required=False)
@click.option("--config-dir", default="config", help="Path to configuration directory.")
@click.option("--skip-resolved", is_flag=True, help="Only visit bidder rounds without a report.")
def resolve(bidder_round_id: int | None, config_dir: str, skip_resolved: bool) -> None:
    """Check whether a round reaches the target amount and record the winner.

    Without BIDDER_ROUND_ID every bidder round is checked.
    """
    from bidderround.monitoring.logging import emit, get_logger
    from bidderround.resolution.domain import ResolutionOutcome, ResolutionStatus
    from bidderround.resolution.errors import ResolutionError
    from bidderround.resolution.service import ResolutionService

    config, repo = _bootstrap(config_dir)
    log = get_logger("bidderround.main")
    service = ResolutionService(repo, repo, annualization_factor=config.resolution.annualization_factor)

    if bidder_round_id is None:
        outcomes = service.resolve_all(include_resolved=not skip_resolved)
    else:
        try:
            outcomes = {bidder_round_id: service.resolve(bidder_round_id)}
        except ResolutionError as e:
            emit(log, "error", "bidder_round_resolution_failed", bidder_round_id=bidder_round_id, error=str(e))
            outcomes = {
                bidder_round_id: ResolutionOutcome(
                    bidder_round_id=bidder_round_id,
                    status=ResolutionStatus.FAULT,
                    error=str(e),
                )
            }

    if not outcomes:
        click.echo("No bidder rounds found.")
        return

    for outcome in outcomes.values():
        click.echo(f"Bidder round {outcome.bidder_round_id}: {_describe(outcome)}")

    code = max(exit_code_for(o.status) for o in outcomes.values())
    emit(log, "info", "resolution_run_finished", bidder_rounds=len(outcomes), exit_code=code)
    if code != EXIT_SUCCESS:
        raise SystemExit(code)


@cli.command()
@click.argument("bidder_round_id", type=int)
@click.option("--config-dir", default="config", help="Path to configuration directory.")
def aggregates(bidder_round_id: int, config_dir: str) -> None:
    """Show offer count and annualized sum per round."""
    from bidderround.resolution.errors import ResolutionError
    from bidderround.resolution.service import ResolutionService

    config, repo = _bootstrap(config_dir)
    service = ResolutionService(repo, repo, annualization_factor=config.resolution.annualization_factor)

    try:
        rounds = service.get_aggregates(bidder_round_id)
        expected = repo.participant_count(bidder_round_id)
    except ResolutionError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(EXIT_FAULT) from e

    if not rounds:
        click.echo(f"No offers for bidder round {bidder_round_id}.")
        return

    header = f"{'Round':>5} {'Offers':>9} {'Sum':>14}"
    click.echo(f"Bidder round {bidder_round_id} ({expected} participants expected)")
    click.echo(header)
    click.echo("-" * len(header))
    for aggregate in rounds.values():
        offers = f"{aggregate.offer_count}/{expected}"
        click.echo(f"{aggregate.round_index:>5} {offers:>9} {aggregate.weighted_sum:>14}")


@cli.command()
@click.argument("bidder_round_id", type=int)
@click.argument("participant_id", type=int)
@click.option("--config-dir", default="config", help="Path to configuration directory.")
def offers(bidder_round_id: int, participant_id: int, config_dir: str) -> None:
    """List a participant's offers, one line per configured round."""
    from bidderround.resolution.errors import ResolutionError
    from bidderround.resolution.service import ResolutionService

    config, repo = _bootstrap(config_dir)
    service = ResolutionService(repo, repo, annualization_factor=config.resolution.annualization_factor)

    try:
        slots = service.get_offer_slots(bidder_round_id, participant_id)
    except ResolutionError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(EXIT_FAULT) from e

    for round_index, offer in slots.items():
        amount = "-" if offer is None else str(offer.amount)
        click.echo(f"Round {round_index}: {amount}")


@cli.command()
@click.argument("bidder_round_id", type=int)
@click.option("--config-dir", default="config", help="Path to configuration directory.")
def sync_participants(bidder_round_id: int, config_dir: str) -> None:
    """Attach all currently active participants to a bidder round."""
    from bidderround.resolution.errors import ResolutionError

    _, repo = _bootstrap(config_dir)
    try:
        result = repo.sync_participants(bidder_round_id)
    except ResolutionError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(EXIT_FAULT) from e

    click.echo(f"Attached: {len(result.attached)}, detached: {len(result.detached)}")


@cli.command()
@click.option("--config-dir", default="config", help="Path to configuration directory.")
def validate_config(config_dir: str) -> None:
    """Validate configuration files without touching the database."""
    from bidderround.config.loader import load_config

    try:
        config = load_config(config_dir=config_dir)
        click.echo("Configuration is valid.")
        click.echo(f"  Database: {config.database.url}")
        click.echo(f"  Log level: {config.logging.level}")
        click.echo(f"  Annualization factor: {config.resolution.annualization_factor}")
    except Exception as e:
        click.echo(f"Configuration error: {e}", err=True)
        raise SystemExit(1) from e


@cli.command()
@click.option("--config-dir", default="config", help="Path to configuration directory.")
def init_db_cmd(config_dir: str) -> None:
    """Initialize the database (create tables)."""
    from bidderround.config.loader import load_config
    from bidderround.state.database import create_db_engine, init_db

    config = load_config(config_dir=config_dir)
    engine = create_db_engine(url=config.database.url, echo=config.database.echo)
    init_db(engine)
    click.echo(f"Database initialized at {config.database.url}")


if __name__ == "__main__":
    cli()
