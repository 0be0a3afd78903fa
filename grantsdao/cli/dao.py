#!/usr/bin/env python3
"""
GrantsDAO CLI

Inspect and dry-run a DAO deployment configuration.

Usage:
    grantsdao show <config.toml>
    grantsdao validate <config.toml>
    grantsdao simulate <config.toml> [--fund N] [--amount N] [--receiver ADDRESS]
"""

import json

import click

from grantsdao import __version__
from grantsdao.clock import ManualClock
from grantsdao.config import GrantsDAOConfig, load_config
from grantsdao.exceptions import ConfigurationError, GrantsDAOError
from grantsdao.governance import GrantsDAO
from grantsdao.logger import set_log_level
from grantsdao.tokens import MockToken


def _load(config_path: str) -> GrantsDAOConfig:
    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        raise click.ClickException(str(e))
    set_log_level(config.logging.level)
    return config


def _deploy(config: GrantsDAOConfig, token: MockToken, clock=None) -> GrantsDAO:
    try:
        return GrantsDAO.from_config(config, token, clock=clock)
    except GrantsDAOError as e:
        raise click.ClickException(f"Invalid DAO configuration: {e}")


@click.group()
@click.version_option(version=__version__, prog_name="grantsdao")
def cli():
    """GrantsDAO Command Line Interface

    Check and dry-run treasury governance deployments.
    """
    pass


@cli.command("show")
@click.argument("config_path", type=click.Path())
def show_cmd(config_path: str):
    """Print the resolved configuration (file + environment overrides)."""
    config = _load(config_path)
    click.echo(json.dumps(config.to_dict(), indent=2))


@cli.command("validate")
@click.argument("config_path", type=click.Path())
def validate_cmd(config_path: str):
    """Check the membership and quorum rules of a configuration."""
    config = _load(config_path)
    dao = _deploy(config, MockToken("Validation Token", "VAL"))
    click.echo(
        f"OK: {len(dao.team_members())} team, {len(dao.community_members())} community, "
        f"toPass={dao.to_pass()}"
    )


@cli.command("simulate")
@click.argument("config_path", type=click.Path())
@click.option("--fund", default=1, type=int, show_default=True, help="Tokens minted to the treasury")
@click.option("--amount", default=1, type=int, show_default=True, help="Proposal amount")
@click.option("--receiver", default=None, help="Proposal receiver (default: the proposer)")
def simulate_cmd(config_path: str, fund: int, amount: int, receiver):
    """Dry-run one proposal through its full lifecycle.

    A community member (or the first team member if there is none) proposes,
    time moves past the voting delay, and the remaining members approve,
    community first, until the proposal executes.
    """
    config = _load(config_path)
    clock = ManualClock()
    token = MockToken("Simulated Token", "SIM")
    dao = _deploy(config, token, clock)
    dao.subscribe(lambda event: click.echo(json.dumps(event.to_dict())))

    if fund > 0:
        token.mint(dao.address, fund)

    community = dao.community_members()
    team = dao.team_members()
    proposer = community[0] if community else team[0]

    try:
        pid = dao.create_proposal(proposer, receiver or proposer, amount)
        clock.advance(config.timing.voting_delay + 1)
        for voter in community + team:
            if not dao.proposal(pid).is_active:
                break
            if voter == proposer:
                continue
            dao.vote_proposal(voter, pid, True)
    except GrantsDAOError as e:
        raise click.ClickException(f"Simulation failed: {e}")

    if dao.proposal(pid).is_active:
        click.echo(f"Proposal #{pid} did not reach quorum")
    else:
        click.echo(
            f"Proposal #{pid} executed: receiver balance={token.balance_of(receiver or proposer)}, "
            f"locked={dao.locked()}"
        )


def main():
    cli()


if __name__ == "__main__":
    main()
