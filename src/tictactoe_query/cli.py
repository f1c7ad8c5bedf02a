"""
TicTacToe Leaderboard CLI

Reads the leaderboard length of the TicTacToe contract on Celo Alfajores.

Commands:
  leaderboard  - Print the current leaderboard length (default)
  info         - Show endpoint, contract and chain information
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import config
from .chain.abi import function_names, load_abi
from .errors import LeaderboardError
from .leaderboard import (
    LeaderboardQuery,
    fetch_chain_status,
    fetch_leaderboard_length,
    format_report,
)


# ============ Constants ============

VERSION = "0.1.0"


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="tictactoe-leaderboard")
@click.option("--verbose", "-v", is_flag=True, help="Log RPC traffic to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """TicTacToe leaderboard reader for Celo Alfajores."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger(__package__).setLevel(logging.DEBUG if verbose else logging.WARNING)
    if ctx.invoked_subcommand is None:
        ctx.invoke(leaderboard)


# ============ Shared Options ============


def _query_options(func):
    func = click.option(
        "--timeout",
        type=float,
        default=None,
        help=f"RPC timeout in seconds, 0 to wait forever [env: {config.TIMEOUT_ENV}]",
    )(func)
    func = click.option(
        "--block",
        default=config.get_block,
        help=f"Block tag or number to read at [env: {config.BLOCK_ENV}]",
    )(func)
    func = click.option(
        "--abi",
        "abi_path",
        type=click.Path(dir_okay=False, path_type=Path),
        default=config.get_abi_path,
        help=f"ABI JSON file (default: bundled TicTacToe ABI) [env: {config.ABI_PATH_ENV}]",
    )(func)
    func = click.option(
        "--contract",
        default=config.get_contract_address,
        help=f"TicTacToe contract address [env: {config.CONTRACT_ADDRESS_ENV}]",
    )(func)
    func = click.option(
        "--rpc-url",
        default=config.get_rpc_url,
        help=f"JSON-RPC endpoint URL [env: {config.RPC_URL_ENV}]",
    )(func)
    return func


def _build_query(
    rpc_url: str,
    contract: str,
    abi_path: Optional[Path],
    block: str,
    timeout: Optional[float],
) -> LeaderboardQuery:
    try:
        if timeout is None:
            timeout = config.get_timeout()
        return LeaderboardQuery(
            rpc_url=rpc_url,
            contract_address=contract,
            abi_path=abi_path,
            block=block,
            timeout=timeout,
        )
    except LeaderboardError as exc:
        _fail(exc)
    except ValueError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(2)


def _fail(exc: LeaderboardError) -> None:
    click.secho(f"ERROR: {exc}", fg="red", err=True)
    sys.exit(exc.exit_code)


# ============ Commands ============


@cli.command()
@_query_options
def leaderboard(
    rpc_url: str,
    contract: str,
    abi_path: Optional[Path],
    block: str,
    timeout: Optional[float],
) -> None:
    """Print the current leaderboard length."""
    query = _build_query(rpc_url, contract, abi_path, block, timeout)

    try:
        length = asyncio.run(fetch_leaderboard_length(query))
    except LeaderboardError as exc:
        _fail(exc)

    click.echo(format_report(length))


@cli.command()
@_query_options
def info(
    rpc_url: str,
    contract: str,
    abi_path: Optional[Path],
    block: str,
    timeout: Optional[float],
) -> None:
    """Show endpoint, contract and chain information."""
    query = _build_query(rpc_url, contract, abi_path, block, timeout)

    try:
        functions = function_names(load_abi(query.abi_path))
    except LeaderboardError as exc:
        _fail(exc)

    click.echo(click.style("  Endpoint:  ", dim=True) + query.rpc_url)
    click.echo(click.style("  Contract:  ", dim=True) + query.contract_address)
    click.echo(click.style("  Block:     ", dim=True) + query.block)
    click.echo(
        click.style("  ABI:       ", dim=True)
        + (str(query.abi_path) if query.abi_path else "bundled tictactoe.abi.json")
    )
    click.echo(click.style("  Functions: ", dim=True) + (", ".join(functions) or "(none)"))

    try:
        status = asyncio.run(fetch_chain_status(query))
    except LeaderboardError as exc:
        click.echo(
            click.style("  Chain:     ", dim=True)
            + click.style(f"unreachable ({exc})", fg="yellow")
        )
        return

    click.echo(click.style("  Chain ID:  ", dim=True) + str(status["chain_id"]))
    click.echo(click.style("  Head:      ", dim=True) + str(status["block_number"]))
    if status["chain_id"] != config.ALFAJORES_CHAIN_ID:
        click.secho(
            f"  WARNING: endpoint is not Celo Alfajores (chain {config.ALFAJORES_CHAIN_ID})",
            fg="yellow",
        )


# ============ Entry Points ============


def main() -> None:
    """TicTacToe leaderboard CLI entry point."""
    config.load_env()
    cli()


if __name__ == "__main__":
    main()
